from datetime import datetime
from typing import List, Optional

import pydantic
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from app.core.exceptions import ValidationError
from app.services import contest_service, upload_service
from app.schemas import auth_schemas, contest_schemas
from app.schemas.common_schemas import MessageResponse
from app.api.dependencies import get_db, coordinator_only

router = APIRouter()

@router.get("/", response_model=List[contest_schemas.ContestRead])
async def list_contests_endpoint(db: Session = Depends(get_db)):
    return contest_service.list_contests(db)

@router.get("/{contest_id}", response_model=contest_schemas.ContestDetail)
async def get_contest_endpoint(contest_id: int, db: Session = Depends(get_db)):
    return contest_service.get_contest_detail(db, contest_id)

@router.post("/", response_model=contest_schemas.ContestCreated, status_code=status.HTTP_201_CREATED)
async def create_contest_endpoint(
    title: str = Form(...),
    registration_deadline: datetime = Form(...),
    submission_deadline: datetime = Form(...),
    description: Optional[str] = Form(None),
    organizer: Optional[str] = Form(None),
    platform: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    department: Optional[str] = Form(None),
    is_team_based: bool = Form(False),
    max_team_size: int = Form(1),
    max_participants: Optional[int] = Form(None),
    image_url: Optional[str] = Form(None),
    external_reg_link: Optional[str] = Form(None),
    submission_link: Optional[str] = Form(None),
    mentor_id: Optional[int] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    coordinator: auth_schemas.Identity = Depends(coordinator_only),
):
    try:
        contest_in = contest_schemas.ContestCreate(
            title=title,
            description=description,
            organizer=organizer,
            platform=platform,
            location=location,
            department=department,
            registration_deadline=registration_deadline,
            submission_deadline=submission_deadline,
            is_team_based=is_team_based,
            max_team_size=max_team_size,
            max_participants=max_participants,
            image_url=image_url,
            external_reg_link=external_reg_link,
            submission_link=submission_link,
            mentor_id=mentor_id,
        )
    except pydantic.ValidationError as e:
        raise ValidationError("; ".join(err["msg"] for err in e.errors()))

    stored_image = None
    if image is not None and image.filename:
        stored_image = upload_service.save_contest_image(image)
        contest_in.image_url = stored_image

    try:
        contest = contest_service.create_contest(db, contest_in, creator_id=coordinator.id)
    except Exception:
        # No contest points at the file, so it goes too
        if stored_image:
            upload_service.remove_contest_image(stored_image)
        raise
    return {"message": "Contest created successfully", "contest_id": contest.id}

@router.put("/{contest_id}", response_model=MessageResponse)
async def update_contest_endpoint(
    contest_id: int,
    contest_in: contest_schemas.ContestUpdate,
    db: Session = Depends(get_db),
    coordinator: auth_schemas.Identity = Depends(coordinator_only),
):
    contest_service.update_contest(db, contest_id, contest_in, current_user_id=coordinator.id)
    return {"message": "Contest updated successfully"}

@router.delete("/{contest_id}", response_model=MessageResponse)
async def delete_contest_endpoint(
    contest_id: int,
    db: Session = Depends(get_db),
    coordinator: auth_schemas.Identity = Depends(coordinator_only),
):
    contest_service.delete_contest(db, contest_id, current_user_id=coordinator.id)
    return {"message": "Contest deleted successfully"}
