from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.services import registration_service
from app.schemas import auth_schemas, registration_schemas
from app.schemas.common_schemas import MessageResponse
from app.api.dependencies import get_db, student_only, staff_only

router = APIRouter()

@router.post("/", response_model=registration_schemas.RegistrationCreated, status_code=status.HTTP_201_CREATED)
async def register_endpoint(
    registration_in: registration_schemas.RegistrationCreate,
    db: Session = Depends(get_db),
    student: auth_schemas.Identity = Depends(student_only),
):
    registration = registration_service.register_individual(db, registration_in.contest_id, student.id)
    return {"message": "Registration successful", "registration_id": registration.id}

@router.get("/my", response_model=List[registration_schemas.MyRegistration])
async def my_registrations_endpoint(
    db: Session = Depends(get_db),
    student: auth_schemas.Identity = Depends(student_only),
):
    return registration_service.list_my_registrations(db, student.id)

@router.get("/contest/{contest_id}", response_model=List[registration_schemas.ContestRegistration])
async def contest_registrations_endpoint(
    contest_id: int,
    db: Session = Depends(get_db),
    staff: auth_schemas.Identity = Depends(staff_only),
):
    return registration_service.list_registrations_for_contest(db, contest_id)

@router.delete("/{registration_id}", response_model=MessageResponse)
async def cancel_registration_endpoint(
    registration_id: int,
    db: Session = Depends(get_db),
    student: auth_schemas.Identity = Depends(student_only),
):
    registration_service.cancel_registration(db, registration_id, student.id)
    return {"message": "Registration cancelled successfully"}
