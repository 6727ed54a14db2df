from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.services import mentor_service
from app.schemas import auth_schemas, contest_schemas, team_schemas, user_schemas
from app.schemas.common_schemas import MessageResponse
from app.api.dependencies import get_db, coordinator_only, mentor_only

router = APIRouter()

@router.post("/", response_model=user_schemas.MentorRead, status_code=status.HTTP_201_CREATED)
async def create_mentor_endpoint(
    mentor_in: user_schemas.MentorCreate,
    db: Session = Depends(get_db),
    coordinator: auth_schemas.Identity = Depends(coordinator_only),
):
    return mentor_service.create_mentor(db, mentor_in)

@router.get("/", response_model=List[user_schemas.MentorRead])
async def list_mentors_endpoint(
    db: Session = Depends(get_db),
    coordinator: auth_schemas.Identity = Depends(coordinator_only),
):
    return mentor_service.list_mentors(db)

@router.get("/my/contests", response_model=List[contest_schemas.ContestRead])
async def my_contests_endpoint(
    db: Session = Depends(get_db),
    mentor: auth_schemas.Identity = Depends(mentor_only),
):
    return mentor_service.list_my_contests(db, mentor.id)

@router.get("/my/teams", response_model=List[team_schemas.TeamSummary])
async def my_teams_endpoint(
    db: Session = Depends(get_db),
    mentor: auth_schemas.Identity = Depends(mentor_only),
):
    return mentor_service.list_my_teams(db, mentor.id)

@router.post("/assign/contest", response_model=MessageResponse)
async def assign_contest_endpoint(
    assignment: user_schemas.MentorAssignContest,
    db: Session = Depends(get_db),
    coordinator: auth_schemas.Identity = Depends(coordinator_only),
):
    mentor_service.assign_to_contest(db, assignment.contest_id, assignment.mentor_id)
    return {"message": "Mentor assigned to contest successfully"}

@router.post("/assign/team", response_model=MessageResponse)
async def assign_team_endpoint(
    assignment: user_schemas.MentorAssignTeam,
    db: Session = Depends(get_db),
    coordinator: auth_schemas.Identity = Depends(coordinator_only),
):
    mentor_service.assign_to_team(db, assignment.team_id, assignment.mentor_id)
    return {"message": "Mentor assigned to team successfully"}
