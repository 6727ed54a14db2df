from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.services import team_service
from app.schemas import auth_schemas, team_schemas
from app.schemas.common_schemas import MessageResponse
from app.api.dependencies import get_db, student_only

router = APIRouter()

@router.post("/", response_model=team_schemas.TeamCreated, status_code=status.HTTP_201_CREATED)
async def create_team_endpoint(
    team_in: team_schemas.TeamCreate,
    db: Session = Depends(get_db),
    student: auth_schemas.Identity = Depends(student_only),
):
    team = team_service.create_team(db, team_in.contest_id, student.id, team_in.team_name)
    return {"message": "Team created successfully", "team_id": team.id}

# Declared before /{team_id} so "my" is not taken for a team id
@router.get("/my/all", response_model=List[team_schemas.TeamSummary])
async def my_teams_endpoint(
    db: Session = Depends(get_db),
    student: auth_schemas.Identity = Depends(student_only),
):
    return team_service.list_my_teams(db, student.id)

@router.get("/contest/{contest_id}", response_model=List[team_schemas.TeamSummary])
async def contest_teams_endpoint(contest_id: int, db: Session = Depends(get_db)):
    return team_service.list_teams_for_contest(db, contest_id)

@router.get("/{team_id}", response_model=team_schemas.TeamDetail)
async def get_team_endpoint(team_id: int, db: Session = Depends(get_db)):
    return team_service.get_team_with_members(db, team_id)

@router.post("/{team_id}/join", response_model=MessageResponse)
async def join_team_endpoint(
    team_id: int,
    db: Session = Depends(get_db),
    student: auth_schemas.Identity = Depends(student_only),
):
    team_service.join_team(db, team_id, student.id)
    return {"message": "Joined team successfully"}

@router.delete("/{team_id}/leave", response_model=MessageResponse)
async def leave_team_endpoint(
    team_id: int,
    db: Session = Depends(get_db),
    student: auth_schemas.Identity = Depends(student_only),
):
    team_service.leave_team(db, team_id, student.id)
    return {"message": "Left team successfully"}
