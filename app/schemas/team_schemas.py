from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

class TeamCreate(BaseModel):
    contest_id: int
    team_name: str = Field(min_length=1)

class TeamCreated(BaseModel):
    message: str
    team_id: int

class TeamSummary(BaseModel):
    id: int
    contest_id: int
    team_name: str
    team_leader_id: int
    mentor_id: Optional[int] = None
    created_at: Optional[datetime] = None
    leader_name: Optional[str] = None
    leader_email: Optional[str] = None
    mentor_name: Optional[str] = None
    contest_title: Optional[str] = None
    submission_deadline: Optional[datetime] = None
    member_count: int = 0

class TeamMemberRead(BaseModel):
    student_id: int
    name: str
    email: str
    department: str
    year: int
    section: str
    joined_at: datetime

class TeamDetail(TeamSummary):
    members: List[TeamMemberRead] = Field(default_factory=list)
