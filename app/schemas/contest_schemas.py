from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime, timezone

from .team_schemas import TeamSummary


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Deadlines are stored as naive UTC; aware inputs are converted first."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class ContestBase(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    organizer: Optional[str] = None
    platform: Optional[str] = None
    location: Optional[str] = None
    department: Optional[str] = None
    registration_deadline: datetime
    submission_deadline: datetime
    is_team_based: bool = False
    max_team_size: int = Field(default=1, ge=1)
    max_participants: Optional[int] = Field(default=None, ge=1)
    image_url: Optional[str] = None
    external_reg_link: Optional[str] = None
    submission_link: Optional[str] = None
    mentor_id: Optional[int] = None

    normalize_deadlines = field_validator(
        "registration_deadline", "submission_deadline"
    )(to_naive_utc)

class ContestCreate(ContestBase):

    @model_validator(mode="after")
    def registration_before_submission(self):
        if self.registration_deadline >= self.submission_deadline:
            raise ValueError("Registration deadline must be before submission deadline")
        return self

class ContestUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    organizer: Optional[str] = None
    platform: Optional[str] = None
    location: Optional[str] = None
    department: Optional[str] = None
    registration_deadline: Optional[datetime] = None
    submission_deadline: Optional[datetime] = None
    is_team_based: Optional[bool] = None
    max_team_size: Optional[int] = Field(default=None, ge=1)
    max_participants: Optional[int] = Field(default=None, ge=1)
    image_url: Optional[str] = None
    external_reg_link: Optional[str] = None
    submission_link: Optional[str] = None
    mentor_id: Optional[int] = None

    normalize_deadlines = field_validator(
        "registration_deadline", "submission_deadline"
    )(to_naive_utc)

class ContestRead(ContestBase):
    id: int
    created_by: int
    created_at: Optional[datetime] = None
    coordinator_name: Optional[str] = None
    mentor_name: Optional[str] = None
    registration_count: int = 0

    class Config:
        from_attributes = True

class ContestDetail(ContestRead):
    coordinator_email: Optional[str] = None
    mentor_email: Optional[str] = None
    teams: List[TeamSummary] = Field(default_factory=list)

class ContestCreated(BaseModel):
    message: str
    contest_id: int
