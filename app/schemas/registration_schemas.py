from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class RegistrationCreate(BaseModel):
    contest_id: int

class RegistrationCreated(BaseModel):
    message: str
    registration_id: int

class RegistrationRead(BaseModel):
    id: int
    contest_id: int
    student_id: int
    registered_at: datetime

    class Config:
        from_attributes = True

class MyRegistration(RegistrationRead):
    title: str
    description: Optional[str] = None
    organizer: Optional[str] = None
    platform: Optional[str] = None
    location: Optional[str] = None
    image_url: Optional[str] = None
    external_reg_link: Optional[str] = None
    submission_link: Optional[str] = None
    registration_deadline: datetime
    submission_deadline: datetime
    is_team_based: bool

class ContestRegistration(RegistrationRead):
    student_name: str
    student_email: str
    department: str
    year: int
    section: str
    register_no: str
