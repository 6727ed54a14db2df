from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

class StudentCreate(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)
    department: str = Field(min_length=1)
    year: int = Field(ge=1, le=6)
    section: str = Field(min_length=1)
    register_no: str = Field(min_length=1)
    phone_no: Optional[str] = None

class StudentRead(BaseModel):
    id: int
    name: str
    email: str
    department: str
    year: int
    section: str
    register_no: str
    phone_no: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CoordinatorRead(BaseModel):
    id: int
    name: str
    email: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class MentorCreate(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)
    department: str = Field(min_length=1)
    phone_no: Optional[str] = None

class MentorRead(BaseModel):
    id: int
    name: str
    email: str
    department: str
    phone_no: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class MentorAssignContest(BaseModel):
    contest_id: int
    mentor_id: int

class MentorAssignTeam(BaseModel):
    team_id: int
    mentor_id: int
