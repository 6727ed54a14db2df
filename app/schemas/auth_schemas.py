from pydantic import BaseModel, EmailStr
from typing import Union

from app.models.user import Role
from .user_schemas import StudentRead, CoordinatorRead, MentorRead

class Identity(BaseModel):
    """What a signed token says about its bearer."""
    id: int
    role: Role
    name: str
    email: str

class LoginRequest(BaseModel):
    email: EmailStr
    password: str
    role: Role

class Token(BaseModel):
    message: str
    token: str
    token_type: str = "bearer"
    role: Role
    user: Union[StudentRead, MentorRead, CoordinatorRead]

class Profile(BaseModel):
    role: Role
    user: Union[StudentRead, MentorRead, CoordinatorRead]
