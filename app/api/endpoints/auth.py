from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.services import auth_service
from app.schemas import auth_schemas, user_schemas
from app.api.dependencies import get_db, any_role

router = APIRouter()

READ_SCHEMAS = {
    "student": user_schemas.StudentRead,
    "coordinator": user_schemas.CoordinatorRead,
    "mentor": user_schemas.MentorRead,
}

def _public_user(user):
    return READ_SCHEMAS[user.role.value].model_validate(user)

@router.post("/login", response_model=auth_schemas.Token)
async def login_endpoint(
    request: auth_schemas.LoginRequest,
    db: Session = Depends(get_db),
):
    token, user = auth_service.login(db, request.email, request.password, request.role)
    return {"message": "Login successful", "token": token, "role": user.role, "user": _public_user(user)}

@router.post("/register", response_model=auth_schemas.Token, status_code=status.HTTP_201_CREATED)
async def register_endpoint(
    student_in: user_schemas.StudentCreate,
    db: Session = Depends(get_db),
):
    token, student = auth_service.register_student(db, student_in)
    return {"message": "Registration successful", "token": token, "role": student.role, "user": _public_user(student)}

@router.get("/me", response_model=auth_schemas.Profile)
async def read_me_endpoint(
    db: Session = Depends(get_db),
    identity: auth_schemas.Identity = Depends(any_role),
):
    user = auth_service.get_profile(db, identity)
    return {"role": identity.role, "user": _public_user(user)}
