import logging
from typing import Callable, Optional, Tuple

from fastapi import Depends
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core import security
from app.core.exceptions import Conflict, Forbidden, InvalidCredentials, NotFound
from app.models import ROLE_MODELS, Role, Student
from app.schemas import auth_schemas, user_schemas

logger = logging.getLogger(__name__)


def identity_for(user) -> auth_schemas.Identity:
    return auth_schemas.Identity(id=user.id, role=user.role, name=user.name, email=user.email)


def get_user_by_email(db: Session, email: str, role: Role):
    model = ROLE_MODELS[role]
    return db.query(model).filter(model.email == email).first()


def login(db: Session, email: str, password: str, role: Role) -> Tuple[str, object]:
    """Check credentials against the table for ``role`` and issue a token.

    An unknown email and a wrong password fail the same way, so the response
    does not reveal which addresses have accounts under which role.
    """
    user = get_user_by_email(db, email, role)
    if user is None:
        security.dummy_verify()
        logger.info("Failed %s login for unknown email", role.value)
        raise InvalidCredentials()
    if not security.verify_password(password, user.password_hash):
        logger.info("Failed %s login for user %s", role.value, user.id)
        raise InvalidCredentials()

    logger.info("%s %s logged in", role.value.capitalize(), user.id)
    return security.create_access_token(identity_for(user)), user


def find_student(db: Session, email: str, register_no: str) -> Optional[Student]:
    return db.query(Student).filter(
        or_(Student.email == email, Student.register_no == register_no)
    ).first()


def register_student(db: Session, student_in: user_schemas.StudentCreate) -> Tuple[str, Student]:
    if find_student(db, student_in.email, student_in.register_no):
        raise Conflict("Email or Register Number already exists")

    student = Student(
        **student_in.model_dump(exclude={"password"}),
        password_hash=security.get_password_hash(student_in.password),
    )
    db.add(student)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent signup took the email or register number first
        db.rollback()
        raise Conflict("Email or Register Number already exists")
    db.refresh(student)
    logger.info("Student %s registered (%s)", student.id, student.register_no)
    return security.create_access_token(identity_for(student)), student


def get_profile(db: Session, identity: auth_schemas.Identity):
    model = ROLE_MODELS[identity.role]
    user = db.query(model).filter(model.id == identity.id).first()
    if user is None:
        raise NotFound("User not found")
    return user


def get_current_identity(token: Optional[str] = Depends(security.oauth2_scheme)) -> auth_schemas.Identity:
    return security.verify_token(token)


def require_roles(*roles: Role) -> Callable[..., auth_schemas.Identity]:
    """Dependency factory admitting only identities whose role is in ``roles``."""
    allowed = ", ".join(role.value for role in roles)

    def dependency(identity: auth_schemas.Identity = Depends(get_current_identity)) -> auth_schemas.Identity:
        if identity.role not in roles:
            raise Forbidden(f"This action requires one of: {allowed}")
        return identity

    return dependency
