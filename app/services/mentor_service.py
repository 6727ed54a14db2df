import logging
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core import security
from app.core.exceptions import Conflict, NotFound
from app.models import Contest, Mentor, Role
from app.schemas import user_schemas
from app.services import auth_service, contest_service, team_service

logger = logging.getLogger(__name__)


def get_mentor(db: Session, mentor_id: int) -> Mentor:
    mentor = db.query(Mentor).filter(Mentor.id == mentor_id).first()
    if not mentor:
        raise NotFound("Mentor not found")
    return mentor


def create_mentor(db: Session, mentor_in: user_schemas.MentorCreate) -> Mentor:
    if auth_service.get_user_by_email(db, mentor_in.email, Role.MENTOR):
        raise Conflict("A mentor with this email already exists")

    mentor = Mentor(
        **mentor_in.model_dump(exclude={"password"}),
        password_hash=security.get_password_hash(mentor_in.password),
    )
    db.add(mentor)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("A mentor with this email already exists")
    db.refresh(mentor)
    logger.info("Mentor %s created", mentor.id)
    return mentor


def list_mentors(db: Session) -> List[Mentor]:
    return db.query(Mentor).order_by(Mentor.name).all()


def list_my_contests(db: Session, mentor_id: int) -> List[Dict[str, Any]]:
    return contest_service.list_contests(db, Contest.mentor_id == mentor_id)


def list_my_teams(db: Session, mentor_id: int) -> List[Dict[str, Any]]:
    return team_service.list_teams_for_mentor(db, mentor_id)


def assign_to_contest(db: Session, contest_id: int, mentor_id: int) -> Contest:
    contest = contest_service.get_contest(db, contest_id)
    get_mentor(db, mentor_id)
    contest.mentor_id = mentor_id
    db.commit()
    logger.info("Mentor %s assigned to contest %s", mentor_id, contest_id)
    return contest


def assign_to_team(db: Session, team_id: int, mentor_id: int):
    team = team_service.get_team(db, team_id)
    get_mentor(db, mentor_id)
    team.mentor_id = mentor_id
    db.commit()
    logger.info("Mentor %s assigned to team %s", mentor_id, team_id)
    return team
