import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, aliased

from app.core.exceptions import Forbidden, NotFound, ValidationError
from app.models import Contest, ContestChat, Coordinator, Mentor, Registration
from app.schemas import contest_schemas
from app.services import team_service

logger = logging.getLogger(__name__)

CONTEST_COLUMNS = [column.key for column in Contest.__table__.columns]


def utcnow() -> datetime:
    return datetime.utcnow()


def registration_closed(contest: Contest, now: Optional[datetime] = None) -> bool:
    """True once the current instant is strictly after the registration deadline."""
    return (now or utcnow()) > contest.registration_deadline


def _registration_count_subquery():
    return (
        select(func.count(Registration.id))
        .where(Registration.contest_id == Contest.id)
        .correlate(Contest)
        .scalar_subquery()
    )


def _contest_row(contest: Contest, **extra: Any) -> Dict[str, Any]:
    row = {key: getattr(contest, key) for key in CONTEST_COLUMNS}
    row.update(extra)
    return row


def get_contest(db: Session, contest_id: int) -> Contest:
    contest = db.query(Contest).filter(Contest.id == contest_id).first()
    if not contest:
        raise NotFound("Contest not found")
    return contest


def list_contests(db: Session, *criteria) -> List[Dict[str, Any]]:
    mentor = aliased(Mentor)
    query = (
        db.query(
            Contest,
            Coordinator.name.label("coordinator_name"),
            mentor.name.label("mentor_name"),
            _registration_count_subquery().label("registration_count"),
        )
        .outerjoin(Coordinator, Contest.created_by == Coordinator.id)
        .outerjoin(mentor, Contest.mentor_id == mentor.id)
    )
    if criteria:
        query = query.filter(*criteria)
    rows = query.order_by(Contest.registration_deadline.desc()).all()
    return [
        _contest_row(
            row.Contest,
            coordinator_name=row.coordinator_name,
            mentor_name=row.mentor_name,
            registration_count=row.registration_count,
        )
        for row in rows
    ]


def get_contest_detail(db: Session, contest_id: int) -> Dict[str, Any]:
    contest = get_contest(db, contest_id)
    registration_count = (
        db.query(func.count(Registration.id)).filter(Registration.contest_id == contest_id).scalar()
    )
    teams = team_service.list_teams_for_contest(db, contest_id) if contest.is_team_based else []
    return _contest_row(
        contest,
        coordinator_name=contest.creator.name if contest.creator else None,
        coordinator_email=contest.creator.email if contest.creator else None,
        mentor_name=contest.mentor.name if contest.mentor else None,
        mentor_email=contest.mentor.email if contest.mentor else None,
        registration_count=registration_count,
        teams=teams,
    )


def _check_mentor(db: Session, mentor_id: Optional[int]) -> None:
    if mentor_id is not None and db.query(Mentor).filter(Mentor.id == mentor_id).first() is None:
        raise NotFound("Mentor not found")


def create_contest(db: Session, contest_in: contest_schemas.ContestCreate, creator_id: int) -> Contest:
    _check_mentor(db, contest_in.mentor_id)
    db_contest = Contest(**contest_in.model_dump(), created_by=creator_id)
    # The chat thread exists from the start; reads would create it lazily otherwise
    db_contest.chat = ContestChat()
    db.add(db_contest)
    db.commit()
    db.refresh(db_contest)
    logger.info("Contest %s '%s' created by coordinator %s", db_contest.id, db_contest.title, creator_id)
    return db_contest


def update_contest(db: Session, contest_id: int, contest_update: contest_schemas.ContestUpdate, current_user_id: int) -> Contest:
    db_contest = get_contest(db, contest_id)
    if db_contest.created_by != current_user_id:
        raise Forbidden("You can only edit your own contests")

    update_data = contest_update.model_dump(exclude_unset=True)
    if "mentor_id" in update_data:
        _check_mentor(db, update_data["mentor_id"])
    for key in ("title", "registration_deadline", "submission_deadline", "is_team_based", "max_team_size"):
        if key in update_data and update_data[key] is None:
            raise ValidationError(f"{key} cannot be cleared")

    registration_deadline = update_data.get("registration_deadline", db_contest.registration_deadline)
    submission_deadline = update_data.get("submission_deadline", db_contest.submission_deadline)
    if registration_deadline >= submission_deadline:
        raise ValidationError("Registration deadline must be before submission deadline")

    for key, value in update_data.items():
        setattr(db_contest, key, value)

    db.commit()
    db.refresh(db_contest)
    logger.info("Contest %s updated (%s)", contest_id, ", ".join(sorted(update_data)))
    return db_contest


def delete_contest(db: Session, contest_id: int, current_user_id: int) -> None:
    db_contest = get_contest(db, contest_id)
    if db_contest.created_by != current_user_id:
        raise Forbidden("You can only delete your own contests")

    # Registrations, teams, members, chat and messages go with it
    db.delete(db_contest)
    db.commit()
    logger.info("Contest %s deleted by coordinator %s", contest_id, current_user_id)
