import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import DateTime, Integer, func, insert, literal, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import Conflict, DeadlinePassed, Forbidden, Full, NotFound, WrongMode
from app.models import Contest, Registration, Student
from app.services import contest_service

logger = logging.getLogger(__name__)


def _insert_registration_if_capacity(db: Session, contest: Contest, student_id: int, now: datetime) -> bool:
    """INSERT ... SELECT guarded by the current registration count.

    Returns False when the contest was already full at insert time.
    """
    current_count = (
        select(func.count(Registration.id))
        .where(Registration.contest_id == contest.id)
        .correlate(None)
        .scalar_subquery()
    )
    stmt = insert(Registration.__table__).from_select(
        ["contest_id", "student_id", "registered_at"],
        select(
            literal(contest.id, Integer),
            literal(student_id, Integer),
            literal(now, DateTime),
        ).where(current_count < contest.max_participants),
    )
    return db.execute(stmt).rowcount > 0


def ensure_registered(db: Session, contest_id: int, student_id: int, now: Optional[datetime] = None) -> None:
    """Create the registration row for a team participant unless it exists.

    Does not commit; callers commit it together with their own writes.
    """
    stmt = (
        sqlite_insert(Registration.__table__)
        .values(contest_id=contest_id, student_id=student_id, registered_at=now or contest_service.utcnow())
        .on_conflict_do_nothing(index_elements=["contest_id", "student_id"])
    )
    db.execute(stmt)


def register_individual(db: Session, contest_id: int, student_id: int, now: Optional[datetime] = None) -> Registration:
    now = now or contest_service.utcnow()
    contest = contest_service.get_contest(db, contest_id)

    if contest_service.registration_closed(contest, now):
        raise DeadlinePassed()
    if contest.is_team_based:
        raise WrongMode("This is a team-based contest. Please create or join a team.")

    existing = db.query(Registration).filter(
        Registration.contest_id == contest_id,
        Registration.student_id == student_id,
    ).first()
    if existing:
        raise Conflict("Already registered for this contest")

    try:
        if contest.max_participants is None:
            db.add(Registration(contest_id=contest_id, student_id=student_id, registered_at=now))
            db.flush()
        elif not _insert_registration_if_capacity(db, contest, student_id, now):
            db.rollback()
            logger.info("Student %s rejected from full contest %s", student_id, contest_id)
            raise Full("Contest has reached its participant limit")
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration for the same pair
        db.rollback()
        raise Conflict("Already registered for this contest")

    registration = db.query(Registration).filter(
        Registration.contest_id == contest_id,
        Registration.student_id == student_id,
    ).one()
    logger.info("Student %s registered for contest %s", student_id, contest_id)
    return registration


def cancel_registration(db: Session, registration_id: int, student_id: int, now: Optional[datetime] = None) -> None:
    registration = db.query(Registration).filter(Registration.id == registration_id).first()
    if not registration:
        raise NotFound("Registration not found")
    if registration.student_id != student_id:
        raise Forbidden("You can only cancel your own registration")
    if contest_service.registration_closed(registration.contest, now):
        raise DeadlinePassed("Cannot cancel after registration deadline")

    db.delete(registration)
    db.commit()
    logger.info("Student %s cancelled registration %s", student_id, registration_id)


def list_my_registrations(db: Session, student_id: int) -> List[Dict[str, Any]]:
    rows = (
        db.query(Registration, Contest)
        .join(Contest, Registration.contest_id == Contest.id)
        .filter(Registration.student_id == student_id)
        .order_by(Registration.registered_at.desc(), Registration.id.desc())
        .all()
    )
    return [
        {
            "id": registration.id,
            "contest_id": registration.contest_id,
            "student_id": registration.student_id,
            "registered_at": registration.registered_at,
            "title": contest.title,
            "description": contest.description,
            "organizer": contest.organizer,
            "platform": contest.platform,
            "location": contest.location,
            "image_url": contest.image_url,
            "external_reg_link": contest.external_reg_link,
            "submission_link": contest.submission_link,
            "registration_deadline": contest.registration_deadline,
            "submission_deadline": contest.submission_deadline,
            "is_team_based": contest.is_team_based,
        }
        for registration, contest in rows
    ]


def list_registrations_for_contest(db: Session, contest_id: int) -> List[Dict[str, Any]]:
    contest_service.get_contest(db, contest_id)
    rows = (
        db.query(Registration, Student)
        .join(Student, Registration.student_id == Student.id)
        .filter(Registration.contest_id == contest_id)
        .order_by(Registration.registered_at.desc(), Registration.id.desc())
        .all()
    )
    return [
        {
            "id": registration.id,
            "contest_id": registration.contest_id,
            "student_id": registration.student_id,
            "registered_at": registration.registered_at,
            "student_name": student.name,
            "student_email": student.email,
            "department": student.department,
            "year": student.year,
            "section": student.section,
            "register_no": student.register_no,
        }
        for registration, student in rows
    ]
