import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import DateTime, Integer, func, insert, literal, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased

from app.core.exceptions import Conflict, DeadlinePassed, Full, LeaderCannotLeave, NotFound, WrongMode
from app.models import Contest, Mentor, Student, Team, TeamMember
from app.services import contest_service, registration_service

logger = logging.getLogger(__name__)

TEAM_COLUMNS = [column.key for column in Team.__table__.columns]


def _member_count_subquery():
    return (
        select(func.count(TeamMember.id))
        .where(TeamMember.team_id == Team.id)
        .correlate(Team)
        .scalar_subquery()
    )


def _team_summaries(db: Session, *criteria, join_members_of: Optional[int] = None) -> List[Dict[str, Any]]:
    leader = aliased(Student)
    mentor = aliased(Mentor)
    query = (
        db.query(
            Team,
            leader.name.label("leader_name"),
            leader.email.label("leader_email"),
            mentor.name.label("mentor_name"),
            Contest.title.label("contest_title"),
            Contest.submission_deadline.label("submission_deadline"),
            _member_count_subquery().label("member_count"),
        )
        .join(Contest, Team.contest_id == Contest.id)
        .outerjoin(leader, Team.team_leader_id == leader.id)
        .outerjoin(mentor, Team.mentor_id == mentor.id)
    )
    if join_members_of is not None:
        query = query.join(TeamMember, TeamMember.team_id == Team.id).filter(
            TeamMember.student_id == join_members_of
        )
    if criteria:
        query = query.filter(*criteria)
    rows = query.order_by(Team.created_at, Team.id).all()
    return [
        {
            **{key: getattr(row.Team, key) for key in TEAM_COLUMNS},
            "leader_name": row.leader_name,
            "leader_email": row.leader_email,
            "mentor_name": row.mentor_name,
            "contest_title": row.contest_title,
            "submission_deadline": row.submission_deadline,
            "member_count": row.member_count,
        }
        for row in rows
    ]


def _team_of_student(db: Session, contest_id: int, student_id: int) -> Optional[TeamMember]:
    return db.query(TeamMember).filter(
        TeamMember.contest_id == contest_id,
        TeamMember.student_id == student_id,
    ).first()


def get_team(db: Session, team_id: int) -> Team:
    team = db.query(Team).filter(Team.id == team_id).first()
    if not team:
        raise NotFound("Team not found")
    return team


def create_team(db: Session, contest_id: int, leader_id: int, team_name: str, now: Optional[datetime] = None) -> Team:
    now = now or contest_service.utcnow()
    contest = contest_service.get_contest(db, contest_id)

    if not contest.is_team_based:
        raise WrongMode("This contest does not support teams")
    if contest_service.registration_closed(contest, now):
        raise DeadlinePassed()
    if _team_of_student(db, contest_id, leader_id):
        raise Conflict("You are already in a team for this contest")

    team = Team(contest_id=contest_id, team_name=team_name, team_leader_id=leader_id, created_at=now)
    team.members.append(TeamMember(contest_id=contest_id, student_id=leader_id, joined_at=now))
    try:
        db.add(team)
        db.flush()
        registration_service.ensure_registered(db, contest_id, leader_id, now)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("You are already in a team for this contest")

    db.refresh(team)
    logger.info("Team %s '%s' created for contest %s by student %s", team.id, team_name, contest_id, leader_id)
    return team


def join_team(db: Session, team_id: int, student_id: int, now: Optional[datetime] = None) -> TeamMember:
    now = now or contest_service.utcnow()
    team = get_team(db, team_id)
    contest = team.contest
    if contest is None:
        raise NotFound("Contest not found")

    if contest_service.registration_closed(contest, now):
        raise DeadlinePassed()
    if _team_of_student(db, contest.id, student_id):
        raise Conflict("You are already in a team for this contest")

    # The capacity check and the insert are one statement
    current_count = (
        select(func.count(TeamMember.id))
        .where(TeamMember.team_id == team_id)
        .correlate(None)
        .scalar_subquery()
    )
    stmt = insert(TeamMember.__table__).from_select(
        ["team_id", "contest_id", "student_id", "joined_at"],
        select(
            literal(team_id, Integer),
            literal(contest.id, Integer),
            literal(student_id, Integer),
            literal(now, DateTime),
        ).where(current_count < contest.max_team_size),
    )
    try:
        if db.execute(stmt).rowcount == 0:
            db.rollback()
            logger.info("Student %s rejected from full team %s", student_id, team_id)
            raise Full()
        registration_service.ensure_registered(db, contest.id, student_id, now)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("You are already in a team for this contest")

    logger.info("Student %s joined team %s", student_id, team_id)
    return _team_of_student(db, contest.id, student_id)


def leave_team(db: Session, team_id: int, student_id: int) -> None:
    team = get_team(db, team_id)
    if team.team_leader_id == student_id:
        raise LeaderCannotLeave()

    membership = db.query(TeamMember).filter(
        TeamMember.team_id == team_id,
        TeamMember.student_id == student_id,
    ).first()
    if not membership:
        raise NotFound("You are not a member of this team")

    # The contest registration row stays: it records participation
    db.delete(membership)
    db.commit()
    logger.info("Student %s left team %s", student_id, team_id)


def list_teams_for_contest(db: Session, contest_id: int) -> List[Dict[str, Any]]:
    return _team_summaries(db, Team.contest_id == contest_id)


def get_team_with_members(db: Session, team_id: int) -> Dict[str, Any]:
    summaries = _team_summaries(db, Team.id == team_id)
    if not summaries:
        raise NotFound("Team not found")

    rows = (
        db.query(TeamMember, Student)
        .join(Student, TeamMember.student_id == Student.id)
        .filter(TeamMember.team_id == team_id)
        .order_by(TeamMember.joined_at, TeamMember.id)
        .all()
    )
    members = [
        {
            "student_id": student.id,
            "name": student.name,
            "email": student.email,
            "department": student.department,
            "year": student.year,
            "section": student.section,
            "joined_at": membership.joined_at,
        }
        for membership, student in rows
    ]
    return {**summaries[0], "members": members}


def list_my_teams(db: Session, student_id: int) -> List[Dict[str, Any]]:
    return _team_summaries(db, join_members_of=student_id)


def list_teams_for_mentor(db: Session, mentor_id: int) -> List[Dict[str, Any]]:
    return _team_summaries(db, Team.mentor_id == mentor_id)
