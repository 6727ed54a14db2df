from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base
import datetime

class Team(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, index=True)
    contest_id = Column(Integer, ForeignKey("contests.id", ondelete="CASCADE"), nullable=False, index=True)
    team_name = Column(String, nullable=False)
    team_leader_id = Column(Integer, ForeignKey("students.id"), nullable=False)
    mentor_id = Column(Integer, ForeignKey("mentors.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    contest = relationship("Contest", back_populates="teams")
    leader = relationship("Student", foreign_keys=[team_leader_id])
    mentor = relationship("Mentor")
    members = relationship(
        "TeamMember", back_populates="team", cascade="all, delete-orphan", passive_deletes=True
    )


class TeamMember(Base):
    __tablename__ = "team_members"
    # contest_id is copied from the team so "one team per student per contest"
    # can be a plain unique constraint
    __table_args__ = (UniqueConstraint("contest_id", "student_id", name="uq_team_member_contest_student"),)

    id = Column(Integer, primary_key=True, index=True)
    team_id = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    contest_id = Column(Integer, ForeignKey("contests.id", ondelete="CASCADE"), nullable=False)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    joined_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)

    team = relationship("Team", back_populates="members")
    student = relationship("Student")
