from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, Boolean, CheckConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base
import datetime

class Contest(Base):
    __tablename__ = "contests"
    __table_args__ = (
        CheckConstraint("registration_deadline < submission_deadline", name="ck_contest_deadlines"),
        CheckConstraint("max_team_size >= 1", name="ck_contest_team_size"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    organizer = Column(String, nullable=True)
    platform = Column(String, nullable=True)
    location = Column(String, nullable=True)
    department = Column(String, nullable=True)
    registration_deadline = Column(DateTime, nullable=False)
    submission_deadline = Column(DateTime, nullable=False)
    is_team_based = Column(Boolean, default=False, nullable=False)
    max_team_size = Column(Integer, default=1, nullable=False) # only meaningful when is_team_based
    max_participants = Column(Integer, nullable=True) # solo capacity, None means unlimited
    image_url = Column(String, nullable=True)
    external_reg_link = Column(String, nullable=True)
    submission_link = Column(String, nullable=True)
    created_by = Column(Integer, ForeignKey("coordinators.id"), nullable=False)
    mentor_id = Column(Integer, ForeignKey("mentors.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    creator = relationship("Coordinator", back_populates="contests")
    mentor = relationship("Mentor")
    registrations = relationship(
        "Registration", back_populates="contest", cascade="all, delete-orphan", passive_deletes=True
    )
    teams = relationship(
        "Team", back_populates="contest", cascade="all, delete-orphan", passive_deletes=True
    )
    chat = relationship(
        "ContestChat", back_populates="contest", uselist=False, cascade="all, delete-orphan", passive_deletes=True
    )
