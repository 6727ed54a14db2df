from sqlalchemy import Column, Integer, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base
import datetime

class Registration(Base):
    __tablename__ = "contest_registrations"
    # One registration per student per contest, enforced by the database
    __table_args__ = (UniqueConstraint("contest_id", "student_id", name="uq_registration_contest_student"),)

    id = Column(Integer, primary_key=True, index=True)
    contest_id = Column(Integer, ForeignKey("contests.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    registered_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)

    contest = relationship("Contest", back_populates="registrations")
    student = relationship("Student", back_populates="registrations")
