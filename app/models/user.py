"""Identity records.

Students, coordinators and mentors live in three disjoint tables. They share
the ``id``/``name``/``email``/``password_hash`` shape, and ``ROLE_MODELS`` maps
an explicit role tag to the table that holds people of that role.
"""

import datetime
import enum

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from app.core.database import Base


class Role(str, enum.Enum):
    STUDENT = "student"
    COORDINATOR = "coordinator"
    MENTOR = "mentor"


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    department = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    section = Column(String, nullable=False)
    register_no = Column(String, unique=True, index=True, nullable=False)
    phone_no = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    registrations = relationship("Registration", back_populates="student")

    role = Role.STUDENT


class Coordinator(Base):
    __tablename__ = "coordinators"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    contests = relationship("Contest", back_populates="creator")

    role = Role.COORDINATOR


class Mentor(Base):
    __tablename__ = "mentors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    department = Column(String, nullable=False)
    phone_no = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    role = Role.MENTOR


ROLE_MODELS = {
    Role.STUDENT: Student,
    Role.COORDINATOR: Coordinator,
    Role.MENTOR: Mentor,
}
