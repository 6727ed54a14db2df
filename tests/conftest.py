import os
import tempfile
from datetime import datetime, timedelta

# Settings are read at import time, so the environment is prepared first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="contest_hub_uploads_"))
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.api.dependencies import get_db
from app.core import security
from app.core.database import init_db
from app.models import Contest, ContestChat, Coordinator, Mentor, Student
from app.services import auth_service

PASSWORD = "secret123"


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# --- Factories ---

@pytest.fixture
def make_student(db):
    counter = {"n": 0}

    def _make(name=None, email=None, register_no=None, **extra):
        counter["n"] += 1
        n = counter["n"]
        student = Student(
            name=name or f"Student {n}",
            email=email or f"student{n}@college.edu",
            register_no=register_no or f"21CSE{n:03d}",
            password_hash=security.get_password_hash(PASSWORD),
            department=extra.pop("department", "CSE"),
            year=extra.pop("year", 3),
            section=extra.pop("section", "A"),
            **extra,
        )
        db.add(student)
        db.commit()
        db.refresh(student)
        return student

    return _make


@pytest.fixture
def make_coordinator(db):
    counter = {"n": 0}

    def _make(name=None, email=None):
        counter["n"] += 1
        n = counter["n"]
        coordinator = Coordinator(
            name=name or f"Coordinator {n}",
            email=email or f"coordinator{n}@college.edu",
            password_hash=security.get_password_hash(PASSWORD),
        )
        db.add(coordinator)
        db.commit()
        db.refresh(coordinator)
        return coordinator

    return _make


@pytest.fixture
def make_mentor(db):
    counter = {"n": 0}

    def _make(name=None, email=None):
        counter["n"] += 1
        n = counter["n"]
        mentor = Mentor(
            name=name or f"Mentor {n}",
            email=email or f"mentor{n}@college.edu",
            password_hash=security.get_password_hash(PASSWORD),
            department="CSE",
        )
        db.add(mentor)
        db.commit()
        db.refresh(mentor)
        return mentor

    return _make


@pytest.fixture
def make_contest(db, make_coordinator):
    def _make(coordinator=None, team=False, max_team_size=1, max_participants=None,
              registration_in=timedelta(hours=1), submission_in=timedelta(days=7), **extra):
        coordinator = coordinator or make_coordinator()
        now = datetime.utcnow()
        contest = Contest(
            title=extra.pop("title", "Code Sprint"),
            registration_deadline=now + registration_in,
            submission_deadline=now + submission_in,
            is_team_based=team,
            max_team_size=max_team_size,
            max_participants=max_participants,
            created_by=coordinator.id,
            **extra,
        )
        contest.chat = ContestChat()
        db.add(contest)
        db.commit()
        db.refresh(contest)
        return contest

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        token = security.create_access_token(auth_service.identity_for(user))
        return {"Authorization": f"Bearer {token}"}

    return _headers
