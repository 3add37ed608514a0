"""
Pytest fixtures for HireSphere tests.
Uses in-memory SQLite, fake mail transport and personalizer, and factories for users, jobs and alerts.
"""
import os
from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Use in-memory SQLite for tests - set before config/session load
# Must override any .env DATABASE_URL
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["OPENAI_API_KEY"] = ""
os.environ["SMTP_HOST"] = ""
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["FRONTEND_URL"] = "https://hiresphere.test"

from hiresphere.app.db.base import Base
from hiresphere.main import app  # noqa: F401
from hiresphere.app.models.job import Job
from hiresphere.app.models.job_alert import JobAlert
from hiresphere.app.models.user import User
from hiresphere.app.services.alert_notifier import AlertNotifier
from hiresphere.app.services.mail import MailTransport
from hiresphere.app.services.personalizer import NoopPersonalizer, Personalizer

# In-memory SQLite for tests - StaticPool ensures all sessions share same DB
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Patch the session module so app uses our test engine
import hiresphere.app.db.session as session_module
session_module.engine = engine
session_module.SessionLocal = TestingSessionLocal
# main.py imports engine directly; patch so startup uses our engine
import hiresphere.main as main_module
main_module.engine = engine


class RecordingTransport(MailTransport):
    """Collects messages instead of sending them."""

    def __init__(self, result: bool = True, error: Exception | None = None):
        self.result = result
        self.error = error
        self.sent = []

    def send(self, message):
        if self.error is not None:
            raise self.error
        self.sent.append(message)
        return self.result


class CannedPersonalizer(Personalizer):
    def __init__(self, text: str | None = None, error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls = []

    def describe(self, job_seeker, jobs):
        self.calls.append((job_seeker.id, [j.id for j in jobs]))
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture(scope="function")
def db_session():
    """Create tables and a fresh DB session per test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def employer(db_session):
    user = User(
        name="Jordan Lee",
        email="talent@acme.test",
        type="employer",
        company_name="Acme Corp",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def job_seeker(db_session):
    user = User(
        name="Sam Rivera",
        first_name="Sam",
        last_name="Rivera",
        email="sam@example.com",
        type="jobseeker",
        location="Berlin",
        skills=["python", "react"],
        experience=[{"title": "Frontend Developer", "company": "Widgets GmbH"}],
        education=[{"degree": "BSc Computer Science", "institution": "TU Berlin"}],
        alerts_enabled=True,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def make_job(db_session, employer):
    """Factory: make_job(title="...", created_at=..., **fields) -> Job"""
    def _make(**fields):
        data = {
            "employer_id": employer.id,
            "title": "Software Engineer",
            "company": "Acme Corp",
            "location": "Berlin, DE",
            "type": "full-time",
            "salary_min": 60000,
            "salary_max": 90000,
            "salary_currency": "EUR",
            "description": "Build and run our hiring platform.",
            "requirements": "3+ years of experience.",
            "status": "open",
            "created_at": datetime.utcnow() - timedelta(hours=1),
        }
        data.update(fields)
        job = Job(**data)
        db_session.add(job)
        db_session.commit()
        db_session.refresh(job)
        return job
    return _make


@pytest.fixture
def make_alert(db_session, job_seeker):
    """Factory: make_alert(keywords=[...], **fields) -> JobAlert"""
    def _make(**fields):
        data = {
            "job_seeker_id": job_seeker.id,
            "name": "Test alert",
            "keywords": [],
            "locations": [],
            "job_types": [],
            "salary_min": 0,
            "salary_max": 0,
            "frequency": "daily",
            "is_active": True,
            "last_sent_at": None,
        }
        data.update(fields)
        alert = JobAlert(**data)
        db_session.add(alert)
        db_session.commit()
        db_session.refresh(alert)
        return alert
    return _make


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def notifier(transport):
    return AlertNotifier(
        transport=transport,
        personalizer=NoopPersonalizer(),
        frontend_url="https://hiresphere.test",
        sender="alerts@hiresphere.test",
    )
