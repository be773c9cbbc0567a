"""Pytest fixtures for backend tests."""

import os
import tempfile
from datetime import datetime, timezone, timedelta

# Set required env vars before the app is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-the-skillnet-suite")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="skillnet-logs-"))
os.environ.pop("REDIS_HOST", None)
os.environ.pop("SMS_GATEWAY_URL", None)
os.environ.pop("ACCESS_TOKEN_EXPIRE_MINUTES", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from db.db_conn import engine, get_db
from db.models import User, Skill
from main import app
from services.otp_service import OtpService
from utils import Base
from utils.dependencies import get_otp_service

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeClock:
    def __init__(self):
        self.current = datetime(2025, 4, 10, 8, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.current

    def advance(self, **kwargs):
        self.current += timedelta(**kwargs)


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def send_otp(self, phone_number, code):
        self.sent.append((phone_number, code))

    @property
    def last_code(self):
        return self.sent[-1][1]


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def otp_service(clock, notifier):
    return OtpService(otp_length=6, validity_minutes=5, expose_otp_in_response=True,
                      notifier=notifier, clock=clock)


@pytest.fixture
def test_client(otp_service):
    """Create a FastAPI test client."""
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_otp_service] = lambda: otp_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login(test_client, notifier):
    """Log a phone number in through the OTP endpoints, returns (auth headers, login body)."""
    def _login(phone_number="09123456789"):
        response = test_client.post("/auth/otp/request", json={"phone_number": phone_number})
        assert response.status_code == 200
        response = test_client.post("/auth/otp/login", json={"phone_number": phone_number, "otp": notifier.last_code})
        assert response.status_code == 200
        body = response.json()
        return {"Authorization": f"Bearer {body['access_token']}"}, body

    return _login


@pytest.fixture
def make_user(db_session):
    def _make_user(phone_number, name=None):
        user = User(phone_number=phone_number, name=name)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def skills(db_session):
    created = [Skill(name=name) for name in ("Orthodontics", "Dental implants", "Pediatric dentistry")]
    db_session.add_all(created)
    db_session.commit()
    return {skill.name: skill.id for skill in created}
