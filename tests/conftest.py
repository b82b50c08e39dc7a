import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure predictable environment variables for tests before importing the app.
BASE_DIR = Path(__file__).resolve().parents[1]
TEST_DB_PATH = BASE_DIR / "test.db"

if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

os.environ.setdefault("DATABASE_URL", f"sqlite:///{TEST_DB_PATH}")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import app.main as main  # noqa: E402  (import after env vars are set)
from app.database import Base, SessionLocal, engine  # noqa: E402
from app.services import account_service  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(autouse=True)
def outbox(monkeypatch):
    """Capture OTP emails instead of talking to SMTP."""
    sent = []

    def _capture(to_email, otp, purpose="register"):
        sent.append({"to": to_email, "otp": otp, "purpose": purpose})

    monkeypatch.setattr(account_service, "send_email_otp", _capture)
    return sent


@pytest.fixture()
def client():
    with TestClient(main.app) as test_client:
        yield test_client


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def register_user(client, outbox):
    """Run the OTP registration flow and return the issued bearer token."""

    def _register(email: str, password: str = "pw", name: str | None = None) -> str:
        body = {"email": email, "password": password}
        if name:
            body["name"] = name
        response = client.post("/register/send-otp", json=body)
        assert response.status_code == 201
        otp = [mail for mail in outbox if mail["to"] == email][-1]["otp"]
        response = client.post("/register/verify-otp", json={"email": email, "otp": otp})
        assert response.status_code == 200
        return response.json()["data"]["token"]

    return _register


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
