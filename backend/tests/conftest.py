import os
import sys
import tempfile
from pathlib import Path

_TMP = Path(tempfile.mkdtemp(prefix="jobboard-tests-"))
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TMP / 'test.db'}")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("UPLOAD_DIR", str(_TMP / "uploads"))

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

import pytest
from fastapi.testclient import TestClient

from jobboard.db import Base, SessionLocal, engine
from jobboard.main import app
from jobboard.models import User
from jobboard.security import create_token, hash_password

COORDS = {"latitude": 36.0139, "longitude": -5.6044}


@pytest.fixture(autouse=True)
def clean_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(client):
    """Register a user through the API and return (user, auth headers)."""
    counter = {"n": 0}

    def _make(role="job-seeker", email=None, name=None):
        counter["n"] += 1
        email = email or f"{role}{counter['n']}@example.com"
        r = client.post("/api/auth/register", json={
            "email": email,
            "password": "secret123",
            "name": name or f"{role.title()} {counter['n']}",
            "role": role,
        })
        assert r.status_code == 201, r.text
        token = r.cookies.get("token")
        client.cookies.clear()
        return r.json()["user"], {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def admin_headers():
    db = SessionLocal()
    try:
        admin = User(email="admin@example.com", password_hash=hash_password("admin123"), name="Admin", role="admin")
        db.add(admin)
        db.commit()
        db.refresh(admin)
        return {"Authorization": f"Bearer {create_token(admin)}"}
    finally:
        db.close()


@pytest.fixture
def recruiter(client, make_user):
    """A recruiter who already has a located company."""
    user, headers = make_user("recruiter")
    r = client.post("/api/company", headers=headers, json={
        "name": "Tarifa Kite Center",
        "address": {"city": "Tarifa", "country": "es"},
        "coordinates": COORDS,
    })
    assert r.status_code == 201, r.text
    return user, headers


@pytest.fixture
def post_job(client):
    def _post(headers, **overrides):
        body = {
            "title": "Kite Instructor",
            "description": "Teach beginners on the flat water spot.",
            "location": "Tarifa",
            "country": "es",
            "type": "full-time",
        }
        body.update(overrides)
        r = client.post("/api/jobs", headers=headers, json=body)
        assert r.status_code == 201, r.text
        return r.json()["job"]

    return _post


@pytest.fixture
def make_cv(client):
    def _make(headers, **overrides):
        body = {"fullName": "Ana Surf", "email": "ana@example.com"}
        body.update(overrides)
        r = client.post("/api/cv", headers=headers, json=body)
        assert r.status_code == 201, r.text
        return r.json()["cv"]

    return _make
