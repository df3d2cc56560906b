"""
JobTrack Test Configuration

Shared fixtures for all tests.
"""
from datetime import datetime
from typing import Callable

import pytest
from jose import jwt
from sqlalchemy.orm import Session

from jobtrack.config import reload_config
from jobtrack.db.database import get_engine
from jobtrack.models import Base, Job


TEST_SECRET = "test-secret-key"
OWNER_A = "user_alice"
OWNER_B = "user_bob"
NOW = datetime(2026, 10, 17, 12, 0, 0)


# =============================================================================
# FIXTURES: Config & Database
# =============================================================================

@pytest.fixture(autouse=True)
def test_config(tmp_path, monkeypatch):
    """Isolated config: tmp SQLite file, known JWT secret, no YAML file."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'jobtrack.db'}")
    monkeypatch.setenv("JWT_SECRET_KEY", TEST_SECRET)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    config = reload_config(str(tmp_path / "missing.yml"))
    yield config
    reload_config(str(tmp_path / "missing.yml"))


@pytest.fixture
def engine(tmp_path):
    """Fresh SQLite engine with schema for each test."""
    eng = get_engine(f"sqlite:///{tmp_path / 'test.db'}", echo=False)
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as sess:
        yield sess


# =============================================================================
# FIXTURES: Sample Data
# =============================================================================

@pytest.fixture
def make_job(session) -> Callable[..., Job]:
    """Insert a job directly, bypassing validation (simulates legacy rows)."""

    def _make(
        owner_id: str = OWNER_A,
        position: str = "Backend Engineer",
        company: str = "TechCorp",
        location: str = "Remote",
        status: str = "pending",
        mode: str = "full-time",
        created_at: datetime = NOW,
    ) -> Job:
        job = Job(
            owner_id=owner_id,
            position=position,
            company=company,
            location=location,
            status=status,
            mode=mode,
            created_at=created_at,
            updated_at=created_at,
        )
        session.add(job)
        session.commit()
        return job

    return _make


@pytest.fixture
def job_fields() -> dict:
    """Valid create/update payload."""
    return {
        "position": "Senior Python Developer",
        "company": "CloudNine",
        "location": "Berlin",
        "status": "pending",
        "mode": "full-time",
    }


# =============================================================================
# HELPERS
# =============================================================================

def make_token(owner_id: str, secret: str = TEST_SECRET, **claims) -> str:
    """Token as the identity provider would issue it."""
    return jwt.encode({"sub": owner_id, **claims}, secret, algorithm="HS256")


def auth_headers(owner_id: str) -> dict:
    return {"Authorization": f"Bearer {make_token(owner_id)}"}
