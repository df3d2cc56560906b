"""Tests for the FastAPI application endpoints.

Runs the full stack: bearer token → router → services → SQLite file DB.
"""
from datetime import timedelta
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from jobtrack.db.database import close_db, get_app_engine, get_session
from jobtrack.errors import StorageError
from jobtrack.main import app
from jobtrack.models import Job, utcnow

from tests.conftest import OWNER_A, OWNER_B, auth_headers


@pytest.fixture
def client(test_config):
    """Create test client against a fresh database."""
    close_db()
    with TestClient(app) as c:
        yield c
    close_db()


@pytest.fixture
def alice():
    return auth_headers(OWNER_A)


@pytest.fixture
def bob():
    return auth_headers(OWNER_B)


def create(client, headers, **overrides):
    payload = {
        "position": "Platform Engineer",
        "company": "ScaleUp",
        "location": "Remote",
        "status": "pending",
        "mode": "full-time",
        **overrides,
    }
    resp = client.post("/api/jobs", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestHealthEndpoint:

    def test_health_returns_200(self, client):
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert "version" in data


class TestAuth:

    def test_missing_token(self, client):
        resp = client.get("/api/jobs")
        assert resp.status_code == 401

    def test_bad_token(self, client):
        resp = client.get("/api/jobs", headers={"Authorization": "Bearer nope"})
        assert resp.status_code == 401
        assert resp.headers["www-authenticate"] == "Bearer"


class TestJobsCrud:

    def test_create_and_get(self, client, alice):
        job = create(client, alice, owner_id=OWNER_B)
        assert "owner_id" not in job
        resp = client.get(f"/api/jobs/{job['id']}", headers=alice)
        assert resp.status_code == 200
        assert resp.json()["position"] == "Platform Engineer"

    def test_validation_errors_are_field_level(self, client, alice):
        resp = client.post(
            "/api/jobs",
            json={"position": "X", "company": "ScaleUp", "location": "Remote",
                  "status": "hired", "mode": "full-time"},
            headers=alice,
        )
        assert resp.status_code == 422
        errors = resp.json()["errors"]
        assert set(errors) == {"position", "status"}

    def test_foreign_and_missing_look_the_same(self, client, alice, bob):
        job = create(client, alice)
        foreign = client.get(f"/api/jobs/{job['id']}", headers=bob)
        missing = client.get("/api/jobs/does-not-exist", headers=bob)
        assert foreign.status_code == missing.status_code == 404
        assert foreign.json() == missing.json()

    def test_update(self, client, alice):
        job = create(client, alice)
        resp = client.patch(
            f"/api/jobs/{job['id']}",
            json={"position": "Staff Engineer", "company": "ScaleUp",
                  "location": "Remote", "status": "interview", "mode": "part-time"},
            headers=alice,
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "interview"
        assert body["created_at"] == job["created_at"]

    def test_update_foreign_rejected(self, client, alice, bob):
        job = create(client, alice)
        resp = client.put(
            f"/api/jobs/{job['id']}",
            json={"position": "Hijacked", "company": "Evil", "location": "Nowhere",
                  "status": "declined", "mode": "internship"},
            headers=bob,
        )
        assert resp.status_code == 404
        assert client.get(f"/api/jobs/{job['id']}", headers=alice).json()["position"] == "Platform Engineer"

    def test_delete(self, client, alice, bob):
        job = create(client, alice)
        assert client.delete(f"/api/jobs/{job['id']}", headers=bob).status_code == 404
        resp = client.delete(f"/api/jobs/{job['id']}", headers=alice)
        assert resp.status_code == 200
        assert resp.json()["id"] == job["id"]
        assert client.get(f"/api/jobs/{job['id']}", headers=alice).status_code == 404

    def test_storage_failure_is_generic_500(self, client, alice, monkeypatch):
        def boom(*args, **kwargs):
            raise StorageError("Failed to create job")
        monkeypatch.setattr("jobtrack.services.jobs.create_job", boom)
        resp = client.post(
            "/api/jobs",
            json={"position": "Engineer", "company": "Acme", "location": "Remote",
                  "status": "pending", "mode": "full-time"},
            headers=alice,
        )
        assert resp.status_code == 500
        assert resp.json() == {"detail": "Failed to create job"}


class TestListing:

    def test_search_filter_paginate(self, client, alice, bob):
        for i in range(12):
            create(client, alice, position=f"Python Dev {i}",
                   status="pending" if i % 2 else "declined")
        create(client, alice, position="Designer", company="Studio")
        create(client, bob, position="Python Dev (bob)")

        resp = client.get(
            "/api/jobs",
            params={"search": "python", "jobStatus": "pending", "page": 2, "limit": 4},
            headers=alice,
        )
        data = resp.json()
        assert resp.status_code == 200
        assert data["count"] == 6
        assert data["total_pages"] == 2
        assert data["page"] == 2
        assert len(data["jobs"]) == 2

    def test_non_numeric_page(self, client, alice):
        create(client, alice)
        data = client.get("/api/jobs", params={"page": "abc"}, headers=alice).json()
        assert data["page"] == 1
        assert data["count"] == 1

    def test_huge_page_is_empty_page(self, client, alice):
        create(client, alice)
        resp = client.get("/api/jobs", params={"page": "99999999999999999999"}, headers=alice)
        assert resp.status_code == 200
        data = resp.json()
        assert data["jobs"] == []
        assert data["count"] == 1
        assert data["total_pages"] == 1

    def test_limit_must_be_positive(self, client, alice):
        assert client.get("/api/jobs", params={"limit": 0}, headers=alice).status_code == 422

    def test_all_sentinel(self, client, alice):
        create(client, alice, status="interview")
        create(client, alice, status="declined")
        data = client.get("/api/jobs", params={"jobStatus": "all"}, headers=alice).json()
        assert data["count"] == 2


class TestStats:

    def test_status_counts(self, client, alice):
        create(client, alice, status="pending")
        create(client, alice, status="Pending")
        create(client, alice, status="interview")
        assert client.get("/api/stats", headers=alice).json() == {
            "pending": 2, "interview": 1, "declined": 0,
        }

    def test_monthly(self, client, alice):
        create(client, alice)
        with get_session(get_app_engine()) as session:
            old = Job(owner_id=OWNER_A, position="Old", company="Old Co",
                      location="Remote", status="pending", mode="full-time",
                      created_at=utcnow() - timedelta(days=400),
                      updated_at=utcnow() - timedelta(days=400))
            session.add(old)
        data = client.get("/api/stats/monthly", headers=alice).json()
        assert len(data) == 1
        assert data[0]["count"] == 1
        assert set(data[0]) == {"label", "count"}

    def test_storage_failure_redirects(self, client, alice, monkeypatch):
        def boom(*args, **kwargs):
            raise StorageError()
        monkeypatch.setattr("jobtrack.routers.stats.get_status_counts", boom)
        resp = client.get("/api/stats", headers=alice, follow_redirects=False)
        assert resp.status_code == 303
        assert resp.headers["location"] == "/jobs"


class TestExport:

    def test_csv(self, client, alice, bob):
        create(client, alice, position="Exported")
        create(client, bob, position="Hidden")
        resp = client.get("/api/export/jobs.csv", headers=alice)
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert "attachment" in resp.headers["content-disposition"]
        assert "Exported" in resp.text
        assert "Hidden" not in resp.text

    def test_xlsx(self, client, alice):
        create(client, alice, status="declined")
        resp = client.get("/api/export/jobs.xlsx", headers=alice)
        assert resp.status_code == 200
        wb = load_workbook(BytesIO(resp.content))
        assert wb.sheetnames == ["Jobs", "Summary"]
