"""Test configuration and shared fixtures."""

import asyncio
import os
import tempfile
from pathlib import Path

import pytest

# The settings object is built at import time, so the database has to be
# chosen before anything from dashboard_api is imported.
_db_dir = tempfile.mkdtemp(prefix="dashboard-api-tests-")
os.environ["DB_URL"] = f"sqlite+aiosqlite:///{Path(_db_dir) / 'test.db'}"
os.environ["CDN_BUCKET"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

from fastapi.testclient import TestClient  # noqa: E402

from dashboard_api.core.db.engine import engine  # noqa: E402
from dashboard_api.core.db.models import Base  # noqa: E402
from dashboard_api.main import app  # noqa: E402


async def _reset_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
def client():
    """A TestClient over an empty database."""
    asyncio.run(_reset_tables())
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def project(client):
    """A project created through the API, with email and phone sign-in."""
    response = client.post(
        "/projects", json={"name": "Acme", "methods": ["email", "phone"]}
    )
    assert response.status_code == 200
    return response.json()["data"]


@pytest.fixture
def deployment_id(project):
    return project["deployments"][0]["id"]


@pytest.fixture
def create_user(client, deployment_id):
    """Factory creating users on the staging deployment."""

    def _create(**overrides):
        payload = {
            "first_name": "Ada",
            "last_name": "Lovelace",
            "email_address": "ada@example.com",
            "phone_number": "+15550100",
        }
        payload.update(overrides)
        response = client.post(f"/deployments/{deployment_id}/users", json=payload)
        assert response.status_code == 200, response.text
        return response.json()["data"]

    return _create
