"""Health checks, routing and error handling of the application shell."""

import importlib

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from dashboard_api.main import app
from dashboard_api.modules.projects.service import ProjectService


def test_health_returns_ok_unwrapped(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["content-type"].startswith("application/json")


def test_health_is_stable_across_calls(client):
    for _ in range(3):
        assert client.get("/health").json() == {"status": "ok"}


def test_ready_reports_database(client):
    response = client.get("/health/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok"}


def test_ready_reports_unavailable_database(client, monkeypatch):
    async def broken():
        return False

    health_router = importlib.import_module("dashboard_api.modules.health.router")
    monkeypatch.setattr(health_router, "check_database_connection", broken)

    response = client.get("/health/ready")

    assert response.status_code == 503
    assert response.json() == {"status": "unavailable", "database": "error"}


def test_wrong_method_on_health_is_405(client):
    assert client.post("/health").status_code == 405
    assert client.delete("/health").status_code == 405


def test_unknown_path_is_404(client):
    assert client.get("/nope").status_code == 404


def test_malformed_json_is_400(client):
    response = client.post(
        "/projects",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "Malformed request body"}


def test_schema_violation_is_422(client):
    response = client.post("/projects", json={"name": "Acme"})

    assert response.status_code == 422
    assert response.json()["detail"][0]["loc"][-1] == "methods"


def test_unexpected_error_is_500_and_server_keeps_serving(client, monkeypatch):
    async def explode(db):
        raise RuntimeError("boom")

    monkeypatch.setattr(ProjectService, "find_all", staticmethod(explode))

    with TestClient(app, raise_server_exceptions=False) as failing_client:
        response = failing_client.get("/projects")

        assert response.status_code == 500
        assert response.json() == {"detail": "Something went wrong"}
        assert failing_client.get("/health").status_code == 200


def test_ready_fails_when_database_cannot_be_opened(client, monkeypatch, tmp_path):
    unreachable = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'missing-dir' / 'app.db'}", poolclass=NullPool
    )
    engine_module = importlib.import_module("dashboard_api.core.db.engine")
    monkeypatch.setattr(
        engine_module, "AsyncSessionLocal", async_sessionmaker(unreachable, class_=AsyncSession)
    )

    response = client.get("/health/ready")

    assert response.status_code == 503
    assert response.json() == {"status": "unavailable", "database": "error"}


def test_wrong_method_on_resource_route_is_405(client):
    assert client.put("/projects").status_code == 405
    assert client.patch("/projects").status_code == 405


def test_failed_commit_is_500_and_nothing_is_saved(client, monkeypatch):
    async def failing_commit(self):
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    with monkeypatch.context() as patch:
        patch.setattr(AsyncSession, "commit", failing_commit)
        response = client.post("/projects", json={"name": "Lost", "methods": ["email"]})

    assert response.status_code == 500
    assert response.json() == {"detail": "Database operation failed"}
    assert client.get("/projects").json()["data"]["data"] == []
