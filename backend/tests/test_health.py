"""Health and readiness endpoint tests."""

from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from testhub.db.session import get_db
from testhub.main import app


def test_root_endpoint(client):
    """Root endpoint returns API information."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "TestHub API"
    assert data["version"] == "1.0.0"


def test_health(client):
    response = client.get("/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_ready_when_database_reachable(client):
    response = client.get("/v1/ready", headers={"X-Request-ID": "ready-1"})

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["checks"]["database"]["status"] == "ok"
    assert data["request_id"] == "ready-1"


def test_ready_reports_database_down(client):
    broken = MagicMock()
    broken.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))
    app.dependency_overrides[get_db] = lambda: broken

    response = client.get("/v1/ready")

    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "down"
    assert data["checks"]["database"] == {"status": "down", "message": "OperationalError"}
