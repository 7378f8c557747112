"""Health endpoint tests."""

from fastapi.testclient import TestClient


def test_liveness_returns_200(client: TestClient) -> None:
    """Liveness endpoint returns 200 OK."""
    response = client.get("/api/health/live")
    assert response.status_code == 200


def test_liveness_returns_status(client: TestClient) -> None:
    """Liveness endpoint returns alive status."""
    response = client.get("/api/health/live")
    data = response.json()
    assert "status" in data
    assert data["status"] == "alive"


def test_readiness_ok_with_content_and_store(client: TestClient) -> None:
    """Readiness passes when the content root and store are available."""
    response = client.get("/api/health/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert {check["status"] for check in data["checks"]} == {"ok"}


def test_readiness_fails_without_content_root(client: TestClient) -> None:
    """Readiness reports 503 when the content root is missing."""
    settings = client.app.state.settings
    settings.content_root = settings.content_root / "missing"

    response = client.get("/api/health/ready")
    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "not_ready"
    failed = [c for c in data["checks"] if c["status"] == "failed"]
    assert failed[0]["message"] == "Directory not found"
