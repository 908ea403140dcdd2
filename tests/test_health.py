"""Tests for health endpoints."""

from unittest.mock import Mock

from fastapi.testclient import TestClient


def test_liveness(client: TestClient) -> None:
    response = client.get("/health/live")
    assert response.status_code == 200
    assert response.json() == {"status": "alive"}


def test_readiness_without_services(client: TestClient) -> None:
    """Readiness reports degraded until the services are wired."""
    response = client.get("/health/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "degraded"
    assert data["missing_services"] == ["course_service", "progress_service"]
    assert data["cassandra"] is False
    assert data["environment"] == "testing"


def test_readiness_reports_cache_down_without_redis(client: TestClient) -> None:
    response = client.get("/health/ready")
    assert response.json()["course_cache"] == "down"


def test_readiness_with_services(app, client: TestClient) -> None:
    app.state.course_service = Mock()
    app.state.progress_service = Mock()

    response = client.get("/health/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["missing_services"] == []


def test_readiness_partial_services(app, client: TestClient) -> None:
    app.state.course_service = Mock()

    data = client.get("/health/ready").json()
    assert data["status"] == "degraded"
    assert data["missing_services"] == ["progress_service"]


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["app_name"] == "learnease"
    assert "version" in data
    assert "environment" in data


def test_root(client: TestClient) -> None:
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert "LearnEase" in data["message"]
    assert "version" in data


def test_request_id_header_propagated(client: TestClient) -> None:
    response = client.get("/health/live", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
