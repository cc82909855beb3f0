"""
Tests for main FastAPI application
"""

from app.main import VERSION


def test_root_endpoint(client):
    """Test root health check endpoint"""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == VERSION


def test_health_endpoint(client):
    """Test detailed health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "timestamp" in data
    assert data["rateLimiter"]["horizon_ms"] == 3_600_000
    assert data["rateLimiter"]["tracked_identifiers"] == 0


def test_lifespan_starts_and_stops_janitor(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as client:
        status = client.get("/health").json()["rateLimiter"]
        assert status["running"] is True
        assert status["job_scheduled"] is True
        assert status["interval_seconds"] == 60

    assert app.state.janitor.running is False


def test_separate_apps_do_not_share_limiter(app, test_settings):
    from app.main import create_app

    other = create_app(settings=test_settings)

    assert other.state.rate_limiter is not app.state.rate_limiter
    assert other.state.rate_limiter.store is not app.state.rate_limiter.store


def test_cors_exposes_rate_limit_headers(client):
    response = client.get("/api/leave-types", headers={"Origin": "http://localhost:3000"})

    exposed = response.headers["access-control-expose-headers"]
    assert "X-RateLimit-Remaining" in exposed
    assert "Retry-After" in exposed


def test_unhandled_error_returns_500(app, client, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(app.state.leave_service.repository, "list_leave_types", boom)

    response = client.get("/api/leave-types")

    assert response.status_code == 500
    assert response.json()["error"] == "Internal server error"


def test_docs_available(client):
    assert client.get("/docs").status_code == 200
    assert client.get("/openapi.json").status_code == 200
