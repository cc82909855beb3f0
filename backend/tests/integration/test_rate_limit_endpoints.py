"""
Integration Tests for Rate Limiting

Drives the sliding window through real endpoints using the injected clock.
"""

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.models import LeaveBalance
from app.services.auth import StaticTokenAuthProvider
from app.services.rate_limiter import RateLimiter, RateLimitStore
from conftest import CURRENT_YEAR, MANAGER_ID, TOKENS, auth_headers


def single_day(day: int) -> dict:
    # March 2025 weekdays, one business day each
    return {
        "leave_type_id": "annual-leave",
        "start_date": f"2025-03-{day:02d}",
        "end_date": f"2025-03-{day:02d}",
    }


WEEKDAYS = [3, 4, 5, 6, 7, 10, 11, 12, 13, 14, 17, 18]


def create(client, day_index: int, token: str = "employee-token", **headers):
    return client.post(
        "/api/leaves",
        json=single_day(WEEKDAYS[day_index]),
        headers={**auth_headers(token), **headers},
    )


class TestRateLimitHeaders:
    def test_success_carries_headers(self, client, clock):
        response = create(client, 0)

        assert response.status_code == 200
        assert response.headers["X-RateLimit-Limit"] == "10"
        assert response.headers["X-RateLimit-Remaining"] == "9"
        assert response.headers["X-RateLimit-Reset"] == str(clock.now + 10_000)
        assert "Retry-After" not in response.headers

    def test_read_operations_policy(self, client):
        response = client.get("/api/leave-types")

        assert response.headers["X-RateLimit-Limit"] == "100"
        assert response.headers["X-RateLimit-Remaining"] == "99"


class TestRateLimitExceeded:
    def test_eleventh_creation_is_rejected(self, client, clock):
        for i in range(10):
            assert create(client, i).status_code == 200
            clock.advance(100)

        response = create(client, 10)

        assert response.status_code == 429
        assert response.json() == {
            "error": "Rate limit exceeded",
            "details": {"retryAfter": 9, "limit": 10},
        }
        assert response.headers["X-RateLimit-Remaining"] == "0"
        assert response.headers["Retry-After"] == "9"

    def test_rejection_is_logged(self, client, caplog):
        for i in range(10):
            create(client, i)

        with caplog.at_level("WARNING", logger="app.middleware.rate_limit"):
            create(client, 10)

        assert "Rate limit exceeded for user:3f1c9a52..." in caplog.text

    def test_window_slides_open(self, client, clock):
        for i in range(10):
            create(client, i)
        assert create(client, 10).status_code == 429

        clock.advance(10_001)

        response = create(client, 10)
        assert response.status_code == 200
        assert response.headers["X-RateLimit-Remaining"] == "9"

    def test_denied_requests_do_not_extend_window(self, client, clock):
        for i in range(10):
            create(client, i)
        for _ in range(5):
            clock.advance(1_000)
            assert create(client, 10).status_code == 429

        clock.advance(5_001)

        assert create(client, 10).status_code == 200

    def test_users_have_separate_quotas(self, client, repository):
        repository.save_balance(
            LeaveBalance(employee_id=MANAGER_ID, leave_type_id="annual-leave", year=CURRENT_YEAR, allocated_days=5)
        )
        for i in range(10):
            create(client, i)
        assert create(client, 10).status_code == 429

        response = create(client, 10, token="manager-token")

        assert response.status_code == 200
        assert response.headers["X-RateLimit-Remaining"] == "9"

    def test_policies_have_separate_quotas(self, client):
        for i in range(10):
            create(client, i)

        response = client.get("/api/balances", headers=auth_headers("employee-token"))

        assert response.status_code == 200
        assert response.headers["X-RateLimit-Remaining"] == "99"


class TestAnonymousCallers:
    def test_keyed_by_forwarded_ip(self, client, app):
        for _ in range(3):
            client.get("/api/leave-types", headers={"x-forwarded-for": "203.0.113.5, 10.0.0.1"})
        client.get("/api/leave-types", headers={"x-forwarded-for": "198.51.100.7"})

        store = app.state.rate_limiter.store
        assert len(store.timestamps("read_operations:ip:203.0.113.5")) == 3
        assert len(store.timestamps("read_operations:ip:198.51.100.7")) == 1

    def test_real_ip_fallback(self, client, app):
        client.get("/api/leave-types", headers={"x-real-ip": "192.0.2.44"})

        assert len(app.state.rate_limiter.store.timestamps("read_operations:ip:192.0.2.44")) == 1

    def test_limited_before_authentication(self, client, app):
        client.post("/api/leaves", json=single_day(3), headers={"x-forwarded-for": "203.0.113.9"})

        assert len(app.state.rate_limiter.store.timestamps("leave_creation:ip:203.0.113.9")) == 1


class TestFailOpen:
    def test_store_error_allows_request(self, client, app, clock, monkeypatch, caplog):
        def broken(self, identifier, now):
            raise RuntimeError("store unavailable")

        monkeypatch.setattr(RateLimitStore, "get_or_create", broken)

        with caplog.at_level("WARNING", logger="app.middleware.rate_limit"):
            response = create(client, 0)

        assert response.status_code == 200
        assert response.headers["X-RateLimit-Remaining"] == "10"
        assert response.headers["X-RateLimit-Reset"] == str(clock.now + 10_000)
        assert "allowing request" in caplog.text

    def test_clock_error_allows_request(self, test_settings, repository):
        def broken_clock():
            raise RuntimeError("clock down")

        app = create_app(
            settings=test_settings,
            repository=repository,
            auth_provider=StaticTokenAuthProvider(TOKENS),
            rate_limiter=RateLimiter(clock=broken_clock),
        )
        client = TestClient(app)

        response = client.get("/api/leave-types")

        assert response.status_code == 200
        assert response.headers["X-RateLimit-Limit"] == "100"
        assert response.headers["X-RateLimit-Remaining"] == "100"
        assert "Retry-After" not in response.headers


class TestDisabled:
    @pytest.fixture
    def test_settings(self, tmp_path):
        from app.config import Settings

        return Settings(
            STORAGE_PATH=str(tmp_path / "storage"),
            LOG_LEVEL="WARNING",
            AUTH_TOKENS={},
            RATE_LIMIT_ENABLED=False,
        )

    def test_no_enforcement_when_disabled(self, client, app):
        for i in range(12):
            assert create(client, i).status_code == 200

        assert app.state.rate_limiter.store.size == 0
