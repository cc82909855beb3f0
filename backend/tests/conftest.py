"""
Pytest configuration and fixtures
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from app.models import LeaveBalance, Profile
from app.services.auth import StaticTokenAuthProvider
from app.services.leave_repository import InMemoryLeaveRepository
from app.services.leave_service import LeaveService
from app.services.rate_limiter import RateLimiter

CURRENT_YEAR = datetime.now(timezone.utc).year

EMPLOYEE_ID = "3f1c9a52-employee"
MANAGER_ID = "7b2d4e10-manager"
ADMIN_ID = "9e8f7a6b-admin"

TOKENS = {
    "employee-token": EMPLOYEE_ID,
    "manager-token": MANAGER_ID,
    "admin-token": ADMIN_ID,
}


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def repository():
    """Repository with the default leave types, three users and annual leave balances."""
    repo = InMemoryLeaveRepository(seed_leave_types=True)
    repo.add_profile(Profile(id=EMPLOYEE_ID, full_name="Ada Employee", email="ada@example.com", role="employee", department="Engineering"))
    repo.add_profile(Profile(id=MANAGER_ID, full_name="Max Manager", email="max@example.com", role="manager", department="Engineering"))
    repo.add_profile(Profile(id=ADMIN_ID, full_name="Hana Admin", email="hana@example.com", role="admin"))
    repo.save_balance(
        LeaveBalance(
            employee_id=EMPLOYEE_ID,
            leave_type_id="annual-leave",
            year=CURRENT_YEAR,
            allocated_days=25,
        )
    )
    return repo


@pytest.fixture
def leave_service(repository):
    return LeaveService(repository)


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        STORAGE_PATH=str(tmp_path / "storage"),
        LOG_LEVEL="WARNING",
        AUTH_TOKENS={},
    )


@pytest.fixture
def app(test_settings, repository, clock):
    return create_app(
        settings=test_settings,
        repository=repository,
        auth_provider=StaticTokenAuthProvider(TOKENS),
        rate_limiter=RateLimiter(clock=clock),
    )


@pytest.fixture
def client(app):
    """FastAPI test client fixture"""
    return TestClient(app)
