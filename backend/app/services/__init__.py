"""Service layer for business logic and external integrations."""

from .auth import AuthProvider, StaticTokenAuthProvider
from .document_storage import DocumentStorage
from .leave_repository import InMemoryLeaveRepository, LeaveRepository
from .leave_service import LeaveService
from .rate_limit_janitor import RateLimitJanitor
from .rate_limiter import RATE_LIMITS, CheckResult, RateLimiter, RateLimitPolicy, RateLimitStore

__all__ = [
    "AuthProvider",
    "StaticTokenAuthProvider",
    "DocumentStorage",
    "InMemoryLeaveRepository",
    "LeaveRepository",
    "LeaveService",
    "RateLimitJanitor",
    "RATE_LIMITS",
    "CheckResult",
    "RateLimiter",
    "RateLimitPolicy",
    "RateLimitStore",
]
