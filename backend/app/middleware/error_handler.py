"""
Centralized error handling middleware for FastAPI.

Provides consistent error responses and logging for all API routes.
"""

import logging
from typing import Any, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from leave_engine import InvalidTransitionError, LeaveRuleError

logger = logging.getLogger(__name__)


class LeaveAppError(Exception):
    """Base exception for API errors that map to an HTTP response."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Any = None,
        headers: Optional[dict[str, str]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details
        self.headers = headers or {}
        super().__init__(message)


class UnauthorizedError(LeaveAppError):
    """Raised when no valid bearer token accompanies the request."""

    def __init__(self):
        super().__init__(message="Unauthorized", status_code=401)


class PermissionDeniedError(LeaveAppError):
    """Raised when the caller's role does not permit the operation."""

    def __init__(self, current_role: Optional[str], required_roles: list[str]):
        super().__init__(
            message="Insufficient permissions",
            status_code=403,
            details={"required_role": sorted(required_roles), "current_role": current_role},
        )


class LeaveNotFoundError(LeaveAppError):
    """Raised when leave ID is not found."""

    def __init__(self, leave_id: str):
        super().__init__(
            message="Leave request not found",
            status_code=404,
            details={"leave_id": leave_id},
        )


class ProfileNotFoundError(LeaveAppError):
    """Raised when user ID has no profile."""

    def __init__(self, user_id: str):
        super().__init__(
            message="User not found",
            status_code=404,
            details={"user_id": user_id},
        )


class LeaveTypeNotFoundError(LeaveAppError):
    def __init__(self, leave_type_id: str):
        super().__init__(
            message="Leave type not found",
            status_code=404,
            details={"leave_type_id": leave_type_id},
        )


class SelfModificationError(LeaveAppError):
    """Raised when an administrator targets their own account."""

    def __init__(self, message: str):
        super().__init__(message=message, status_code=400)


class InvalidLeaveTypeError(LeaveAppError):
    """Raised when leave type is unknown or inactive."""

    def __init__(self, leave_type_id: str):
        super().__init__(
            message="Invalid leave type",
            status_code=400,
            details={"leave_type_id": leave_type_id},
        )


class InsufficientBalanceError(LeaveAppError):
    """Raised when a request asks for more days than the balance holds."""

    def __init__(self, available: int, requested: int):
        super().__init__(
            message="Insufficient leave balance",
            status_code=400,
            details={"available": available, "requested": requested},
        )


class LeaveConflictError(LeaveAppError):
    """Raised when a leave is not in a state that allows the operation."""

    def __init__(self, message: str, leave_id: Optional[str] = None):
        super().__init__(
            message=message,
            status_code=409,
            details={"leave_id": leave_id} if leave_id else None,
        )


class DocumentTooLargeError(LeaveAppError):
    """Raised when an uploaded document exceeds the size limit."""

    def __init__(self, max_bytes: int):
        super().__init__(
            message=f"File size exceeds {max_bytes // (1024 * 1024)}MB limit",
            status_code=413,
            details={"max_bytes": max_bytes},
        )


class EmptyDocumentError(LeaveAppError):
    def __init__(self, filename: Optional[str]):
        super().__init__(
            message="Empty file uploaded",
            status_code=400,
            details={"filename": filename},
        )


class RateLimitExceededError(LeaveAppError):
    """Raised when a caller exhausts the quota of a rate limit policy."""

    def __init__(self, retry_after: int, limit: int, headers: dict[str, str]):
        super().__init__(
            message="Rate limit exceeded",
            status_code=429,
            details={"retryAfter": retry_after, "limit": limit},
            headers=headers,
        )


def _rule_error_status(error: LeaveRuleError) -> int:
    return 409 if isinstance(error, InvalidTransitionError) else 400


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware that catches unhandled exceptions and returns consistent error responses.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)
            return response

        except LeaveAppError as e:
            log = logger.warning if e.status_code < 500 else logger.error
            log(
                f"{type(e).__name__}: {e.message}",
                extra={"status_code": e.status_code, "details": e.details},
            )
            return JSONResponse(
                status_code=e.status_code,
                content={
                    "error": e.message,
                    "details": e.details,
                },
                headers=e.headers,
            )

        except LeaveRuleError as e:
            logger.warning(f"{type(e).__name__}: {e}")
            return JSONResponse(
                status_code=_rule_error_status(e),
                content={
                    "error": str(e),
                    "details": None,
                },
            )

        except Exception as e:
            # Log full stack trace for unexpected errors
            logger.exception(f"Unhandled exception: {str(e)}")
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Internal server error",
                    "message": str(e) if logger.isEnabledFor(logging.DEBUG) else None,
                },
            )
