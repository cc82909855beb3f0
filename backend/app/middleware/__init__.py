"""FastAPI middleware for request/response processing."""

from .error_handler import (
    DocumentTooLargeError,
    EmptyDocumentError,
    ErrorHandlerMiddleware,
    InsufficientBalanceError,
    InvalidLeaveTypeError,
    LeaveAppError,
    LeaveConflictError,
    LeaveNotFoundError,
    LeaveTypeNotFoundError,
    PermissionDeniedError,
    ProfileNotFoundError,
    RateLimitExceededError,
    SelfModificationError,
    UnauthorizedError,
)

__all__ = [
    "DocumentTooLargeError",
    "EmptyDocumentError",
    "ErrorHandlerMiddleware",
    "InsufficientBalanceError",
    "InvalidLeaveTypeError",
    "LeaveAppError",
    "LeaveConflictError",
    "LeaveNotFoundError",
    "LeaveTypeNotFoundError",
    "PermissionDeniedError",
    "ProfileNotFoundError",
    "RateLimitExceededError",
    "SelfModificationError",
    "UnauthorizedError",
]
