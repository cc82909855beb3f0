"""
Request-scoped FastAPI dependencies.

Components are constructed once in create_app() and stored on app.state;
these helpers hand them to route functions.
"""

from typing import Optional

from fastapi import Depends, Header, Request

from app.middleware.error_handler import UnauthorizedError
from app.services.auth import AuthProvider, parse_bearer_token
from app.services.document_storage import DocumentStorage
from app.services.leave_service import LeaveService


def get_auth_provider(request: Request) -> AuthProvider:
    return request.app.state.auth_provider


def get_leave_service(request: Request) -> LeaveService:
    return request.app.state.leave_service


def get_document_storage(request: Request) -> DocumentStorage:
    return request.app.state.document_storage


async def get_optional_user_id(
    authorization: Optional[str] = Header(default=None),
    auth_provider: AuthProvider = Depends(get_auth_provider),
) -> Optional[str]:
    """User ID for a valid bearer token, None for anonymous callers."""
    token = parse_bearer_token(authorization)
    if token is None:
        return None
    return auth_provider.get_user_id(token)


async def get_current_user_id(
    user_id: Optional[str] = Depends(get_optional_user_id),
) -> str:
    """
    User ID of the authenticated caller.

    Raises:
        UnauthorizedError: 401 if the request carries no valid token
    """
    if user_id is None:
        raise UnauthorizedError()
    return user_id
