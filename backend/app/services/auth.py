"""
Auth provider abstraction.

Resolves a bearer token to a user ID. Session handling itself belongs to
the identity provider; the API only needs to know who is calling.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

logger = logging.getLogger(__name__)


def parse_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an 'Authorization: Bearer <token>' header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class AuthProvider(ABC):
    """Interface to the identity provider."""

    @abstractmethod
    def get_user_id(self, token: str) -> Optional[str]:
        """
        Resolve an access token.

        Args:
            token: Bearer token from the Authorization header

        Returns:
            str: User ID if the token is valid, None otherwise
        """
        pass


class StaticTokenAuthProvider(AuthProvider):
    """Token table kept in memory, seeded from configuration."""

    def __init__(self, tokens: Optional[Dict[str, str]] = None):
        self._tokens: Dict[str, str] = dict(tokens or {})

    def register_token(self, token: str, user_id: str) -> None:
        self._tokens[token] = user_id

    def get_user_id(self, token: str) -> Optional[str]:
        user_id = self._tokens.get(token)
        if user_id is None:
            logger.debug("Rejected unknown bearer token")
        return user_id
