"""Authentication provider protocol and the values it produces."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol
from uuid import UUID


@dataclass(frozen=True)
class AuthenticatedUser:
    """The identity attached to a request once its access token checks out."""

    id: UUID
    email: str
    name: Optional[str] = None


@dataclass(frozen=True)
class TokenClaims:
    """Verified claims of an access token."""

    user_id: UUID
    email: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class TokenPair:
    """An access token plus the refresh token that can replace it."""

    access_token: str
    refresh_token: str


class IAuthProvider(Protocol):
    """Protocol for access token issuers/verifiers."""

    def create_access_token(self, user_id: UUID, email: str) -> str:
        """
        Create a signed access token.

        Args:
            user_id: Subject of the token
            email: Email claim carried alongside the subject

        Returns:
            The encoded token string
        """
        ...

    def verify_access_token(self, token: str) -> Optional[TokenClaims]:
        """
        Verify an access token.

        Args:
            token: The bearer token to verify

        Returns:
            TokenClaims if valid, None on any failure
        """
        ...
