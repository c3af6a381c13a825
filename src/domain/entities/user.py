"""User and refresh token domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


class AuthProvider(StrEnum):
    """How a user account was established."""

    EMAIL = "EMAIL"
    GOOGLE = "GOOGLE"
    APPLE = "APPLE"


@dataclass
class User:
    """Domain entity for an account holder."""

    email: str
    id: UUID = field(default_factory=uuid4)
    password_hash: str | None = None
    name: str | None = None
    avatar: str | None = None
    provider: AuthProvider = AuthProvider.EMAIL
    provider_id: str | None = None
    email_verified: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        self.email = self.email.strip().lower()

    @property
    def has_password(self) -> bool:
        """OAuth-only accounts carry no password hash."""
        return bool(self.password_hash)


@dataclass
class RefreshToken:
    """A ledger row granting one future token-pair issuance.

    Only the SHA-256 hash of the opaque value is held; the raw value
    travels to the client once and is never persisted.
    """

    token_hash: str
    user_id: UUID
    expires_at: datetime
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)

    def is_expired(self, now: datetime | None = None) -> bool:
        """A token is expired once ``now`` has passed its expiry instant."""
        return (now or datetime.utcnow()) > self.expires_at
