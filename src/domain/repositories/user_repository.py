"""User and refresh token repository protocols."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from domain.entities.user import AuthProvider, RefreshToken, User


class IUserRepository(Protocol):
    """Repository interface for User entities (the credential store)."""

    async def get(self, id: UUID) -> User | None:
        """Get a user by ID."""
        ...

    async def get_by_email(self, email: str) -> User | None:
        """Get a user by (lower-cased) email."""
        ...

    async def get_by_email_or_provider(
        self, email: str, provider: AuthProvider, provider_id: str
    ) -> User | None:
        """Get a user matching the email or the external provider identity."""
        ...

    async def get_many(self, ids: list[UUID]) -> list[User]:
        """Get several users in one query."""
        ...

    async def create(self, user: User) -> User:
        """Create a new user."""
        ...

    async def update(self, user: User) -> User:
        """Update an existing user."""
        ...


class IRefreshTokenRepository(Protocol):
    """Repository interface for the refresh token ledger."""

    async def create(self, token: RefreshToken) -> RefreshToken:
        """Record a newly issued refresh token."""
        ...

    async def get_by_hash(self, token_hash: str) -> RefreshToken | None:
        """Look up a ledger row by token hash."""
        ...

    async def delete_by_hash(self, token_hash: str) -> bool:
        """Delete a ledger row. Returns False if no row matched."""
        ...

    async def delete_all_for_user(self, user_id: UUID) -> int:
        """Delete every ledger row of a user. Returns the count removed."""
        ...

    async def delete_expired(self, now: datetime) -> int:
        """Delete rows whose expiry is before ``now``. Returns the count removed."""
        ...
