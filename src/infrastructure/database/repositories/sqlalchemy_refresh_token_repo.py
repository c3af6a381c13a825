"""SQLAlchemy implementation of the refresh token ledger."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.user import RefreshToken
from infrastructure.database.models import RefreshTokenModel


class SQLAlchemyRefreshTokenRepository:
    """SQLAlchemy implementation of IRefreshTokenRepository.

    Deletes are issued as single statements so the affected row count tells
    concurrent consumers of the same token apart.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, token: RefreshToken) -> RefreshToken:
        """Record a newly issued refresh token."""
        model = RefreshTokenModel(
            id=token.id,
            token_hash=token.token_hash,
            user_id=token.user_id,
            expires_at=token.expires_at,
            created_at=token.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def get_by_hash(self, token_hash: str) -> RefreshToken | None:
        """Look up a ledger row by token hash."""
        stmt = select(RefreshTokenModel).where(RefreshTokenModel.token_hash == token_hash)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def delete_by_hash(self, token_hash: str) -> bool:
        """Delete a ledger row. Returns False if no row matched."""
        stmt = delete(RefreshTokenModel).where(RefreshTokenModel.token_hash == token_hash)
        result = await self._session.execute(stmt)
        return (result.rowcount or 0) > 0  # type: ignore[attr-defined]

    async def delete_all_for_user(self, user_id: UUID) -> int:
        """Delete every ledger row of a user."""
        stmt = delete(RefreshTokenModel).where(RefreshTokenModel.user_id == user_id)
        result = await self._session.execute(stmt)
        return result.rowcount or 0  # type: ignore[attr-defined]

    async def delete_expired(self, now: datetime) -> int:
        """Delete rows whose expiry is before ``now``."""
        stmt = delete(RefreshTokenModel).where(RefreshTokenModel.expires_at < now)
        result = await self._session.execute(stmt)
        return result.rowcount or 0  # type: ignore[attr-defined]

    def _to_entity(self, model: RefreshTokenModel) -> RefreshToken:
        """Convert ORM model to domain entity."""
        return RefreshToken(
            id=model.id,
            token_hash=model.token_hash,
            user_id=model.user_id,
            expires_at=model.expires_at,
            created_at=model.created_at,
        )
