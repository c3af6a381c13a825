"""Access token issuance and the refresh token ledger."""

import hashlib
import secrets
from collections.abc import Callable
from datetime import datetime, timedelta
from uuid import UUID

import structlog

from core.exceptions import AuthenticationError, ErrorCode, InvalidRefreshTokenError
from domain.entities.user import RefreshToken, User
from domain.repositories.unit_of_work import IUnitOfWork
from infrastructure.auth.provider import IAuthProvider, TokenPair

logger = structlog.get_logger()

REFRESH_TOKEN_BYTES = 48


def hash_token(raw_token: str) -> str:
    """SHA-256 hex digest under which opaque tokens are stored."""
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


class TokenService:
    """Issues token pairs and maintains the refresh token ledger.

    A refresh token is a single-use capability: presenting it to ``rotate``
    consumes the ledger row and yields a fresh pair.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        auth_provider: IAuthProvider,
        refresh_token_expire_days: int = 7,
    ) -> None:
        self._uow_factory = uow_factory
        self._auth = auth_provider
        self._refresh_lifetime = timedelta(days=refresh_token_expire_days)

    def issue_access_token(self, user_id: UUID, email: str) -> str:
        """Sign a short-lived access token."""
        return self._auth.create_access_token(user_id, email)

    async def issue_refresh_token(self, uow: IUnitOfWork, user_id: UUID) -> str:
        """Record a new refresh token in the caller's unit of work.

        The caller commits. Returns the raw token, which is never stored.
        """
        raw_token = secrets.token_urlsafe(REFRESH_TOKEN_BYTES)
        now = datetime.utcnow()
        await uow.refresh_tokens.create(
            RefreshToken(
                token_hash=hash_token(raw_token),
                user_id=user_id,
                created_at=now,
                expires_at=now + self._refresh_lifetime,
            )
        )
        return raw_token

    async def issue_token_pair(self, uow: IUnitOfWork, user: User) -> TokenPair:
        """Issue an access token plus a ledger-backed refresh token."""
        refresh_token = await self.issue_refresh_token(uow, user.id)
        return TokenPair(
            access_token=self.issue_access_token(user.id, user.email),
            refresh_token=refresh_token,
        )

    async def lookup(self, token: str) -> RefreshToken | None:
        """Find the ledger row for a raw token."""
        async with self._uow_factory() as uow:
            return await uow.refresh_tokens.get_by_hash(hash_token(token))

    async def validate(self, token: str) -> UUID | None:
        """Return the owning user id of a live refresh token.

        Unknown tokens give None. Expired tokens are deleted and give None.
        """
        async with self._uow_factory() as uow:
            token_hash = hash_token(token)
            row = await uow.refresh_tokens.get_by_hash(token_hash)
            if row is None:
                return None
            if row.is_expired():
                await uow.refresh_tokens.delete_by_hash(token_hash)
                await uow.commit()
                return None
            return row.user_id

    async def revoke(self, token: str) -> bool:
        """Delete a refresh token. Revoking an unknown token is not an error."""
        async with self._uow_factory() as uow:
            removed = await uow.refresh_tokens.delete_by_hash(hash_token(token))
            await uow.commit()
            return removed

    async def revoke_all(self, user_id: UUID) -> int:
        """Delete every refresh token of a user (log out everywhere)."""
        async with self._uow_factory() as uow:
            removed = await uow.refresh_tokens.delete_all_for_user(user_id)
            await uow.commit()

        logger.info("logout_all", user_id=str(user_id), revoked_count=removed)
        return removed

    async def delete_expired(self) -> int:
        """Purge expired ledger rows."""
        async with self._uow_factory() as uow:
            removed = await uow.refresh_tokens.delete_expired(datetime.utcnow())
            await uow.commit()

        if removed:
            logger.info("expired_refresh_tokens_purged", deleted_count=removed)
        return removed

    async def rotate(self, token: str) -> tuple[User, TokenPair]:
        """Exchange a refresh token for a new pair.

        The old token is consumed and committed before the new pair is
        issued. Of two concurrent rotations of the same token only the one
        whose delete affects a row proceeds.

        Raises:
            InvalidRefreshTokenError: Unknown, expired or already consumed token.
            AuthenticationError: The owning user no longer exists.
        """
        async with self._uow_factory() as uow:
            token_hash = hash_token(token)
            row = await uow.refresh_tokens.get_by_hash(token_hash)
            if row is None:
                logger.warning("refresh_token_reused_or_invalid", reason="unknown")
                raise InvalidRefreshTokenError()

            if row.is_expired():
                await uow.refresh_tokens.delete_by_hash(token_hash)
                await uow.commit()
                logger.info("refresh_token_reused_or_invalid", reason="expired")
                raise InvalidRefreshTokenError()

            user = await uow.users.get(row.user_id)
            if user is None:
                raise AuthenticationError("User not found", ErrorCode.USER_NOT_FOUND)

            consumed = await uow.refresh_tokens.delete_by_hash(token_hash)
            if not consumed:
                logger.warning(
                    "refresh_token_reused_or_invalid",
                    reason="concurrent_rotation",
                    user_id=str(user.id),
                )
                raise InvalidRefreshTokenError()
            await uow.commit()

            pair = await self.issue_token_pair(uow, user)
            await uow.commit()

        logger.info("refresh_token_rotated", user_id=str(user.id))
        return user, pair
