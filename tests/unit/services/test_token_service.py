"""Unit tests for TokenService (access tokens and the refresh token ledger)."""

from datetime import datetime, timedelta
from unittest.mock import MagicMock
from uuid import UUID

import pytest

from core.exceptions import AuthenticationError, ErrorCode, InvalidRefreshTokenError
from domain.entities.user import RefreshToken, User
from domain.services.token_service import TokenService, hash_token
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def auth_provider() -> MagicMock:
    provider = MagicMock()
    provider.create_access_token.return_value = "signed.access.token"
    return provider


@pytest.fixture
def service(uow: FakeUnitOfWork, auth_provider: MagicMock) -> TokenService:
    return TokenService(lambda: uow, auth_provider, refresh_token_expire_days=7)


def _row(
    user_id: UUID, raw: str = "raw-token", expires_in: timedelta = timedelta(days=1)
) -> RefreshToken:
    return RefreshToken(
        token_hash=hash_token(raw),
        user_id=user_id,
        expires_at=datetime.utcnow() + expires_in,
    )


class TestHashToken:
    def test_is_stable_sha256_hex(self):
        digest = hash_token("abc")

        assert digest == hash_token("abc")
        assert len(digest) == 64
        assert digest != "abc"


# --- issuance ---


class TestIssue:
    @pytest.mark.asyncio
    async def test_refresh_token_is_stored_hashed_with_expiry(
        self, service: TokenService, uow: FakeUnitOfWork, user_id: UUID
    ):
        raw = await service.issue_refresh_token(uow, user_id)

        stored: RefreshToken = uow.refresh_tokens.create.call_args.args[0]
        assert stored.token_hash == hash_token(raw)
        assert stored.token_hash != raw
        assert stored.user_id == user_id
        assert stored.expires_at - stored.created_at == timedelta(days=7)
        # The caller owns the commit
        assert uow.committed is False

    @pytest.mark.asyncio
    async def test_refresh_tokens_are_unique(
        self, service: TokenService, uow: FakeUnitOfWork, user_id: UUID
    ):
        first = await service.issue_refresh_token(uow, user_id)
        second = await service.issue_refresh_token(uow, user_id)

        assert first != second

    @pytest.mark.asyncio
    async def test_token_pair(
        self, service: TokenService, uow: FakeUnitOfWork, auth_provider: MagicMock
    ):
        user = User(email="a@x.com")

        pair = await service.issue_token_pair(uow, user)

        assert pair.access_token == "signed.access.token"
        assert pair.refresh_token
        auth_provider.create_access_token.assert_called_once_with(user.id, "a@x.com")


# --- validate / lookup ---


class TestValidate:
    @pytest.mark.asyncio
    async def test_live_token_returns_owner(
        self, service: TokenService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.refresh_tokens.get_by_hash.return_value = _row(user_id)

        assert await service.validate("raw-token") == user_id
        uow.refresh_tokens.get_by_hash.assert_called_once_with(hash_token("raw-token"))

    @pytest.mark.asyncio
    async def test_unknown_token_is_invalid(self, service: TokenService, uow: FakeUnitOfWork):
        uow.refresh_tokens.get_by_hash.return_value = None

        assert await service.validate("nope") is None

    @pytest.mark.asyncio
    async def test_expired_token_is_purged_on_read(
        self, service: TokenService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.refresh_tokens.get_by_hash.return_value = _row(
            user_id, expires_in=timedelta(seconds=-1)
        )

        assert await service.validate("raw-token") is None
        uow.refresh_tokens.delete_by_hash.assert_called_once_with(hash_token("raw-token"))
        assert uow.committed

    @pytest.mark.asyncio
    async def test_lookup_returns_row(
        self, service: TokenService, uow: FakeUnitOfWork, user_id: UUID
    ):
        row = _row(user_id)
        uow.refresh_tokens.get_by_hash.return_value = row

        assert await service.lookup("raw-token") is row


# --- revocation ---


class TestRevoke:
    @pytest.mark.asyncio
    async def test_revoke_is_idempotent(self, service: TokenService, uow: FakeUnitOfWork):
        uow.refresh_tokens.delete_by_hash.return_value = False

        assert await service.revoke("already-gone") is False
        assert uow.committed

    @pytest.mark.asyncio
    async def test_revoke_all(self, service: TokenService, uow: FakeUnitOfWork, user_id: UUID):
        uow.refresh_tokens.delete_all_for_user.return_value = 3

        assert await service.revoke_all(user_id) == 3
        uow.refresh_tokens.delete_all_for_user.assert_called_once_with(user_id)
        assert uow.committed

    @pytest.mark.asyncio
    async def test_delete_expired(self, service: TokenService, uow: FakeUnitOfWork):
        uow.refresh_tokens.delete_expired.return_value = 5

        assert await service.delete_expired() == 5
        cutoff = uow.refresh_tokens.delete_expired.call_args.args[0]
        assert isinstance(cutoff, datetime)


# --- rotation ---


class TestRotate:
    @pytest.mark.asyncio
    async def test_consumes_old_token_and_issues_new_pair(
        self, service: TokenService, uow: FakeUnitOfWork
    ):
        user = User(email="a@x.com")
        uow.refresh_tokens.get_by_hash.return_value = _row(user.id, raw="old")
        uow.users.get.return_value = user
        uow.refresh_tokens.delete_by_hash.return_value = True

        rotated_user, pair = await service.rotate("old")

        assert rotated_user is user
        uow.refresh_tokens.delete_by_hash.assert_called_once_with(hash_token("old"))
        new_row: RefreshToken = uow.refresh_tokens.create.call_args.args[0]
        assert new_row.token_hash == hash_token(pair.refresh_token)
        assert pair.refresh_token != "old"
        # Old token removal is committed before the new pair
        assert uow.commit_count == 2

    @pytest.mark.asyncio
    async def test_unknown_token_is_rejected(self, service: TokenService, uow: FakeUnitOfWork):
        uow.refresh_tokens.get_by_hash.return_value = None

        with pytest.raises(InvalidRefreshTokenError) as exc_info:
            await service.rotate("consumed")

        assert exc_info.value.status_code == 401
        uow.refresh_tokens.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_expired_token_is_deleted_and_rejected(
        self, service: TokenService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.refresh_tokens.get_by_hash.return_value = _row(
            user_id, raw="old", expires_in=timedelta(seconds=-1)
        )

        with pytest.raises(InvalidRefreshTokenError):
            await service.rotate("old")

        uow.refresh_tokens.delete_by_hash.assert_called_once_with(hash_token("old"))
        uow.refresh_tokens.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_losing_a_concurrent_rotation_is_rejected(
        self, service: TokenService, uow: FakeUnitOfWork
    ):
        user = User(email="a@x.com")
        uow.refresh_tokens.get_by_hash.return_value = _row(user.id, raw="old")
        uow.users.get.return_value = user
        # Another request deleted the row between our read and our delete
        uow.refresh_tokens.delete_by_hash.return_value = False

        with pytest.raises(InvalidRefreshTokenError):
            await service.rotate("old")

        uow.refresh_tokens.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_deleted_user_is_rejected(
        self, service: TokenService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.refresh_tokens.get_by_hash.return_value = _row(user_id, raw="old")
        uow.users.get.return_value = None

        with pytest.raises(AuthenticationError) as exc_info:
            await service.rotate("old")

        assert exc_info.value.error_code == ErrorCode.USER_NOT_FOUND
