"""Unit tests for AuthService."""

from unittest.mock import AsyncMock
from uuid import UUID

import pytest

from core.exceptions import (
    AuthenticationError,
    EmailAlreadyRegisteredError,
    ErrorCode,
    InvalidCredentialsError,
)
from domain.entities.user import AuthProvider, User
from domain.entities.workspace import Workspace, WorkspaceMember, WorkspaceRole
from domain.services.auth_service import AuthService
from infrastructure.auth.password import hash_password, verify_password
from infrastructure.auth.provider import TokenPair
from tests.unit.conftest import FakeUnitOfWork

PAIR = TokenPair(access_token="access", refresh_token="refresh")


@pytest.fixture
def token_service() -> AsyncMock:
    tokens = AsyncMock()
    tokens.issue_token_pair.return_value = PAIR
    return tokens


@pytest.fixture
def service(uow: FakeUnitOfWork, token_service: AsyncMock) -> AuthService:
    return AuthService(lambda: uow, token_service)


@pytest.fixture
def password_user() -> User:
    return User(email="a@x.com", password_hash=hash_password("pw12345678", rounds=4))


async def _echo(user: User) -> User:
    return user


# --- register ---


class TestRegister:
    @pytest.mark.asyncio
    async def test_creates_user_and_signs_in(
        self, service: AuthService, uow: FakeUnitOfWork, token_service: AsyncMock
    ):
        uow.users.get_by_email.return_value = None
        uow.users.create.side_effect = _echo

        user, pair = await service.register(" A@X.com ", "pw12345678", "Aisha")

        assert user.email == "a@x.com"
        assert user.name == "Aisha"
        assert user.provider == AuthProvider.EMAIL
        assert user.password_hash and verify_password("pw12345678", user.password_hash)
        assert pair is PAIR
        token_service.issue_token_pair.assert_called_once_with(uow, user)
        assert uow.committed

    @pytest.mark.asyncio
    async def test_duplicate_email_is_rejected(
        self, service: AuthService, uow: FakeUnitOfWork, password_user: User
    ):
        uow.users.get_by_email.return_value = password_user

        with pytest.raises(EmailAlreadyRegisteredError) as exc_info:
            await service.register("a@x.com", "pw12345678")

        assert exc_info.value.status_code == 409
        uow.users.create.assert_not_called()
        assert not uow.committed


# --- login ---


class TestLogin:
    @pytest.mark.asyncio
    async def test_valid_credentials(
        self, service: AuthService, uow: FakeUnitOfWork, password_user: User
    ):
        uow.users.get_by_email.return_value = password_user

        user, pair = await service.login("A@x.com", "pw12345678")

        assert user is password_user
        assert pair is PAIR
        uow.users.get_by_email.assert_called_once_with("a@x.com")
        assert uow.committed

    @pytest.mark.asyncio
    async def test_wrong_password(
        self, service: AuthService, uow: FakeUnitOfWork, password_user: User
    ):
        uow.users.get_by_email.return_value = password_user

        with pytest.raises(InvalidCredentialsError):
            await service.login("a@x.com", "wrong-password")

    @pytest.mark.asyncio
    async def test_unknown_email_looks_like_wrong_password(
        self, service: AuthService, uow: FakeUnitOfWork
    ):
        uow.users.get_by_email.return_value = None

        with pytest.raises(InvalidCredentialsError) as exc_info:
            await service.login("nobody@x.com", "pw12345678")

        assert exc_info.value.error_code == ErrorCode.INVALID_CREDENTIALS

    @pytest.mark.asyncio
    async def test_oauth_only_account_cannot_use_password(
        self, service: AuthService, uow: FakeUnitOfWork
    ):
        uow.users.get_by_email.return_value = User(
            email="a@x.com", provider=AuthProvider.GOOGLE, provider_id="g-1"
        )

        with pytest.raises(InvalidCredentialsError):
            await service.login("a@x.com", "pw12345678")


# --- external identities ---


class TestLinkExternalIdentity:
    @pytest.mark.asyncio
    async def test_creates_verified_account(self, service: AuthService, uow: FakeUnitOfWork):
        uow.users.get_by_email_or_provider.return_value = None
        uow.users.create.side_effect = _echo

        user, _ = await service.link_external_identity(
            AuthProvider.GOOGLE, "g-1", "A@x.com", name="Aisha", avatar="https://img/a.png"
        )

        assert user.provider == AuthProvider.GOOGLE
        assert user.provider_id == "g-1"
        assert user.email_verified is True
        assert user.password_hash is None

    @pytest.mark.asyncio
    async def test_upgrades_email_account_in_place(
        self, service: AuthService, uow: FakeUnitOfWork, password_user: User
    ):
        uow.users.get_by_email_or_provider.return_value = password_user
        uow.users.update.side_effect = _echo

        user, _ = await service.link_external_identity(
            AuthProvider.APPLE, "apple-7", "a@x.com", avatar="https://img/a.png"
        )

        assert user.provider == AuthProvider.APPLE
        assert user.provider_id == "apple-7"
        assert user.avatar == "https://img/a.png"
        assert user.email_verified is True
        assert user.password_hash == password_user.password_hash

    @pytest.mark.asyncio
    async def test_never_overwrites_another_provider(
        self, service: AuthService, uow: FakeUnitOfWork
    ):
        linked = User(email="a@x.com", provider=AuthProvider.GOOGLE, provider_id="g-1")
        uow.users.get_by_email_or_provider.return_value = linked

        user, _ = await service.link_external_identity(AuthProvider.APPLE, "apple-7", "a@x.com")

        assert user.provider == AuthProvider.GOOGLE
        assert user.provider_id == "g-1"
        uow.users.update.assert_not_called()


# --- session lifecycle ---


class TestSessions:
    @pytest.mark.asyncio
    async def test_refresh_delegates_to_rotation(
        self, service: AuthService, token_service: AsyncMock, password_user: User
    ):
        token_service.rotate.return_value = (password_user, PAIR)

        assert await service.refresh("old") == (password_user, PAIR)
        token_service.rotate.assert_called_once_with("old")

    @pytest.mark.asyncio
    async def test_logout_without_token_is_noop(
        self, service: AuthService, token_service: AsyncMock
    ):
        await service.logout(None)

        token_service.revoke.assert_not_called()

    @pytest.mark.asyncio
    async def test_logout_revokes_token(self, service: AuthService, token_service: AsyncMock):
        await service.logout("refresh")

        token_service.revoke.assert_called_once_with("refresh")

    @pytest.mark.asyncio
    async def test_logout_all(self, service: AuthService, token_service: AsyncMock, user_id: UUID):
        token_service.revoke_all.return_value = 2

        assert await service.logout_all(user_id) == 2


# --- profile ---


class TestProfile:
    @pytest.mark.asyncio
    async def test_get_user_missing(self, service: AuthService, uow: FakeUnitOfWork, user_id: UUID):
        uow.users.get.return_value = None

        with pytest.raises(AuthenticationError) as exc_info:
            await service.get_user(user_id)

        assert exc_info.value.error_code == ErrorCode.USER_NOT_FOUND

    @pytest.mark.asyncio
    async def test_profile_lists_memberships(
        self, service: AuthService, uow: FakeUnitOfWork, password_user: User
    ):
        workspace = Workspace(name="Desk")
        member = WorkspaceMember(
            workspace_id=workspace.id,
            user_id=password_user.id,
            role=WorkspaceRole.OWNER,
            is_owner=True,
        )
        uow.users.get.return_value = password_user
        uow.workspaces.get_memberships_for_user.return_value = [member]
        uow.workspaces.get.return_value = workspace

        user, memberships = await service.get_profile(password_user.id)

        assert user is password_user
        assert memberships == [(member, workspace)]

    @pytest.mark.asyncio
    async def test_onboarding_pending(
        self, service: AuthService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.workspaces.get_memberships_for_user.return_value = []

        assert await service.get_onboarding_status(user_id) is None
