"""Credential store operations: registration, login and identity linking."""

import asyncio
from collections.abc import Callable
from uuid import UUID

import structlog

from core.exceptions import (
    AuthenticationError,
    EmailAlreadyRegisteredError,
    ErrorCode,
    InvalidCredentialsError,
)
from domain.entities.user import AuthProvider, User
from domain.entities.workspace import Workspace, WorkspaceMember
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.token_service import TokenService
from infrastructure.auth.password import hash_password, verify_password
from infrastructure.auth.provider import TokenPair

logger = structlog.get_logger()

# Lazily computed so unknown-email logins cost the same as wrong-password ones.
_dummy_hash_cache: str | None = None


async def _get_dummy_hash() -> str:
    global _dummy_hash_cache
    if _dummy_hash_cache is None:
        _dummy_hash_cache = await asyncio.to_thread(hash_password, "not-a-real-password")
    return _dummy_hash_cache


class AuthService:
    """Service layer for account lifecycle."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        token_service: TokenService,
    ) -> None:
        self._uow_factory = uow_factory
        self._tokens = token_service

    async def register(
        self, email: str, password: str, name: str | None = None
    ) -> tuple[User, TokenPair]:
        """Create an email/password account and sign it in.

        Raises:
            EmailAlreadyRegisteredError: If the email is taken.
        """
        email = email.strip().lower()
        password_hash = await asyncio.to_thread(hash_password, password)

        async with self._uow_factory() as uow:
            if await uow.users.get_by_email(email):
                raise EmailAlreadyRegisteredError(email)

            user = await uow.users.create(
                User(
                    email=email,
                    password_hash=password_hash,
                    name=name,
                    provider=AuthProvider.EMAIL,
                )
            )
            pair = await self._tokens.issue_token_pair(uow, user)
            await uow.commit()

        logger.info("user_registered", user_id=str(user.id))
        return user, pair

    async def login(self, email: str, password: str) -> tuple[User, TokenPair]:
        """Verify an email/password pair and issue tokens.

        Raises:
            InvalidCredentialsError: Unknown email, OAuth-only account or wrong password.
        """
        email = email.strip().lower()

        async with self._uow_factory() as uow:
            user = await uow.users.get_by_email(email)

            if user is None or not user.has_password:
                await asyncio.to_thread(verify_password, password, await _get_dummy_hash())
                logger.info("login_failed", reason="unknown_account")
                raise InvalidCredentialsError()

            if not await asyncio.to_thread(verify_password, password, user.password_hash):
                logger.info("login_failed", reason="bad_password", user_id=str(user.id))
                raise InvalidCredentialsError()

            pair = await self._tokens.issue_token_pair(uow, user)
            await uow.commit()

        return user, pair

    async def link_external_identity(
        self,
        provider: AuthProvider,
        provider_id: str,
        email: str,
        name: str | None = None,
        avatar: str | None = None,
    ) -> tuple[User, TokenPair]:
        """Find-or-create the account for an external identity and sign it in.

        A matching email/password account is upgraded in place: the provider
        identity is attached, the avatar filled if missing and the email
        marked verified. Accounts already linked to another external
        provider are left untouched.
        """
        email = email.strip().lower()

        async with self._uow_factory() as uow:
            user = await uow.users.get_by_email_or_provider(email, provider, provider_id)

            if user is None:
                user = await uow.users.create(
                    User(
                        email=email,
                        name=name,
                        avatar=avatar,
                        provider=provider,
                        provider_id=provider_id,
                        email_verified=True,
                    )
                )
                logger.info("user_registered", user_id=str(user.id), provider=provider.value)
            elif user.provider == AuthProvider.EMAIL:
                user.provider = provider
                user.provider_id = provider_id
                user.avatar = user.avatar or avatar
                user.email_verified = True
                user = await uow.users.update(user)

            pair = await self._tokens.issue_token_pair(uow, user)
            await uow.commit()

        return user, pair

    async def refresh(self, refresh_token: str) -> tuple[User, TokenPair]:
        """Rotate a refresh token."""
        return await self._tokens.rotate(refresh_token)

    async def logout(self, refresh_token: str | None) -> None:
        """Revoke the presented refresh token, if any."""
        if refresh_token:
            await self._tokens.revoke(refresh_token)

    async def logout_all(self, user_id: UUID) -> int:
        """Revoke every refresh token of the user."""
        return await self._tokens.revoke_all(user_id)

    async def get_user(self, user_id: UUID) -> User:
        """Get a user or fail authentication.

        Raises:
            AuthenticationError: If the account no longer exists.
        """
        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
        if user is None:
            raise AuthenticationError("User not found", ErrorCode.USER_NOT_FOUND)
        return user

    async def get_profile(
        self, user_id: UUID
    ) -> tuple[User, list[tuple[WorkspaceMember, Workspace]]]:
        """Get a user together with each membership and its workspace."""
        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
            if user is None:
                raise AuthenticationError("User not found", ErrorCode.USER_NOT_FOUND)

            memberships: list[tuple[WorkspaceMember, Workspace]] = []
            for member in await uow.workspaces.get_memberships_for_user(user_id):
                workspace = await uow.workspaces.get(member.workspace_id)
                if workspace:
                    memberships.append((member, workspace))

        return user, memberships

    async def get_onboarding_status(self, user_id: UUID) -> Workspace | None:
        """Return the user's first workspace, or None if onboarding is pending."""
        async with self._uow_factory() as uow:
            memberships = await uow.workspaces.get_memberships_for_user(user_id)
            if not memberships:
                return None
            return await uow.workspaces.get(memberships[0].workspace_id)
