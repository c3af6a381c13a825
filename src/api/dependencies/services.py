"""Dependency injection factories shared by the API routes."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.auth_service import AuthService
from domain.services.card_service import CardService
from domain.services.dashboard_service import DashboardService
from domain.services.invitation_service import InvitationService
from domain.services.settings_service import SettingsService
from domain.services.token_service import TokenService
from domain.services.transaction_service import TransactionService
from domain.services.workspace_service import WorkspaceService
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_auth_provider() -> JWTAuthProvider:
    """Get the JWT provider, signing with the configured secret."""
    return JWTAuthProvider(
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.access_token_expire_minutes,
    )


@lru_cache
def get_token_service() -> TokenService:
    """Get Token service instance."""
    return TokenService(
        get_uow_factory(),
        get_auth_provider(),
        refresh_token_expire_days=settings.refresh_token_expire_days,
    )


@lru_cache
def get_auth_service() -> AuthService:
    """Get Auth service instance."""
    return AuthService(get_uow_factory(), get_token_service())


@lru_cache
def get_workspace_service() -> WorkspaceService:
    """Get Workspace service instance."""
    return WorkspaceService(get_uow_factory())


@lru_cache
def get_invitation_service() -> InvitationService:
    """Get Invitation service instance."""
    return InvitationService(
        get_uow_factory(),
        invitation_expiry_days=settings.invitation_expiry_days,
    )


@lru_cache
def get_settings_service() -> SettingsService:
    return SettingsService(get_uow_factory())


@lru_cache
def get_card_service() -> CardService:
    return CardService(get_uow_factory())


@lru_cache
def get_transaction_service() -> TransactionService:
    return TransactionService(get_uow_factory())


@lru_cache
def get_dashboard_service() -> DashboardService:
    return DashboardService(get_uow_factory())
