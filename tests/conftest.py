"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_SECRET_KEY = "test-secret-key"
TEST_PASSWORD = "pw12345678"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """A fresh in-memory database per test, schema created up front."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """UoW factory bound to the test database."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(secret_key=TEST_SECRET_KEY, algorithm="HS256", expire_minutes=15)


def _provide(instance: Any) -> Callable[[], Any]:
    def dependency() -> Any:
        return instance

    return dependency


@pytest.fixture
def app(
    session_factory: async_sessionmaker[AsyncSession],
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    auth_provider: JWTAuthProvider,
) -> FastAPI:
    """
    Application with every service wired to the test database.

    Services are cached singletons in production, so each factory is
    overridden rather than the UoW factory alone.
    """
    from api.dependencies import services
    from domain.services.auth_service import AuthService
    from domain.services.card_service import CardService
    from domain.services.dashboard_service import DashboardService
    from domain.services.invitation_service import InvitationService
    from domain.services.settings_service import SettingsService
    from domain.services.token_service import TokenService
    from domain.services.transaction_service import TransactionService
    from domain.services.workspace_service import WorkspaceService
    from infrastructure.database.session import get_async_session
    from main import create_app

    app = create_app()

    token_service = TokenService(uow_factory, auth_provider, refresh_token_expire_days=7)
    overrides: dict[Callable[..., Any], Any] = {
        services.get_auth_provider: auth_provider,
        services.get_token_service: token_service,
        services.get_auth_service: AuthService(uow_factory, token_service),
        services.get_workspace_service: WorkspaceService(uow_factory),
        services.get_invitation_service: InvitationService(uow_factory, invitation_expiry_days=7),
        services.get_settings_service: SettingsService(uow_factory),
        services.get_card_service: CardService(uow_factory),
        services.get_transaction_service: TransactionService(uow_factory),
        services.get_dashboard_service: DashboardService(uow_factory),
    }
    for dependency, instance in overrides.items():
        app.dependency_overrides[dependency] = _provide(instance)

    async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_async_session
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


async def register_user(
    client: AsyncClient, email: str, password: str = TEST_PASSWORD, name: str | None = None
) -> dict[str, Any]:
    """Register an account and return the auth response body.

    The refresh cookie set by the server is dropped so each caller controls
    which session a request belongs to.
    """
    payload: dict[str, Any] = {"email": email, "password": password}
    if name:
        payload["name"] = name
    response = await client.post("/api/v1/auth/register", json=payload)
    assert response.status_code == 201, response.text
    client.cookies.clear()
    return dict(response.json())


def bearer(access_token: str) -> dict[str, str]:
    """Create authorization headers."""
    return {"Authorization": f"Bearer {access_token}"}


async def onboard(client: AsyncClient, access_token: str, name: str = "Male FX") -> dict[str, Any]:
    """Create the caller's workspace and return its response data."""
    response = await client.post(
        "/api/v1/workspaces/onboarding",
        json={"name": name},
        headers=bearer(access_token),
    )
    assert response.status_code == 201, response.text
    return dict(response.json()["data"])


async def add_partner(
    client: AsyncClient,
    owner_token: str,
    workspace_id: str,
    email: str,
    profit_split: float = 40,
) -> dict[str, Any]:
    """Invite ``email``, register it and accept. Returns the partner's auth body."""
    invite = await client.post(
        f"/api/v1/workspaces/{workspace_id}/invitations",
        json={"email": email, "profit_split": profit_split},
        headers=bearer(owner_token),
    )
    assert invite.status_code == 201, invite.text

    partner = await register_user(client, email)
    accepted = await client.post(
        "/api/v1/invitations/accept",
        json={"token": invite.json()["token"]},
        headers=bearer(partner["access_token"]),
    )
    assert accepted.status_code == 200, accepted.text
    partner["member_id"] = accepted.json()["member_id"]
    return partner
