"""Main FastAPI application entry point."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager, suppress

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.dependencies.services import get_invitation_service, get_token_service
from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware
from api.routes.health import router as health_router
from api.v1 import router as v1_router
from core.config import settings
from core.logging import setup_logging
from core.rate_limit import limiter, rate_limit_exceeded_handler
from infrastructure.database.session import dispose_engine

logger = structlog.get_logger()

# Initialize structured logging
setup_logging()


async def run_maintenance() -> None:
    """Purge expired refresh tokens and expire stale invitations.

    Both are storage hygiene only: reads already treat expired rows as
    invalid.
    """
    await get_token_service().delete_expired()
    await get_invitation_service().expire_stale()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager for startup/shutdown tasks."""

    async def maintenance_loop() -> None:
        while True:
            await asyncio.sleep(settings.token_cleanup_interval_seconds)
            try:
                await run_maintenance()
            except Exception:
                logger.exception("maintenance_failed")

    maintenance_task = asyncio.create_task(maintenance_loop())
    yield
    maintenance_task.cancel()
    with suppress(asyncio.CancelledError):
        await maintenance_task
    await dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        title=settings.app_name,
        description=(
            "## FX Desk\n\n"
            "Multi-tenant API for currency-conversion desks: record card "
            "transactions, track monthly USD limits and split profit between "
            "partners.\n\n"
            "### Authentication\n"
            "Sign in via `/api/v1/auth/login` and send the access token as\n"
            "```\nAuthorization: Bearer <access_token>\n```\n"
            "The refresh token is kept in an HTTP-only cookie and rotated by "
            "`/api/v1/auth/refresh`.\n\n"
            "### Workspaces\n"
            "Workspace-scoped endpoints take the workspace from the path or "
            "the `workspace_id` query parameter.\n\n"
            "### Rate Limits\n"
            "- GET endpoints: 30 requests/minute\n"
            "- POST/PATCH/DELETE: 10 requests/minute\n"
            "- Login/register: 5 requests/minute"
        ),
        version=settings.app_version,
        debug=settings.debug,
        openapi_tags=[
            {"name": "health", "description": "Health check endpoints"},
            {"name": "auth", "description": "Registration, login and sessions"},
            {"name": "workspaces", "description": "Onboarding and partners"},
            {"name": "invitations", "description": "Partner invitations"},
            {"name": "settings", "description": "Workspace defaults"},
            {"name": "cards", "description": "Cards and monthly limits"},
            {"name": "transactions", "description": "Recorded conversions"},
            {"name": "dashboard", "description": "Aggregated statistics"},
        ],
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Security & tracking middleware (LIFO order - last added = outermost)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # GZip compression for responses > 1KB
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
