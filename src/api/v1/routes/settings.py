"""Workspace settings API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import WorkspaceManagerContext, WorkspaceMemberContext
from api.dependencies.services import get_settings_service
from api.v1.schemas.settings import (
    RatesResponse,
    RatesUpdate,
    SettingsDetailResponse,
    SettingsResponse,
    SettingsUpdate,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.workspace import WorkspaceSettings
from domain.services.settings_service import SettingsService

router = APIRouter(prefix="/settings", tags=["settings"])


def _build_settings_response(settings: WorkspaceSettings) -> SettingsResponse:
    return SettingsResponse(
        id=settings.id,
        workspace_id=settings.workspace_id,
        default_buy_rate=settings.default_buy_rate,
        default_sell_rate=settings.default_sell_rate,
        theme=settings.theme.value,
        currency=settings.currency,
        updated_at=settings.updated_at,
    )


@router.get("", response_model=SettingsDetailResponse, summary="Get workspace settings")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_settings(
    request: Request,
    ctx: WorkspaceMemberContext,
    service: SettingsService = Depends(get_settings_service),
) -> SettingsDetailResponse:
    settings = await service.get(ctx.workspace_id)
    return SettingsDetailResponse(data=_build_settings_response(settings))


@router.patch(
    "",
    response_model=SettingsDetailResponse,
    summary="Update workspace settings",
    responses={403: {"description": "Owner or admin only"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_settings(
    request: Request,
    body: SettingsUpdate,
    ctx: WorkspaceManagerContext,
    service: SettingsService = Depends(get_settings_service),
) -> SettingsDetailResponse:
    settings = await service.update(
        ctx.workspace_id,
        default_buy_rate=body.default_buy_rate,
        default_sell_rate=body.default_sell_rate,
        theme=body.theme,
        currency=body.currency,
    )
    return SettingsDetailResponse(data=_build_settings_response(settings))


@router.get("/rates", response_model=RatesResponse, summary="Get default exchange rates")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_rates(
    request: Request,
    ctx: WorkspaceMemberContext,
    service: SettingsService = Depends(get_settings_service),
) -> RatesResponse:
    buy_rate, sell_rate = await service.get_rates(ctx.workspace_id)
    return RatesResponse(buy_rate=buy_rate, sell_rate=sell_rate)


@router.patch(
    "/rates",
    response_model=RatesResponse,
    summary="Update default exchange rates",
    responses={403: {"description": "Owner or admin only"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_rates(
    request: Request,
    body: RatesUpdate,
    ctx: WorkspaceManagerContext,
    service: SettingsService = Depends(get_settings_service),
) -> RatesResponse:
    buy_rate, sell_rate = await service.update_rates(
        ctx.workspace_id, buy_rate=body.buy_rate, sell_rate=body.sell_rate
    )
    return RatesResponse(buy_rate=buy_rate, sell_rate=sell_rate)
