"""Workspace API routes: onboarding and partner management."""

from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import (
    CurrentUser,
    WorkspaceManagerContext,
    WorkspaceMemberContext,
    WorkspaceOwnerContext,
)
from api.dependencies.services import get_workspace_service
from api.v1.schemas.common import MessageResponse
from api.v1.schemas.workspace import (
    OnboardingRequest,
    UpdateProfitSplitRequest,
    WorkspaceDetailResponse,
    WorkspaceMemberDetailResponse,
    WorkspaceMemberListResponse,
    WorkspaceMemberResponse,
    WorkspaceResponse,
    WorkspaceSettingsSummary,
    WorkspaceUpdate,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.user import User
from domain.entities.workspace import Workspace, WorkspaceMember, WorkspaceSettings
from domain.services.workspace_service import WorkspaceService

router = APIRouter(prefix="/workspaces", tags=["workspaces"])

FULL_SPLIT = Decimal("100.00")


def _build_workspace_response(
    workspace: Workspace,
    member_count: int = 0,
    settings: WorkspaceSettings | None = None,
) -> WorkspaceResponse:
    return WorkspaceResponse(
        id=workspace.id,
        name=workspace.name,
        type=workspace.type.value,
        member_count=member_count,
        settings=(
            WorkspaceSettingsSummary(
                default_buy_rate=settings.default_buy_rate,
                default_sell_rate=settings.default_sell_rate,
                theme=settings.theme.value,
                currency=settings.currency,
            )
            if settings
            else None
        ),
        created_at=workspace.created_at,
        updated_at=workspace.updated_at,
    )


def _build_member_response(
    member: WorkspaceMember, user: User | None = None
) -> WorkspaceMemberResponse:
    return WorkspaceMemberResponse(
        id=member.id,
        user_id=member.user_id,
        email=user.email if user else "",
        name=user.name if user else None,
        avatar=user.avatar if user else None,
        role=member.role.value,
        is_owner=member.is_owner,
        profit_split=member.profit_split,
        joined_at=member.joined_at,
    )


@router.post(
    "/onboarding",
    response_model=WorkspaceDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create the caller's workspace",
    responses={
        201: {"description": "Workspace created with the caller as owner"},
        400: {"description": "Caller already belongs to a workspace"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def complete_onboarding(
    request: Request,
    body: OnboardingRequest,
    user: CurrentUser,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceDetailResponse:
    """Create a workspace. The caller becomes its owner with a 100% profit split."""
    workspace, _, settings = await service.complete_onboarding(
        user_id=user.id,
        name=body.name,
        workspace_type=body.type,
        default_buy_rate=body.default_buy_rate,
        default_sell_rate=body.default_sell_rate,
    )
    return WorkspaceDetailResponse(data=_build_workspace_response(workspace, 1, settings))


@router.get(
    "/{workspace_id}",
    response_model=WorkspaceDetailResponse,
    summary="Get workspace details",
    responses={
        200: {"description": "Workspace details"},
        403: {"description": "Not a member"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_workspace(
    request: Request,
    workspace_id: UUID,
    ctx: WorkspaceMemberContext,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceDetailResponse:
    workspace, member_count, settings = await service.get_details(ctx.workspace_id)
    return WorkspaceDetailResponse(
        data=_build_workspace_response(workspace, member_count, settings)
    )


@router.patch(
    "/{workspace_id}",
    response_model=WorkspaceDetailResponse,
    summary="Update a workspace",
    responses={
        400: {"description": "A partnership cannot become a sole trader again"},
        403: {"description": "Owner or admin only"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_workspace(
    request: Request,
    workspace_id: UUID,
    body: WorkspaceUpdate,
    ctx: WorkspaceManagerContext,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceDetailResponse:
    """Rename the workspace or promote it to a partnership."""
    workspace = await service.update(ctx.workspace_id, name=body.name, workspace_type=body.type)
    return WorkspaceDetailResponse(data=_build_workspace_response(workspace))


@router.get(
    "/{workspace_id}/members",
    response_model=WorkspaceMemberListResponse,
    summary="List workspace members",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_members(
    request: Request,
    workspace_id: UUID,
    ctx: WorkspaceMemberContext,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceMemberListResponse:
    """List members with their profit splits, owner first."""
    members = await service.get_members(ctx.workspace_id)
    total = service.profit_split_total([member for member, _ in members])
    return WorkspaceMemberListResponse(
        data=[_build_member_response(member, user) for member, user in members],
        profit_split_total=total,
        profit_split_balanced=total == FULL_SPLIT,
        meta={"total": len(members)},
    )


@router.patch(
    "/{workspace_id}/members/profit-split",
    response_model=WorkspaceMemberDetailResponse,
    summary="Set a member's profit split",
    responses={
        403: {"description": "Owner only"},
        404: {"description": "Member not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_profit_split(
    request: Request,
    workspace_id: UUID,
    body: UpdateProfitSplitRequest,
    ctx: WorkspaceOwnerContext,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceMemberDetailResponse:
    member = await service.update_profit_split(ctx.workspace_id, body.member_id, body.profit_split)
    return WorkspaceMemberDetailResponse(data=_build_member_response(member))


@router.delete(
    "/{workspace_id}/members/{member_id}",
    response_model=MessageResponse,
    summary="Remove a partner",
    responses={
        400: {"description": "The owner cannot be removed"},
        403: {"description": "Owner only"},
        404: {"description": "Member not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def remove_member(
    request: Request,
    workspace_id: UUID,
    member_id: UUID,
    ctx: WorkspaceOwnerContext,
    service: WorkspaceService = Depends(get_workspace_service),
) -> MessageResponse:
    await service.remove_member(ctx.workspace_id, member_id, actor_id=ctx.user.id)
    return MessageResponse(message="Member removed")
