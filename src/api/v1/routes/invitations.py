"""Invitation API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser, WorkspaceManagerContext, WorkspaceMemberContext
from api.dependencies.services import get_invitation_service
from api.v1.schemas.invitation import (
    AcceptInvitationRequest,
    AcceptInvitationResponse,
    CreateInvitationRequest,
    InvitationCreatedResponse,
    InvitationListResponse,
    InvitationPreviewResponse,
    InvitationResponse,
)
from core.config import settings
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.invitation import Invitation
from domain.services.invitation_service import InvitationService

# Workspace-scoped invitation routes
workspace_invitations_router = APIRouter(
    prefix="/workspaces/{workspace_id}/invitations",
    tags=["invitations"],
)

# Token-scoped invitation routes (preview, accept)
invitations_router = APIRouter(
    prefix="/invitations",
    tags=["invitations"],
)


def _build_invitation_response(invitation: Invitation) -> InvitationResponse:
    return InvitationResponse(
        id=invitation.id,
        workspace_id=invitation.workspace_id,
        email=invitation.email,
        profit_split=invitation.profit_split,
        status=invitation.status.value,
        invited_by_id=invitation.invited_by_id,
        created_at=invitation.created_at,
        expires_at=invitation.expires_at,
        accepted_at=invitation.accepted_at,
    )


def build_invite_link(token: str) -> str:
    return f"{settings.client_url.rstrip('/')}/invite/{token}"


@workspace_invitations_router.post(
    "",
    response_model=InvitationCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Invite a partner",
    responses={
        201: {"description": "Invitation created"},
        403: {"description": "Owner or admin only"},
        409: {"description": "Duplicate invitation or already a member"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_invitation(
    request: Request,
    workspace_id: UUID,
    body: CreateInvitationRequest,
    ctx: WorkspaceManagerContext,
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationCreatedResponse:
    """Invite an email address to join the workspace with a proposed profit split."""
    invitation, raw_token = await service.create_invitation(
        workspace_id=ctx.workspace_id,
        inviter_id=ctx.user.id,
        email=body.email,
        profit_split=body.profit_split,
    )
    return InvitationCreatedResponse(
        data=_build_invitation_response(invitation),
        token=raw_token,
        invite_link=build_invite_link(raw_token),
    )


@workspace_invitations_router.get(
    "",
    response_model=InvitationListResponse,
    summary="List pending invitations",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_invitations(
    request: Request,
    workspace_id: UUID,
    ctx: WorkspaceMemberContext,
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationListResponse:
    """List invitations still awaiting an answer. Stale ones are expired first."""
    invitations = await service.list_pending(ctx.workspace_id)
    data = [_build_invitation_response(inv) for inv in invitations]
    return InvitationListResponse(data=data, meta={"total": len(data)})


@workspace_invitations_router.delete(
    "/{invitation_id}",
    response_model=InvitationResponse,
    summary="Cancel an invitation",
    responses={
        400: {"description": "Invitation is no longer pending"},
        403: {"description": "Owner or admin only"},
        404: {"description": "Invitation not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def cancel_invitation(
    request: Request,
    workspace_id: UUID,
    invitation_id: UUID,
    ctx: WorkspaceManagerContext,
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationResponse:
    invitation = await service.cancel(ctx.workspace_id, invitation_id)
    return _build_invitation_response(invitation)


@invitations_router.get(
    "/{token}",
    response_model=InvitationPreviewResponse,
    summary="Preview an invitation",
    responses={404: {"description": "Invitation not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def preview_invitation(
    request: Request,
    token: str,
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationPreviewResponse:
    """Public: what the invitee sees before signing in."""
    invitation, workspace, inviter = await service.preview(token)
    return InvitationPreviewResponse(
        workspace_id=invitation.workspace_id,
        workspace_name=workspace.name if workspace else "",
        inviter_name=(inviter.name or inviter.email) if inviter else None,
        email=invitation.email,
        profit_split=invitation.profit_split,
        status=invitation.status.value,
        expires_at=invitation.expires_at,
    )


@invitations_router.post(
    "/accept",
    response_model=AcceptInvitationResponse,
    summary="Accept an invitation",
    responses={
        400: {"description": "Invitation expired or no longer pending"},
        403: {"description": "Invitation was sent to another email"},
        404: {"description": "Invitation not found"},
        409: {"description": "Already a member"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def accept_invitation(
    request: Request,
    body: AcceptInvitationRequest,
    user: CurrentUser,
    service: InvitationService = Depends(get_invitation_service),
) -> AcceptInvitationResponse:
    """Join the workspace as a partner. The workspace becomes a partnership."""
    member = await service.accept(body.token, user_id=user.id, user_email=user.email)
    return AcceptInvitationResponse(
        workspace_id=member.workspace_id,
        member_id=member.id,
        role=member.role.value,
        profit_split=member.profit_split,
    )
