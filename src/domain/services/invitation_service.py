"""Invitation service layer with business logic."""

import secrets
from collections.abc import Callable
from datetime import datetime, timedelta
from decimal import Decimal
from uuid import UUID

import structlog

from core.exceptions import (
    AlreadyAMemberError,
    DuplicateInvitationError,
    InvitationEmailMismatchError,
    InvitationExpiredError,
    InvitationNotFoundError,
    InvitationNotPendingError,
    WorkspaceNotFoundError,
)
from domain.calculations import to_money
from domain.entities.invitation import INVITATION_EXPIRY_DAYS, Invitation, InvitationStatus
from domain.entities.user import User
from domain.entities.workspace import Workspace, WorkspaceMember, WorkspaceRole
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.token_service import hash_token

logger = structlog.get_logger()

INVITATION_TOKEN_BYTES = 32


class InvitationService:
    """Service layer for partner invitations.

    Expiry is applied lazily: any read that finds a pending invitation past
    its expiry persists the ``EXPIRED`` transition before answering.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        invitation_expiry_days: int = INVITATION_EXPIRY_DAYS,
    ) -> None:
        self._uow_factory = uow_factory
        self._lifetime = timedelta(days=invitation_expiry_days)

    async def create_invitation(
        self,
        workspace_id: UUID,
        inviter_id: UUID,
        email: str,
        profit_split: Decimal = Decimal("0"),
    ) -> tuple[Invitation, str]:
        """Invite an email address to join a workspace as a partner.

        Returns:
            Tuple of (Invitation, raw_token). The raw token is only available
            here and is what the invitee presents to accept.

        Raises:
            WorkspaceNotFoundError: If the workspace does not exist.
            AlreadyAMemberError: If the email belongs to an existing member.
            DuplicateInvitationError: If a live pending invitation exists.
        """
        email = email.strip().lower()

        async with self._uow_factory() as uow:
            workspace = await uow.workspaces.get(workspace_id)
            if not workspace:
                raise WorkspaceNotFoundError(str(workspace_id))

            invitee = await uow.users.get_by_email(email)
            if invitee and await uow.workspaces.get_member(workspace_id, invitee.id):
                raise AlreadyAMemberError(email)

            existing = await uow.invitations.get_pending_for_workspace_email(workspace_id, email)
            if existing:
                if not existing.expire_if_stale():
                    raise DuplicateInvitationError(email)
                await uow.invitations.update(existing)

            raw_token = secrets.token_urlsafe(INVITATION_TOKEN_BYTES)
            now = datetime.utcnow()
            created = await uow.invitations.create(
                Invitation(
                    workspace_id=workspace_id,
                    email=email,
                    profit_split=to_money(profit_split),
                    token_hash=hash_token(raw_token),
                    invited_by_id=inviter_id,
                    created_at=now,
                    expires_at=now + self._lifetime,
                )
            )
            await uow.commit()

        logger.info(
            "invitation_created",
            workspace_id=str(workspace_id),
            invitation_id=str(created.id),
            inviter_id=str(inviter_id),
        )
        return created, raw_token

    async def list_pending(self, workspace_id: UUID) -> list[Invitation]:
        """Get live pending invitations of a workspace."""
        async with self._uow_factory() as uow:
            invitations = await uow.invitations.get_pending_for_workspace(workspace_id)

            live: list[Invitation] = []
            expired_any = False
            for invitation in invitations:
                if invitation.expire_if_stale():
                    await uow.invitations.update(invitation)
                    expired_any = True
                else:
                    live.append(invitation)

            if expired_any:
                await uow.commit()
            return live

    async def cancel(self, workspace_id: UUID, invitation_id: UUID) -> Invitation:
        """Cancel a pending invitation.

        Raises:
            InvitationNotFoundError: If the invitation is not in this workspace.
            InvitationNotPendingError: If it already reached a terminal state.
        """
        async with self._uow_factory() as uow:
            invitation = await uow.invitations.get(workspace_id, invitation_id)
            if not invitation:
                raise InvitationNotFoundError(str(invitation_id))

            if invitation.expire_if_stale():
                await uow.invitations.update(invitation)
                await uow.commit()
            if invitation.is_terminal:
                raise InvitationNotPendingError(invitation.status)

            invitation.cancel()
            updated = await uow.invitations.update(invitation)
            await uow.commit()
            return updated

    async def preview(self, token: str) -> tuple[Invitation, Workspace | None, User | None]:
        """Look up an invitation by its raw token for the public landing page.

        Returns the invitation (with lazy expiry applied), its workspace and
        the inviting user.

        Raises:
            InvitationNotFoundError: If the token matches no invitation.
        """
        async with self._uow_factory() as uow:
            invitation = await uow.invitations.get_by_token_hash(hash_token(token))
            if not invitation:
                raise InvitationNotFoundError()

            if invitation.expire_if_stale():
                await uow.invitations.update(invitation)
                await uow.commit()

            workspace = await uow.workspaces.get(invitation.workspace_id)
            inviter = await uow.users.get(invitation.invited_by_id)
            return invitation, workspace, inviter

    async def accept(self, token: str, user_id: UUID, user_email: str) -> WorkspaceMember:
        """Accept an invitation as the signed-in user.

        The invitation, the new membership and the workspace promotion to a
        partnership are committed together.

        Raises:
            InvitationNotFoundError: If the token matches no invitation.
            InvitationExpiredError: If it has expired (a pending one is moved to
                ``EXPIRED`` and saved first).
            InvitationNotPendingError: If it was already accepted or cancelled.
            InvitationEmailMismatchError: If the user's email differs.
            AlreadyAMemberError: If the user already belongs to the workspace.
        """
        async with self._uow_factory() as uow:
            invitation = await uow.invitations.get_by_token_hash(hash_token(token))
            if not invitation:
                raise InvitationNotFoundError()

            if invitation.expire_if_stale():
                await uow.invitations.update(invitation)
                await uow.commit()
            if invitation.status == InvitationStatus.EXPIRED:
                raise InvitationExpiredError()
            if invitation.is_terminal:
                raise InvitationNotPendingError(invitation.status)

            if user_email.strip().lower() != invitation.email:
                raise InvitationEmailMismatchError()

            if await uow.workspaces.get_member(invitation.workspace_id, user_id):
                raise AlreadyAMemberError(user_email)

            workspace = await uow.workspaces.get(invitation.workspace_id)
            if not workspace:
                raise WorkspaceNotFoundError(str(invitation.workspace_id))

            invitation.accept(user_id)
            await uow.invitations.update(invitation)

            member = await uow.workspaces.add_member(
                WorkspaceMember(
                    workspace_id=invitation.workspace_id,
                    user_id=user_id,
                    role=WorkspaceRole.MEMBER,
                    profit_split=invitation.profit_split,
                )
            )

            if workspace.promote_to_partnership():
                await uow.workspaces.update(workspace)

            await uow.commit()

        logger.info(
            "invitation_accepted",
            workspace_id=str(invitation.workspace_id),
            invitation_id=str(invitation.id),
            user_id=str(user_id),
        )
        return member

    async def expire_stale(self) -> int:
        """Bulk-apply expiry to every stale pending invitation."""
        async with self._uow_factory() as uow:
            expired = await uow.invitations.expire_stale(datetime.utcnow())
            await uow.commit()

        if expired:
            logger.info("stale_invitations_expired", expired_count=expired)
        return expired
