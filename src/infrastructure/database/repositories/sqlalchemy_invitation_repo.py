"""SQLAlchemy implementation of Invitation repository."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.invitation import Invitation, InvitationStatus
from infrastructure.database.models import InvitationModel


class SQLAlchemyInvitationRepository:
    """SQLAlchemy implementation of IInvitationRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation."""
        model = InvitationModel(
            id=invitation.id,
            workspace_id=invitation.workspace_id,
            email=invitation.email,
            profit_split=invitation.profit_split,
            token_hash=invitation.token_hash,
            invited_by_id=invitation.invited_by_id,
            invited_user_id=invitation.invited_user_id,
            status=invitation.status.value,
            created_at=invitation.created_at,
            expires_at=invitation.expires_at,
            accepted_at=invitation.accepted_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def get(self, workspace_id: UUID, id: UUID) -> Invitation | None:
        """Get an invitation by ID, scoped to the workspace."""
        stmt = select(InvitationModel).where(
            InvitationModel.workspace_id == workspace_id,
            InvitationModel.id == id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_token_hash(self, token_hash: str) -> Invitation | None:
        """Get an invitation by its hashed token."""
        stmt = select(InvitationModel).where(InvitationModel.token_hash == token_hash)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_pending_for_workspace(self, workspace_id: UUID) -> list[Invitation]:
        """Get PENDING invitations for a workspace, newest first.

        Rows past their expiry are included; callers apply lazy expiry.
        """
        stmt = (
            select(InvitationModel)
            .where(
                InvitationModel.workspace_id == workspace_id,
                InvitationModel.status == InvitationStatus.PENDING.value,
            )
            .order_by(InvitationModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_pending_for_workspace_email(
        self, workspace_id: UUID, email: str
    ) -> Invitation | None:
        """Get the PENDING invitation for a workspace and email, expired or not."""
        stmt = select(InvitationModel).where(
            InvitationModel.workspace_id == workspace_id,
            InvitationModel.email == email.strip().lower(),
            InvitationModel.status == InvitationStatus.PENDING.value,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def update(self, invitation: Invitation) -> Invitation:
        """Persist status changes of an invitation."""
        stmt = select(InvitationModel).where(InvitationModel.id == invitation.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Invitation {invitation.id} not found")

        model.status = invitation.status.value
        model.invited_user_id = invitation.invited_user_id
        model.accepted_at = invitation.accepted_at

        await self._session.flush()
        return self._to_entity(model)

    async def expire_stale(self, now: datetime) -> int:
        """Mark PENDING invitations past their expiry as EXPIRED."""
        stmt = (
            update(InvitationModel)
            .where(
                InvitationModel.status == InvitationStatus.PENDING.value,
                InvitationModel.expires_at < now,
            )
            .values(status=InvitationStatus.EXPIRED.value)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount or 0  # type: ignore[attr-defined]

    def _to_entity(self, model: InvitationModel) -> Invitation:
        """Convert ORM model to domain entity."""
        return Invitation(
            id=model.id,
            workspace_id=model.workspace_id,
            email=model.email,
            profit_split=Decimal(str(model.profit_split)),
            token_hash=model.token_hash,
            invited_by_id=model.invited_by_id,
            invited_user_id=model.invited_user_id,
            status=InvitationStatus(model.status),
            created_at=model.created_at,
            expires_at=model.expires_at,
            accepted_at=model.accepted_at,
        )
