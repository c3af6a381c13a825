"""Invitation repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from domain.entities.invitation import Invitation


class IInvitationRepository(Protocol):
    """Repository interface for Invitation entities."""

    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation."""
        ...

    async def get(self, workspace_id: UUID, id: UUID) -> Invitation | None:
        """Get an invitation by ID, scoped to the workspace."""
        ...

    async def get_by_token_hash(self, token_hash: str) -> Invitation | None:
        """Get an invitation by its hashed token."""
        ...

    async def get_pending_for_workspace(self, workspace_id: UUID) -> list[Invitation]:
        """Get invitations with PENDING status for a workspace."""
        ...

    async def get_pending_for_workspace_email(
        self, workspace_id: UUID, email: str
    ) -> Invitation | None:
        """Get the PENDING invitation for a workspace and email, if any."""
        ...

    async def update(self, invitation: Invitation) -> Invitation:
        """Persist status changes of an invitation."""
        ...

    async def expire_stale(self, now: datetime) -> int:
        """Mark PENDING invitations past their expiry as EXPIRED. Returns the count."""
        ...
