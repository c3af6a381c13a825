"""Card repository protocol."""

from datetime import datetime
from decimal import Decimal
from typing import Protocol
from uuid import UUID

from domain.entities.card import Card


class ICardRepository(Protocol):
    """Repository interface for Card entities."""

    async def get(self, workspace_id: UUID, id: UUID) -> Card | None:
        """Get a card by ID, scoped to the workspace."""
        ...

    async def get_all_for_workspace(
        self, workspace_id: UUID, include_inactive: bool = False
    ) -> list[Card]:
        """Get the cards of a workspace, newest first."""
        ...

    async def create(self, card: Card) -> Card:
        """Create a new card."""
        ...

    async def update(self, card: Card) -> Card:
        """Update an existing card."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a card and return success status."""
        ...

    async def get_usage_between(
        self, workspace_id: UUID, start: datetime, end: datetime
    ) -> dict[UUID, Decimal]:
        """Sum USD used per card over completed transactions in ``[start, end]``."""
        ...
