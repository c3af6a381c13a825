"""Transaction repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from domain.entities.transaction import Transaction, TransactionFilter, TransactionTotals


class ITransactionRepository(Protocol):
    """Repository interface for Transaction entities."""

    async def get(self, workspace_id: UUID, id: UUID) -> Transaction | None:
        """Get a transaction by ID, scoped to the workspace."""
        ...

    async def get_page(
        self,
        workspace_id: UUID,
        filters: TransactionFilter,
        offset: int = 0,
        limit: int = 20,
    ) -> list[Transaction]:
        """Get a page of transactions ordered by transaction date, newest first."""
        ...

    async def count(self, workspace_id: UUID, filters: TransactionFilter) -> int:
        """Count transactions matching the filters."""
        ...

    async def create(self, transaction: Transaction) -> Transaction:
        """Create a new transaction."""
        ...

    async def update(self, transaction: Transaction) -> Transaction:
        """Update an existing transaction."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a transaction and return success status."""
        ...

    async def count_for_card(self, card_id: UUID) -> int:
        """Count every transaction recorded against a card."""
        ...

    async def get_totals(
        self,
        workspace_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
        card_id: UUID | None = None,
    ) -> TransactionTotals:
        """Sum completed transactions, optionally bounded by date or card."""
        ...

    async def get_completed_between(
        self, workspace_id: UUID, start: datetime, end: datetime
    ) -> list[Transaction]:
        """Get completed transactions dated within ``[start, end]``."""
        ...

    async def get_recent(
        self, workspace_id: UUID, limit: int = 10, card_id: UUID | None = None
    ) -> list[Transaction]:
        """Get the most recent transactions of a workspace (or one of its cards)."""
        ...

    async def get_card_totals(self, workspace_id: UUID) -> dict[UUID, TransactionTotals]:
        """Completed totals grouped by card."""
        ...
