"""SQLAlchemy implementation of Transaction repository."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.calculations import to_money
from domain.entities.transaction import (
    Transaction,
    TransactionFilter,
    TransactionStatus,
    TransactionTotals,
)
from infrastructure.database.models import TransactionModel


def _money(value: Any) -> Decimal:
    return to_money(Decimal(str(value or 0)))


class SQLAlchemyTransactionRepository:
    """SQLAlchemy implementation of ITransactionRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, workspace_id: UUID, id: UUID) -> Transaction | None:
        """Get a transaction by ID, scoped to the workspace."""
        stmt = select(TransactionModel).where(
            TransactionModel.workspace_id == workspace_id,
            TransactionModel.id == id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_page(
        self,
        workspace_id: UUID,
        filters: TransactionFilter,
        offset: int = 0,
        limit: int = 20,
    ) -> list[Transaction]:
        """Get a page of transactions ordered by transaction date, newest first."""
        stmt = self._apply_filters(select(TransactionModel), workspace_id, filters)
        stmt = (
            stmt.order_by(TransactionModel.transaction_date.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def count(self, workspace_id: UUID, filters: TransactionFilter) -> int:
        """Count transactions matching the filters."""
        stmt = self._apply_filters(
            select(func.count()).select_from(TransactionModel), workspace_id, filters
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def create(self, transaction: Transaction) -> Transaction:
        """Create a new transaction."""
        model = TransactionModel(
            id=transaction.id,
            workspace_id=transaction.workspace_id,
            card_id=transaction.card_id,
            usd_used=transaction.usd_used,
            usdt_received=transaction.usdt_received,
            buy_rate=transaction.buy_rate,
            sell_rate=transaction.sell_rate,
            cost=transaction.cost,
            sale=transaction.sale,
            profit=transaction.profit,
            site=transaction.site,
            notes=transaction.notes,
            status=transaction.status.value,
            transaction_date=transaction.transaction_date,
            created_at=transaction.created_at,
            updated_at=transaction.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, transaction: Transaction) -> Transaction:
        """Update an existing transaction."""
        stmt = select(TransactionModel).where(TransactionModel.id == transaction.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Transaction {transaction.id} not found")

        model.card_id = transaction.card_id
        model.usd_used = transaction.usd_used
        model.usdt_received = transaction.usdt_received
        model.buy_rate = transaction.buy_rate
        model.sell_rate = transaction.sell_rate
        model.cost = transaction.cost
        model.sale = transaction.sale
        model.profit = transaction.profit
        model.site = transaction.site
        model.notes = transaction.notes
        model.status = transaction.status.value
        model.transaction_date = transaction.transaction_date
        model.updated_at = transaction.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a transaction and return success status."""
        stmt = delete(TransactionModel).where(TransactionModel.id == id)
        result = await self._session.execute(stmt)
        return (result.rowcount or 0) > 0  # type: ignore[attr-defined]

    async def count_for_card(self, card_id: UUID) -> int:
        """Count every transaction recorded against a card."""
        stmt = (
            select(func.count())
            .select_from(TransactionModel)
            .where(TransactionModel.card_id == card_id)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def get_totals(
        self,
        workspace_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
        card_id: UUID | None = None,
    ) -> TransactionTotals:
        """Sum completed transactions, optionally bounded by date or card."""
        stmt = select(
            func.sum(TransactionModel.cost).label("cost"),
            func.sum(TransactionModel.sale).label("sale"),
            func.sum(TransactionModel.profit).label("profit"),
            func.sum(TransactionModel.usd_used).label("usd_used"),
            func.sum(TransactionModel.usdt_received).label("usdt_received"),
            func.count().label("txn_count"),
        ).where(
            TransactionModel.workspace_id == workspace_id,
            TransactionModel.status == TransactionStatus.COMPLETED.value,
        )
        if start is not None:
            stmt = stmt.where(TransactionModel.transaction_date >= start)
        if end is not None:
            stmt = stmt.where(TransactionModel.transaction_date <= end)
        if card_id is not None:
            stmt = stmt.where(TransactionModel.card_id == card_id)

        result = await self._session.execute(stmt)
        return self._row_to_totals(result.one())

    async def get_completed_between(
        self, workspace_id: UUID, start: datetime, end: datetime
    ) -> list[Transaction]:
        """Get completed transactions dated within ``[start, end]``."""
        stmt = (
            select(TransactionModel)
            .where(
                TransactionModel.workspace_id == workspace_id,
                TransactionModel.status == TransactionStatus.COMPLETED.value,
                TransactionModel.transaction_date >= start,
                TransactionModel.transaction_date <= end,
            )
            .order_by(TransactionModel.transaction_date)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_recent(
        self, workspace_id: UUID, limit: int = 10, card_id: UUID | None = None
    ) -> list[Transaction]:
        """Most recent transactions.

        Per card they are ordered by transaction date; workspace-wide by
        creation time (what was entered last).
        """
        stmt = select(TransactionModel).where(TransactionModel.workspace_id == workspace_id)
        if card_id is not None:
            stmt = stmt.where(TransactionModel.card_id == card_id).order_by(
                TransactionModel.transaction_date.desc()
            )
        else:
            stmt = stmt.order_by(TransactionModel.created_at.desc())
        result = await self._session.execute(stmt.limit(limit))
        return [self._to_entity(model) for model in result.scalars()]

    async def get_card_totals(self, workspace_id: UUID) -> dict[UUID, TransactionTotals]:
        """Completed totals grouped by card."""
        stmt = (
            select(
                TransactionModel.card_id,
                func.sum(TransactionModel.cost).label("cost"),
                func.sum(TransactionModel.sale).label("sale"),
                func.sum(TransactionModel.profit).label("profit"),
                func.sum(TransactionModel.usd_used).label("usd_used"),
                func.sum(TransactionModel.usdt_received).label("usdt_received"),
                func.count().label("txn_count"),
            )
            .where(
                TransactionModel.workspace_id == workspace_id,
                TransactionModel.status == TransactionStatus.COMPLETED.value,
            )
            .group_by(TransactionModel.card_id)
        )
        result = await self._session.execute(stmt)
        return {row.card_id: self._row_to_totals(row) for row in result}

    def _apply_filters(
        self, stmt: Select[Any], workspace_id: UUID, filters: TransactionFilter
    ) -> Select[Any]:
        stmt = stmt.where(TransactionModel.workspace_id == workspace_id)
        if filters.card_id is not None:
            stmt = stmt.where(TransactionModel.card_id == filters.card_id)
        if filters.status is not None:
            stmt = stmt.where(TransactionModel.status == filters.status.value)
        if filters.start_date is not None:
            stmt = stmt.where(TransactionModel.transaction_date >= filters.start_date)
        if filters.end_date is not None:
            stmt = stmt.where(TransactionModel.transaction_date <= filters.end_date)
        return stmt

    def _row_to_totals(self, row: Any) -> TransactionTotals:
        return TransactionTotals(
            cost=_money(row.cost),
            sale=_money(row.sale),
            profit=_money(row.profit),
            usd_used=_money(row.usd_used),
            usdt_received=_money(row.usdt_received),
            count=row.txn_count or 0,
        )

    def _to_entity(self, model: TransactionModel) -> Transaction:
        """Convert ORM model to domain entity."""
        return Transaction(
            id=model.id,
            workspace_id=model.workspace_id,
            card_id=model.card_id,
            usd_used=Decimal(str(model.usd_used)),
            usdt_received=Decimal(str(model.usdt_received)),
            buy_rate=Decimal(str(model.buy_rate)),
            sell_rate=Decimal(str(model.sell_rate)),
            cost=Decimal(str(model.cost)),
            sale=Decimal(str(model.sale)),
            profit=Decimal(str(model.profit)),
            site=model.site,
            notes=model.notes,
            status=TransactionStatus(model.status),
            transaction_date=model.transaction_date,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
