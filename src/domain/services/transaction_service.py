"""Transaction service layer with business logic."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import cast
from uuid import UUID

from core.exceptions import InvalidCardError, TransactionNotFoundError
from domain.calculations import month_key, to_money, year_range
from domain.entities.transaction import (
    Transaction,
    TransactionFilter,
    TransactionStatus,
    TransactionTotals,
)
from domain.repositories.unit_of_work import IUnitOfWork

MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class TransactionPage:
    items: list[Transaction]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.total else 0


def summarize_by_month(
    transactions: Iterable[Transaction], keys: list[str]
) -> list[tuple[str, TransactionTotals]]:
    """Sum transactions into ``YYYY-MM`` buckets, one per key, zero-filled.

    Transactions falling outside ``keys`` are ignored.
    """
    buckets: dict[str, list[Transaction]] = {key: [] for key in keys}
    for txn in transactions:
        key = month_key(txn.transaction_date)
        if key in buckets:
            buckets[key].append(txn)
    return [(key, sum_transactions(buckets[key])) for key in keys]


def sum_transactions(transactions: list[Transaction]) -> TransactionTotals:
    zero = Decimal("0")
    return TransactionTotals(
        cost=to_money(sum((t.cost for t in transactions), zero)),
        sale=to_money(sum((t.sale for t in transactions), zero)),
        profit=to_money(sum((t.profit for t in transactions), zero)),
        usd_used=to_money(sum((t.usd_used for t in transactions), zero)),
        usdt_received=to_money(sum((t.usdt_received for t in transactions), zero)),
        count=len(transactions),
    )


class TransactionService:
    """Service layer for Transaction business logic.

    Cost, sale and profit are never taken from the caller; they are derived
    from amounts and rates every time either changes.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_page(
        self,
        workspace_id: UUID,
        filters: TransactionFilter | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> TransactionPage:
        filters = filters or TransactionFilter()
        page = max(page, 1)
        limit = min(max(limit, 1), MAX_PAGE_SIZE)

        async with self._uow_factory() as uow:
            items = await uow.transactions.get_page(
                workspace_id, filters, offset=(page - 1) * limit, limit=limit
            )
            total = await uow.transactions.count(workspace_id, filters)

        return TransactionPage(items=items, total=total, page=page, limit=limit)

    async def get(self, workspace_id: UUID, transaction_id: UUID) -> Transaction:
        async with self._uow_factory() as uow:
            txn = await uow.transactions.get(workspace_id, transaction_id)
            if not txn:
                raise TransactionNotFoundError(str(transaction_id))
            return txn

    async def create(
        self,
        workspace_id: UUID,
        card_id: UUID,
        usd_used: Decimal,
        usdt_received: Decimal,
        buy_rate: Decimal,
        sell_rate: Decimal,
        site: str | None = None,
        notes: str | None = None,
        transaction_date: datetime | None = None,
    ) -> Transaction:
        """Record a completed transaction against an active card.

        Raises:
            InvalidCardError: If the card is missing, inactive or not in this workspace.
        """
        async with self._uow_factory() as uow:
            await self._require_active_card(uow, workspace_id, card_id)

            txn = Transaction(
                workspace_id=workspace_id,
                card_id=card_id,
                usd_used=usd_used,
                usdt_received=usdt_received,
                buy_rate=buy_rate,
                sell_rate=sell_rate,
                site=site,
                notes=notes,
                status=TransactionStatus.COMPLETED,
                transaction_date=transaction_date or datetime.utcnow(),
            )
            txn.recalculate()

            created = await uow.transactions.create(txn)
            await uow.commit()
            return created

    async def update(
        self,
        workspace_id: UUID,
        transaction_id: UUID,
        card_id: UUID | None = None,
        usd_used: Decimal | None = None,
        usdt_received: Decimal | None = None,
        buy_rate: Decimal | None = None,
        sell_rate: Decimal | None = None,
        site: object = ...,  # Sentinel to detect explicit None
        notes: object = ...,
        status: TransactionStatus | None = None,
        transaction_date: datetime | None = None,
    ) -> Transaction:
        """Partially update a transaction, recomputing derived figures."""
        async with self._uow_factory() as uow:
            txn = await uow.transactions.get(workspace_id, transaction_id)
            if not txn:
                raise TransactionNotFoundError(str(transaction_id))

            if card_id is not None and card_id != txn.card_id:
                await self._require_active_card(uow, workspace_id, card_id)
                txn.card_id = card_id

            if usd_used is not None:
                txn.usd_used = usd_used
            if usdt_received is not None:
                txn.usdt_received = usdt_received
            if buy_rate is not None:
                txn.buy_rate = buy_rate
            if sell_rate is not None:
                txn.sell_rate = sell_rate
            if site is not ...:
                txn.site = cast(str | None, site)
            if notes is not ...:
                txn.notes = cast(str | None, notes)
            if status is not None:
                txn.status = status
            if transaction_date is not None:
                txn.transaction_date = transaction_date

            txn.recalculate()
            txn.updated_at = datetime.utcnow()

            updated = await uow.transactions.update(txn)
            await uow.commit()
            return updated

    async def delete(self, workspace_id: UUID, transaction_id: UUID) -> None:
        async with self._uow_factory() as uow:
            txn = await uow.transactions.get(workspace_id, transaction_id)
            if not txn:
                raise TransactionNotFoundError(str(transaction_id))

            await uow.transactions.delete(txn.id)
            await uow.commit()

    async def get_monthly(
        self, workspace_id: UUID, year: int | None = None
    ) -> list[tuple[str, TransactionTotals]]:
        """Completed totals per month of a calendar year, January first."""
        year = year or datetime.utcnow().year
        start, end = year_range(datetime(year, 1, 1))

        async with self._uow_factory() as uow:
            transactions = await uow.transactions.get_completed_between(workspace_id, start, end)

        keys = [f"{year}-{month:02d}" for month in range(1, 13)]
        return summarize_by_month(transactions, keys)

    @staticmethod
    async def _require_active_card(uow: IUnitOfWork, workspace_id: UUID, card_id: UUID) -> None:
        card = await uow.cards.get(workspace_id, card_id)
        if not card or not card.is_active:
            raise InvalidCardError(str(card_id))
