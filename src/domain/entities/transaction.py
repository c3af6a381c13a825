"""Transaction domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from uuid import UUID, uuid4

from domain.calculations import calculate_transaction


class TransactionStatus(StrEnum):
    """Lifecycle of a recorded sale."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


@dataclass
class Transaction:
    """One conversion: USD spent on a card, USDT received, sold at a rate.

    ``cost``, ``sale`` and ``profit`` are always derived server-side; use
    ``recalculate`` after changing any amount or rate.
    """

    workspace_id: UUID
    card_id: UUID
    usd_used: Decimal
    usdt_received: Decimal
    buy_rate: Decimal
    sell_rate: Decimal
    id: UUID = field(default_factory=uuid4)
    cost: Decimal = Decimal("0")
    sale: Decimal = Decimal("0")
    profit: Decimal = Decimal("0")
    site: str | None = None
    notes: str | None = None
    status: TransactionStatus = TransactionStatus.COMPLETED
    transaction_date: datetime = field(default_factory=datetime.utcnow)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def recalculate(self) -> None:
        """Recompute cost, sale and profit from amounts and rates."""
        result = calculate_transaction(
            usd_used=self.usd_used,
            usdt_received=self.usdt_received,
            buy_rate=self.buy_rate,
            sell_rate=self.sell_rate,
        )
        self.cost = result.cost
        self.sale = result.sale
        self.profit = result.profit


@dataclass(frozen=True)
class TransactionFilter:
    """Optional narrowing of a workspace's transaction list."""

    card_id: UUID | None = None
    status: TransactionStatus | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


@dataclass(frozen=True)
class TransactionTotals:
    """Summed figures over a set of transactions."""

    cost: Decimal = Decimal("0")
    sale: Decimal = Decimal("0")
    profit: Decimal = Decimal("0")
    usd_used: Decimal = Decimal("0")
    usdt_received: Decimal = Decimal("0")
    count: int = 0
