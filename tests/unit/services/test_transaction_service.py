"""Unit tests for TransactionService."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from core.exceptions import InvalidCardError, TransactionNotFoundError
from domain.entities.card import Card
from domain.entities.transaction import Transaction, TransactionFilter, TransactionStatus
from domain.services.transaction_service import TransactionPage, TransactionService
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def service(uow: FakeUnitOfWork) -> TransactionService:
    return TransactionService(lambda: uow)


@pytest.fixture
def card(workspace_id: UUID) -> Card:
    return Card(workspace_id=workspace_id, name="BML Visa", usd_limit=Decimal("1000"))


def _txn(workspace_id: UUID, card_id: UUID, when: datetime, usdt: str = "100") -> Transaction:
    txn = Transaction(
        workspace_id=workspace_id,
        card_id=card_id,
        usd_used=Decimal("100"),
        usdt_received=Decimal(usdt),
        buy_rate=Decimal("15.42"),
        sell_rate=Decimal("15.50"),
        transaction_date=when,
    )
    txn.recalculate()
    return txn


async def _echo(entity: object) -> object:
    return entity


class TestCreate:
    @pytest.mark.asyncio
    async def test_derives_figures_server_side(
        self, service: TransactionService, uow: FakeUnitOfWork, workspace_id: UUID, card: Card
    ):
        uow.cards.get.return_value = card
        uow.transactions.create.side_effect = _echo

        txn = await service.create(
            workspace_id,
            card.id,
            usd_used=Decimal("100"),
            usdt_received=Decimal("98.5"),
            buy_rate=Decimal("15.42"),
            sell_rate=Decimal("15.50"),
            site="Binance",
        )

        assert txn.cost == Decimal("1542.00")
        assert txn.sale == Decimal("1526.75")
        assert txn.profit == Decimal("-15.25")
        assert txn.status == TransactionStatus.COMPLETED
        assert uow.committed

    @pytest.mark.asyncio
    async def test_inactive_card_is_rejected(
        self, service: TransactionService, uow: FakeUnitOfWork, workspace_id: UUID, card: Card
    ):
        card.deactivate()
        uow.cards.get.return_value = card

        with pytest.raises(InvalidCardError) as exc_info:
            await service.create(
                workspace_id, card.id, Decimal("1"), Decimal("1"), Decimal("1"), Decimal("1")
            )

        assert exc_info.value.status_code == 400
        uow.transactions.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_card_of_another_workspace_is_rejected(
        self, service: TransactionService, uow: FakeUnitOfWork, workspace_id: UUID
    ):
        uow.cards.get.return_value = None

        with pytest.raises(InvalidCardError):
            await service.create(
                workspace_id, uuid4(), Decimal("1"), Decimal("1"), Decimal("1"), Decimal("1")
            )


class TestUpdate:
    @pytest.mark.asyncio
    async def test_rate_change_recomputes_profit(
        self, service: TransactionService, uow: FakeUnitOfWork, workspace_id: UUID, card: Card
    ):
        txn = _txn(workspace_id, card.id, datetime(2025, 3, 1))
        txn.notes = "keep me"
        uow.transactions.get.return_value = txn
        uow.transactions.update.side_effect = _echo

        result = await service.update(workspace_id, txn.id, sell_rate=Decimal("15.60"), site=None)

        assert result.sale == Decimal("1560.00")
        assert result.profit == Decimal("18.00")
        assert result.site is None
        # Omitted optional text stays as it was
        assert result.notes == "keep me"

    @pytest.mark.asyncio
    async def test_moving_to_inactive_card_is_rejected(
        self, service: TransactionService, uow: FakeUnitOfWork, workspace_id: UUID, card: Card
    ):
        uow.transactions.get.return_value = _txn(workspace_id, card.id, datetime(2025, 3, 1))
        retired = Card(workspace_id=workspace_id, name="Old", usd_limit=Decimal("1"))
        retired.deactivate()
        uow.cards.get.return_value = retired

        with pytest.raises(InvalidCardError):
            await service.update(workspace_id, uuid4(), card_id=retired.id)

        uow.transactions.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_transaction(
        self, service: TransactionService, uow: FakeUnitOfWork, workspace_id: UUID
    ):
        uow.transactions.get.return_value = None

        with pytest.raises(TransactionNotFoundError):
            await service.update(workspace_id, uuid4(), notes="x")


class TestListing:
    @pytest.mark.asyncio
    async def test_page_and_limit_are_clamped(
        self, service: TransactionService, uow: FakeUnitOfWork, workspace_id: UUID
    ):
        uow.transactions.get_page.return_value = []
        uow.transactions.count.return_value = 0
        filters = TransactionFilter(status=TransactionStatus.PENDING)

        page = await service.get_page(workspace_id, filters, page=0, limit=500)

        assert (page.page, page.limit) == (1, 100)
        uow.transactions.get_page.assert_called_once_with(
            workspace_id, filters, offset=0, limit=100
        )

    def test_total_pages(self):
        assert TransactionPage(items=[], total=45, page=1, limit=20).total_pages == 3
        assert TransactionPage(items=[], total=0, page=1, limit=20).total_pages == 0

    @pytest.mark.asyncio
    async def test_delete(
        self, service: TransactionService, uow: FakeUnitOfWork, workspace_id: UUID, card: Card
    ):
        txn = _txn(workspace_id, card.id, datetime(2025, 3, 1))
        uow.transactions.get.return_value = txn

        await service.delete(workspace_id, txn.id)

        uow.transactions.delete.assert_called_once_with(txn.id)
        assert uow.committed


class TestMonthly:
    @pytest.mark.asyncio
    async def test_twelve_zero_filled_buckets(
        self, service: TransactionService, uow: FakeUnitOfWork, workspace_id: UUID, card: Card
    ):
        uow.transactions.get_completed_between.return_value = [
            _txn(workspace_id, card.id, datetime(2025, 1, 5)),
            _txn(workspace_id, card.id, datetime(2025, 1, 20)),
            _txn(workspace_id, card.id, datetime(2025, 3, 9)),
        ]

        result = await service.get_monthly(workspace_id, year=2025)

        assert [key for key, _ in result][:3] == ["2025-01", "2025-02", "2025-03"]
        assert len(result) == 12
        totals = dict(result)
        assert totals["2025-01"].count == 2
        assert totals["2025-01"].cost == Decimal("3084.00")
        assert totals["2025-02"].count == 0
        assert totals["2025-12"].profit == Decimal("0.00")
