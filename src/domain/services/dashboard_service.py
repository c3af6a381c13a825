"""Dashboard aggregation over completed transactions."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from domain.calculations import (
    calculate_partner_share,
    month_range,
    trailing_month_keys,
    year_range,
)
from domain.entities.card import Card
from domain.entities.transaction import Transaction, TransactionTotals
from domain.entities.user import User
from domain.entities.workspace import WorkspaceMember
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.card_service import CardUtilization, build_utilization
from domain.services.transaction_service import summarize_by_month

MAX_BREAKDOWN_MONTHS = 24
TOP_CARDS_LIMIT = 5


@dataclass(frozen=True)
class PartnerProfit:
    member: WorkspaceMember
    user: User | None
    total_profit: Decimal
    monthly_profit: Decimal


@dataclass(frozen=True)
class DashboardStats:
    all_time: TransactionTotals
    month: TransactionTotals
    year: TransactionTotals
    partners: list[PartnerProfit]
    cards: list[CardUtilization]


class DashboardService:
    """Read-only reporting for a workspace.

    Only ``COMPLETED`` transactions contribute to totals; the recent
    activity feed shows every status.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_stats(self, workspace_id: UUID, now: datetime | None = None) -> DashboardStats:
        now = now or datetime.utcnow()
        month_start, month_end = month_range(now)
        year_start, year_end = year_range(now)

        async with self._uow_factory() as uow:
            all_time = await uow.transactions.get_totals(workspace_id)
            month = await uow.transactions.get_totals(workspace_id, month_start, month_end)
            year = await uow.transactions.get_totals(workspace_id, year_start, year_end)
            members = await uow.workspaces.get_members(workspace_id)
            users = await uow.users.get_many([m.user_id for m in members])
            cards = await uow.cards.get_all_for_workspace(workspace_id)
            usage = await uow.cards.get_usage_between(workspace_id, month_start, month_end)

        users_by_id = {user.id: user for user in users}
        partners = [
            PartnerProfit(
                member=member,
                user=users_by_id.get(member.user_id),
                total_profit=calculate_partner_share(all_time.profit, member.profit_split),
                monthly_profit=calculate_partner_share(month.profit, member.profit_split),
            )
            for member in members
        ]
        utilization = [
            build_utilization(card, usage.get(card.id, Decimal("0"))) for card in cards
        ]
        return DashboardStats(
            all_time=all_time,
            month=month,
            year=year,
            partners=partners,
            cards=utilization,
        )

    async def get_monthly_breakdown(
        self, workspace_id: UUID, months: int = 12, now: datetime | None = None
    ) -> list[tuple[str, TransactionTotals]]:
        """Per-month totals for the trailing ``months`` months, oldest first."""
        now = now or datetime.utcnow()
        months = min(max(months, 1), MAX_BREAKDOWN_MONTHS)
        keys = trailing_month_keys(now, months)

        first_year, first_month = (int(part) for part in keys[0].split("-"))
        start = datetime(first_year, first_month, 1)
        _, end = month_range(now)

        async with self._uow_factory() as uow:
            transactions = await uow.transactions.get_completed_between(workspace_id, start, end)

        return summarize_by_month(transactions, keys)

    async def get_recent_activity(
        self, workspace_id: UUID, limit: int = 10
    ) -> list[tuple[Transaction, Card | None]]:
        """Latest entered transactions with the card each was made on."""
        async with self._uow_factory() as uow:
            transactions = await uow.transactions.get_recent(workspace_id, limit=limit)
            cards = await uow.cards.get_all_for_workspace(workspace_id, include_inactive=True)

        cards_by_id = {card.id: card for card in cards}
        return [(txn, cards_by_id.get(txn.card_id)) for txn in transactions]

    async def get_top_cards(self, workspace_id: UUID) -> list[tuple[Card, TransactionTotals]]:
        """Cards ranked by completed profit, best first."""
        async with self._uow_factory() as uow:
            cards = await uow.cards.get_all_for_workspace(workspace_id, include_inactive=True)
            totals = await uow.transactions.get_card_totals(workspace_id)

        ranked = [(card, totals.get(card.id, TransactionTotals())) for card in cards]
        ranked.sort(key=lambda pair: pair[1].profit, reverse=True)
        return ranked[:TOP_CARDS_LIMIT]
