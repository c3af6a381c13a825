"""Card service layer with business logic."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

import structlog

from core.exceptions import CardNotFoundError
from domain.calculations import month_range, to_money, utilization_percent
from domain.entities.card import DEFAULT_CARD_COLOR, Card
from domain.entities.transaction import Transaction, TransactionTotals
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

CARD_HISTORY_SIZE = 10


@dataclass(frozen=True)
class CardUtilization:
    """Month-to-date USD usage of a card against its limit."""

    card: Card
    used: Decimal
    remaining: Decimal
    percent: Decimal


@dataclass(frozen=True)
class CardHistory:
    card: Card
    totals: TransactionTotals
    recent: list[Transaction]


def build_utilization(card: Card, used: Decimal) -> CardUtilization:
    used = to_money(used)
    return CardUtilization(
        card=card,
        used=used,
        remaining=to_money(max(Decimal("0"), card.usd_limit - used)),
        percent=utilization_percent(used, card.usd_limit),
    )


class CardService:
    """Service layer for Card business logic."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_cards(self, workspace_id: UUID, include_inactive: bool = False) -> list[Card]:
        async with self._uow_factory() as uow:
            return await uow.cards.get_all_for_workspace(workspace_id, include_inactive)

    async def get_card(self, workspace_id: UUID, card_id: UUID) -> Card:
        """Get a card of the workspace.

        Raises:
            CardNotFoundError: If the card does not exist in this workspace.
        """
        async with self._uow_factory() as uow:
            card = await uow.cards.get(workspace_id, card_id)
            if not card:
                raise CardNotFoundError(str(card_id))
            return card

    async def create_card(
        self,
        workspace_id: UUID,
        name: str,
        usd_limit: Decimal,
        color: str | None = None,
    ) -> Card:
        async with self._uow_factory() as uow:
            card = await uow.cards.create(
                Card(
                    workspace_id=workspace_id,
                    name=name.strip(),
                    usd_limit=to_money(usd_limit),
                    color=color or DEFAULT_CARD_COLOR,
                )
            )
            await uow.commit()
            return card

    async def update_card(
        self,
        workspace_id: UUID,
        card_id: UUID,
        name: str | None = None,
        usd_limit: Decimal | None = None,
        color: str | None = None,
        is_active: bool | None = None,
    ) -> Card:
        async with self._uow_factory() as uow:
            card = await uow.cards.get(workspace_id, card_id)
            if not card:
                raise CardNotFoundError(str(card_id))

            if name is not None:
                card.name = name.strip()
            if usd_limit is not None:
                card.usd_limit = to_money(usd_limit)
            if color is not None:
                card.color = color
            if is_active is not None:
                card.is_active = is_active

            card.updated_at = datetime.utcnow()
            updated = await uow.cards.update(card)
            await uow.commit()
            return updated

    async def delete_card(self, workspace_id: UUID, card_id: UUID) -> bool:
        """Delete a card, or deactivate it if transactions reference it.

        Returns:
            True if the card was removed, False if it was only deactivated.
        """
        async with self._uow_factory() as uow:
            card = await uow.cards.get(workspace_id, card_id)
            if not card:
                raise CardNotFoundError(str(card_id))

            if await uow.transactions.count_for_card(card.id):
                card.deactivate()
                await uow.cards.update(card)
                await uow.commit()
                logger.info(
                    "card_deactivated", workspace_id=str(workspace_id), card_id=str(card_id)
                )
                return False

            await uow.cards.delete(card.id)
            await uow.commit()
            return True

    async def get_utilization(
        self, workspace_id: UUID, now: datetime | None = None
    ) -> list[CardUtilization]:
        """Current-month usage of every active card."""
        start, end = month_range(now or datetime.utcnow())
        async with self._uow_factory() as uow:
            cards = await uow.cards.get_all_for_workspace(workspace_id)
            usage = await uow.cards.get_usage_between(workspace_id, start, end)

        return [build_utilization(card, usage.get(card.id, Decimal("0"))) for card in cards]

    async def get_history(self, workspace_id: UUID, card_id: UUID) -> CardHistory:
        """All-time completed totals and the latest transactions of a card."""
        async with self._uow_factory() as uow:
            card = await uow.cards.get(workspace_id, card_id)
            if not card:
                raise CardNotFoundError(str(card_id))

            totals = await uow.transactions.get_totals(workspace_id, card_id=card.id)
            recent = await uow.transactions.get_recent(
                workspace_id, limit=CARD_HISTORY_SIZE, card_id=card.id
            )
            return CardHistory(card=card, totals=totals, recent=recent)
