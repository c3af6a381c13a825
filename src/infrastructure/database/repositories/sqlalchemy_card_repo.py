"""SQLAlchemy implementation of Card repository."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.calculations import to_money
from domain.entities.card import Card
from domain.entities.transaction import TransactionStatus
from infrastructure.database.models import CardModel, TransactionModel


class SQLAlchemyCardRepository:
    """SQLAlchemy implementation of ICardRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, workspace_id: UUID, id: UUID) -> Card | None:
        """Get a card by ID, scoped to the workspace."""
        stmt = select(CardModel).where(
            CardModel.workspace_id == workspace_id,
            CardModel.id == id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all_for_workspace(
        self, workspace_id: UUID, include_inactive: bool = False
    ) -> list[Card]:
        """Get the cards of a workspace, newest first."""
        stmt = select(CardModel).where(CardModel.workspace_id == workspace_id)
        if not include_inactive:
            stmt = stmt.where(CardModel.is_active.is_(True))
        stmt = stmt.order_by(CardModel.created_at.desc())
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, card: Card) -> Card:
        """Create a new card."""
        model = CardModel(
            id=card.id,
            workspace_id=card.workspace_id,
            name=card.name,
            usd_limit=card.usd_limit,
            color=card.color,
            is_active=card.is_active,
            created_at=card.created_at,
            updated_at=card.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, card: Card) -> Card:
        """Update an existing card."""
        stmt = select(CardModel).where(CardModel.id == card.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Card {card.id} not found")

        model.name = card.name
        model.usd_limit = card.usd_limit
        model.color = card.color
        model.is_active = card.is_active
        model.updated_at = card.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a card and return success status."""
        stmt = delete(CardModel).where(CardModel.id == id)
        result = await self._session.execute(stmt)
        return (result.rowcount or 0) > 0  # type: ignore[attr-defined]

    async def get_usage_between(
        self, workspace_id: UUID, start: datetime, end: datetime
    ) -> dict[UUID, Decimal]:
        """Sum USD used per card over completed transactions in ``[start, end]``."""
        stmt = (
            select(
                TransactionModel.card_id,
                func.coalesce(func.sum(TransactionModel.usd_used), 0).label("used"),
            )
            .where(
                TransactionModel.workspace_id == workspace_id,
                TransactionModel.status == TransactionStatus.COMPLETED.value,
                TransactionModel.transaction_date >= start,
                TransactionModel.transaction_date <= end,
            )
            .group_by(TransactionModel.card_id)
        )
        result = await self._session.execute(stmt)
        return {row.card_id: to_money(Decimal(str(row.used))) for row in result}

    def _to_entity(self, model: CardModel) -> Card:
        """Convert ORM model to domain entity."""
        return Card(
            id=model.id,
            workspace_id=model.workspace_id,
            name=model.name,
            usd_limit=Decimal(str(model.usd_limit)),
            color=model.color,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
