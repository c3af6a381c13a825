"""Card API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import WorkspaceMemberContext
from api.dependencies.services import get_card_service
from api.v1.routes.transactions import build_transaction_response
from api.v1.schemas.card import (
    CardCreate,
    CardDeleteResponse,
    CardDetailResponse,
    CardHistoryResponse,
    CardListResponse,
    CardResponse,
    CardTotalsResponse,
    CardUpdate,
    CardUtilizationListResponse,
    CardUtilizationResponse,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.card import Card
from domain.services.card_service import CardService, CardUtilization

router = APIRouter(prefix="/cards", tags=["cards"])


def build_card_response(card: Card) -> CardResponse:
    return CardResponse(
        id=card.id,
        workspace_id=card.workspace_id,
        name=card.name,
        usd_limit=card.usd_limit,
        color=card.color,
        is_active=card.is_active,
        created_at=card.created_at,
        updated_at=card.updated_at,
    )


def build_utilization_response(item: CardUtilization) -> CardUtilizationResponse:
    return CardUtilizationResponse(
        card_id=item.card.id,
        card_name=item.card.name,
        card_color=item.card.color,
        usd_limit=item.card.usd_limit,
        used_this_month=item.used,
        remaining=item.remaining,
        utilization_percent=item.percent,
    )


@router.get("", response_model=CardListResponse, summary="List cards")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_cards(
    request: Request,
    ctx: WorkspaceMemberContext,
    include_inactive: bool = Query(False, description="Include deactivated cards"),
    service: CardService = Depends(get_card_service),
) -> CardListResponse:
    cards = await service.get_cards(ctx.workspace_id, include_inactive=include_inactive)
    data = [build_card_response(card) for card in cards]
    return CardListResponse(data=data, meta={"total": len(data)})


@router.get(
    "/utilization",
    response_model=CardUtilizationListResponse,
    summary="Month-to-date usage of active cards",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_utilization(
    request: Request,
    ctx: WorkspaceMemberContext,
    service: CardService = Depends(get_card_service),
) -> CardUtilizationListResponse:
    """USD used this calendar month on completed transactions, per card."""
    items = await service.get_utilization(ctx.workspace_id)
    return CardUtilizationListResponse(data=[build_utilization_response(i) for i in items])


@router.get(
    "/{card_id}",
    response_model=CardDetailResponse,
    summary="Get a card",
    responses={404: {"description": "Card not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_card(
    request: Request,
    card_id: UUID,
    ctx: WorkspaceMemberContext,
    service: CardService = Depends(get_card_service),
) -> CardDetailResponse:
    card = await service.get_card(ctx.workspace_id, card_id)
    return CardDetailResponse(data=build_card_response(card))


@router.get(
    "/{card_id}/history",
    response_model=CardHistoryResponse,
    summary="Card totals and latest transactions",
    responses={404: {"description": "Card not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_card_history(
    request: Request,
    card_id: UUID,
    ctx: WorkspaceMemberContext,
    service: CardService = Depends(get_card_service),
) -> CardHistoryResponse:
    history = await service.get_history(ctx.workspace_id, card_id)
    return CardHistoryResponse(
        card=build_card_response(history.card),
        totals=CardTotalsResponse(
            total_cost=history.totals.cost,
            total_sale=history.totals.sale,
            total_profit=history.totals.profit,
            total_volume=history.totals.usd_used,
            transaction_count=history.totals.count,
        ),
        recent_transactions=[build_transaction_response(t) for t in history.recent],
    )


@router.post(
    "",
    response_model=CardDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a card",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_card(
    request: Request,
    body: CardCreate,
    ctx: WorkspaceMemberContext,
    service: CardService = Depends(get_card_service),
) -> CardDetailResponse:
    card = await service.create_card(
        ctx.workspace_id, name=body.name, usd_limit=body.usd_limit, color=body.color
    )
    return CardDetailResponse(data=build_card_response(card))


@router.patch(
    "/{card_id}",
    response_model=CardDetailResponse,
    summary="Update a card",
    responses={404: {"description": "Card not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_card(
    request: Request,
    card_id: UUID,
    body: CardUpdate,
    ctx: WorkspaceMemberContext,
    service: CardService = Depends(get_card_service),
) -> CardDetailResponse:
    card = await service.update_card(
        ctx.workspace_id,
        card_id,
        name=body.name,
        usd_limit=body.usd_limit,
        color=body.color,
        is_active=body.is_active,
    )
    return CardDetailResponse(data=build_card_response(card))


@router.delete(
    "/{card_id}",
    response_model=CardDeleteResponse,
    summary="Delete a card",
    responses={404: {"description": "Card not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_card(
    request: Request,
    card_id: UUID,
    ctx: WorkspaceMemberContext,
    service: CardService = Depends(get_card_service),
) -> CardDeleteResponse:
    """
    Delete a card.

    A card with recorded transactions is deactivated instead, so its history
    stays intact.
    """
    deleted = await service.delete_card(ctx.workspace_id, card_id)
    return CardDeleteResponse(
        deleted=deleted,
        deactivated=not deleted,
        message="Card deleted" if deleted else "Card has transactions and was deactivated",
    )
