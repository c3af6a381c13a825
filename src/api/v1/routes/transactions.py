"""Transaction API routes."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import WorkspaceMemberContext
from api.dependencies.services import get_transaction_service
from api.v1.schemas.common import PaginationMeta
from api.v1.schemas.transaction import (
    MonthlyTotalsListResponse,
    MonthlyTotalsResponse,
    TransactionCreate,
    TransactionDetailResponse,
    TransactionListResponse,
    TransactionResponse,
    TransactionUpdate,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.transaction import (
    Transaction,
    TransactionFilter,
    TransactionStatus,
    TransactionTotals,
)
from domain.services.transaction_service import MAX_PAGE_SIZE, TransactionService

router = APIRouter(prefix="/transactions", tags=["transactions"])


def build_transaction_response(txn: Transaction) -> TransactionResponse:
    return TransactionResponse(
        id=txn.id,
        workspace_id=txn.workspace_id,
        card_id=txn.card_id,
        usd_used=txn.usd_used,
        usdt_received=txn.usdt_received,
        buy_rate=txn.buy_rate,
        sell_rate=txn.sell_rate,
        cost=txn.cost,
        sale=txn.sale,
        profit=txn.profit,
        site=txn.site,
        notes=txn.notes,
        status=txn.status.value,
        transaction_date=txn.transaction_date,
        created_at=txn.created_at,
        updated_at=txn.updated_at,
    )


def build_monthly_response(month: str, totals: TransactionTotals) -> MonthlyTotalsResponse:
    return MonthlyTotalsResponse(
        month=month,
        cost=totals.cost,
        sale=totals.sale,
        profit=totals.profit,
        usd_used=totals.usd_used,
        transactions=totals.count,
    )


@router.get("", response_model=TransactionListResponse, summary="List transactions")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_transactions(
    request: Request,
    ctx: WorkspaceMemberContext,
    card_id: Optional[UUID] = Query(None),
    status_filter: Optional[TransactionStatus] = Query(None, alias="status"),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionListResponse:
    """List transactions newest first, optionally filtered by card, status or date range."""
    result = await service.get_page(
        ctx.workspace_id,
        TransactionFilter(
            card_id=card_id,
            status=status_filter,
            start_date=start_date,
            end_date=end_date,
        ),
        page=page,
        limit=limit,
    )
    return TransactionListResponse(
        data=[build_transaction_response(t) for t in result.items],
        meta=PaginationMeta(
            page=result.page,
            limit=result.limit,
            total=result.total,
            total_pages=result.total_pages,
        ),
    )


@router.get(
    "/monthly",
    response_model=MonthlyTotalsListResponse,
    summary="Monthly totals for a year",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_monthly_totals(
    request: Request,
    ctx: WorkspaceMemberContext,
    year: Optional[int] = Query(None, ge=2000, le=2100),
    service: TransactionService = Depends(get_transaction_service),
) -> MonthlyTotalsListResponse:
    """Completed totals for each month of ``year`` (default: this year), zero-filled."""
    months = await service.get_monthly(ctx.workspace_id, year)
    return MonthlyTotalsListResponse(
        data=[build_monthly_response(month, totals) for month, totals in months]
    )


@router.get(
    "/{transaction_id}",
    response_model=TransactionDetailResponse,
    summary="Get a transaction",
    responses={404: {"description": "Transaction not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_transaction(
    request: Request,
    transaction_id: UUID,
    ctx: WorkspaceMemberContext,
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionDetailResponse:
    txn = await service.get(ctx.workspace_id, transaction_id)
    return TransactionDetailResponse(data=build_transaction_response(txn))


@router.post(
    "",
    response_model=TransactionDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a transaction",
    responses={400: {"description": "Card missing or inactive"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_transaction(
    request: Request,
    body: TransactionCreate,
    ctx: WorkspaceMemberContext,
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionDetailResponse:
    """Record a completed transaction. Cost, sale and profit are computed here."""
    txn = await service.create(
        ctx.workspace_id,
        card_id=body.card_id,
        usd_used=body.usd_used,
        usdt_received=body.usdt_received,
        buy_rate=body.buy_rate,
        sell_rate=body.sell_rate,
        site=body.site,
        notes=body.notes,
        transaction_date=body.transaction_date,
    )
    return TransactionDetailResponse(data=build_transaction_response(txn))


@router.patch(
    "/{transaction_id}",
    response_model=TransactionDetailResponse,
    summary="Update a transaction",
    responses={
        400: {"description": "Card missing or inactive"},
        404: {"description": "Transaction not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_transaction(
    request: Request,
    transaction_id: UUID,
    body: TransactionUpdate,
    ctx: WorkspaceMemberContext,
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionDetailResponse:
    """Partial update. Send ``null`` for ``site`` or ``notes`` to clear them."""
    fields = body.model_fields_set
    txn = await service.update(
        ctx.workspace_id,
        transaction_id,
        card_id=body.card_id,
        usd_used=body.usd_used,
        usdt_received=body.usdt_received,
        buy_rate=body.buy_rate,
        sell_rate=body.sell_rate,
        site=body.site if "site" in fields else ...,
        notes=body.notes if "notes" in fields else ...,
        status=body.status,
        transaction_date=body.transaction_date,
    )
    return TransactionDetailResponse(data=build_transaction_response(txn))


@router.delete(
    "/{transaction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a transaction",
    responses={404: {"description": "Transaction not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_transaction(
    request: Request,
    transaction_id: UUID,
    ctx: WorkspaceMemberContext,
    service: TransactionService = Depends(get_transaction_service),
) -> None:
    await service.delete(ctx.workspace_id, transaction_id)
