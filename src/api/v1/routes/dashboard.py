"""Dashboard API routes."""

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies.auth import WorkspaceMemberContext
from api.dependencies.services import get_dashboard_service
from api.v1.routes.cards import build_utilization_response
from api.v1.routes.transactions import build_monthly_response, build_transaction_response
from api.v1.schemas.dashboard import (
    ActivityItemResponse,
    CardSummary,
    DashboardStatsDetailResponse,
    DashboardStatsResponse,
    MonthlyBreakdownResponse,
    PartnerProfitResponse,
    PeriodTotals,
    RecentActivityResponse,
    TopCardResponse,
    TopCardsResponse,
)
from core.rate_limit import READ_LIMIT, limiter
from domain.entities.transaction import TransactionTotals
from domain.services.dashboard_service import MAX_BREAKDOWN_MONTHS, DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def _period(totals: TransactionTotals) -> PeriodTotals:
    return PeriodTotals(
        cost=totals.cost,
        sale=totals.sale,
        profit=totals.profit,
        transactions=totals.count,
    )


@router.get("/stats", response_model=DashboardStatsDetailResponse, summary="Dashboard statistics")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_stats(
    request: Request,
    ctx: WorkspaceMemberContext,
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardStatsDetailResponse:
    """All-time, month and year totals, each partner's share and card usage."""
    stats = await service.get_stats(ctx.workspace_id)
    return DashboardStatsDetailResponse(
        data=DashboardStatsResponse(
            overview=_period(stats.all_time),
            monthly=_period(stats.month),
            yearly=_period(stats.year),
            partner_profits=[
                PartnerProfitResponse(
                    member_id=partner.member.id,
                    user_id=partner.member.user_id,
                    user_name=(
                        (partner.user.name or partner.user.email) if partner.user else ""
                    ),
                    avatar=partner.user.avatar if partner.user else None,
                    profit_split=partner.member.profit_split,
                    total_profit=partner.total_profit,
                    monthly_profit=partner.monthly_profit,
                )
                for partner in stats.partners
            ],
            card_utilization=[build_utilization_response(item) for item in stats.cards],
        )
    )


@router.get(
    "/monthly-breakdown",
    response_model=MonthlyBreakdownResponse,
    summary="Per-month totals",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_monthly_breakdown(
    request: Request,
    ctx: WorkspaceMemberContext,
    months: int = Query(12, ge=1, le=MAX_BREAKDOWN_MONTHS),
    service: DashboardService = Depends(get_dashboard_service),
) -> MonthlyBreakdownResponse:
    """Completed totals for the trailing ``months`` months, oldest first, zero-filled."""
    breakdown = await service.get_monthly_breakdown(ctx.workspace_id, months)
    return MonthlyBreakdownResponse(
        data=[build_monthly_response(month, totals) for month, totals in breakdown]
    )


@router.get(
    "/recent-activity",
    response_model=RecentActivityResponse,
    summary="Latest transactions",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_recent_activity(
    request: Request,
    ctx: WorkspaceMemberContext,
    limit: int = Query(10, ge=1, le=50),
    service: DashboardService = Depends(get_dashboard_service),
) -> RecentActivityResponse:
    items = await service.get_recent_activity(ctx.workspace_id, limit)
    return RecentActivityResponse(
        data=[
            ActivityItemResponse(
                **build_transaction_response(txn).model_dump(),
                card=CardSummary(id=card.id, name=card.name, color=card.color) if card else None,
            )
            for txn, card in items
        ]
    )


@router.get("/top-cards", response_model=TopCardsResponse, summary="Most profitable cards")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_top_cards(
    request: Request,
    ctx: WorkspaceMemberContext,
    service: DashboardService = Depends(get_dashboard_service),
) -> TopCardsResponse:
    ranked = await service.get_top_cards(ctx.workspace_id)
    return TopCardsResponse(
        data=[
            TopCardResponse(
                card_id=card.id,
                card_name=card.name,
                card_color=card.color,
                total_profit=totals.profit,
                total_volume=totals.usd_used,
                transaction_count=totals.count,
            )
            for card, totals in ranked
        ]
    )
