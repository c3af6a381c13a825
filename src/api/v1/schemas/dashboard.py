"""Pydantic schemas for Dashboard API."""

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from api.v1.schemas.card import CardUtilizationResponse
from api.v1.schemas.common import Money
from api.v1.schemas.transaction import MonthlyTotalsResponse, TransactionResponse


class PeriodTotals(BaseModel):
    cost: Money
    sale: Money
    profit: Money
    transactions: int


class PartnerProfitResponse(BaseModel):
    member_id: UUID
    user_id: UUID
    user_name: str
    avatar: Optional[str] = None
    profit_split: Money
    total_profit: Money
    monthly_profit: Money


class DashboardStatsResponse(BaseModel):
    """Completed-transaction totals, partner shares and card usage."""

    overview: PeriodTotals
    monthly: PeriodTotals
    yearly: PeriodTotals
    partner_profits: List[PartnerProfitResponse]
    card_utilization: List[CardUtilizationResponse]


class DashboardStatsDetailResponse(BaseModel):
    data: DashboardStatsResponse


class MonthlyBreakdownResponse(BaseModel):
    data: List[MonthlyTotalsResponse]


class CardSummary(BaseModel):
    id: UUID
    name: str
    color: str


class ActivityItemResponse(TransactionResponse):
    card: Optional[CardSummary] = None


class RecentActivityResponse(BaseModel):
    data: List[ActivityItemResponse]


class TopCardResponse(BaseModel):
    card_id: UUID
    card_name: str
    card_color: str
    total_profit: Money
    total_volume: Money
    transaction_count: int


class TopCardsResponse(BaseModel):
    data: List[TopCardResponse]
