"""Pydantic schemas for Card API."""

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from api.v1.schemas.common import Money
from api.v1.schemas.transaction import TransactionResponse

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class CardCreate(BaseModel):
    """Schema for creating a Card."""

    name: str = Field(..., min_length=1, max_length=100)
    usd_limit: Decimal = Field(..., ge=0, max_digits=14, decimal_places=2)
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)


class CardUpdate(BaseModel):
    """Schema for updating a Card (all fields optional)."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    usd_limit: Optional[Decimal] = Field(None, ge=0, max_digits=14, decimal_places=2)
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    is_active: Optional[bool] = None


class CardResponse(BaseModel):
    """Schema for Card response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "workspace_id": "456e4567-e89b-12d3-a456-426614174000",
                "name": "BML Visa",
                "usd_limit": 500.0,
                "color": "#3B82F6",
                "is_active": True,
                "created_at": "2026-02-01T10:00:00",
                "updated_at": "2026-02-01T10:00:00",
            }
        },
    )

    id: UUID
    workspace_id: UUID
    name: str
    usd_limit: Money
    color: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class CardListResponse(BaseModel):
    data: List[CardResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class CardDetailResponse(BaseModel):
    data: CardResponse


class CardUtilizationResponse(BaseModel):
    """Month-to-date usage of one card."""

    card_id: UUID
    card_name: str
    card_color: str
    usd_limit: Money
    used_this_month: Money
    remaining: Money
    utilization_percent: Money


class CardUtilizationListResponse(BaseModel):
    data: List[CardUtilizationResponse]


class CardTotalsResponse(BaseModel):
    total_cost: Money
    total_sale: Money
    total_profit: Money
    total_volume: Money
    transaction_count: int


class CardHistoryResponse(BaseModel):
    card: CardResponse
    totals: CardTotalsResponse
    recent_transactions: List[TransactionResponse]


class CardDeleteResponse(BaseModel):
    deleted: bool
    deactivated: bool
    message: str
