"""Pydantic schemas for Transaction API."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from api.v1.schemas.common import Money, PaginationMeta
from domain.entities.transaction import TransactionStatus


class TransactionCreate(BaseModel):
    """Schema for recording a Transaction.

    Cost, sale and profit are computed by the server.
    """

    card_id: UUID
    usd_used: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2)
    usdt_received: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2)
    buy_rate: Decimal = Field(..., gt=0, max_digits=10, decimal_places=4)
    sell_rate: Decimal = Field(..., gt=0, max_digits=10, decimal_places=4)
    site: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=1000)
    transaction_date: Optional[datetime] = None


class TransactionUpdate(BaseModel):
    """Schema for updating a Transaction (all fields optional).

    Set ``site`` or ``notes`` to ``null`` to clear them.
    """

    card_id: Optional[UUID] = None
    usd_used: Optional[Decimal] = Field(None, gt=0, max_digits=14, decimal_places=2)
    usdt_received: Optional[Decimal] = Field(None, gt=0, max_digits=14, decimal_places=2)
    buy_rate: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=4)
    sell_rate: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=4)
    site: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=1000)
    status: Optional[TransactionStatus] = None
    transaction_date: Optional[datetime] = None


class TransactionResponse(BaseModel):
    """Schema for Transaction response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "workspace_id": "456e4567-e89b-12d3-a456-426614174000",
                "card_id": "789e4567-e89b-12d3-a456-426614174000",
                "usd_used": 100.0,
                "usdt_received": 98.5,
                "buy_rate": 15.42,
                "sell_rate": 15.5,
                "cost": 1542.0,
                "sale": 1526.75,
                "profit": -15.25,
                "site": "Binance P2P",
                "notes": None,
                "status": "COMPLETED",
                "transaction_date": "2026-02-01T10:00:00",
                "created_at": "2026-02-01T10:00:00",
                "updated_at": "2026-02-01T10:00:00",
            }
        },
    )

    id: UUID
    workspace_id: UUID
    card_id: UUID
    usd_used: Money
    usdt_received: Money
    buy_rate: Money
    sell_rate: Money
    cost: Money
    sale: Money
    profit: Money
    site: Optional[str] = None
    notes: Optional[str] = None
    status: str
    transaction_date: datetime
    created_at: datetime
    updated_at: datetime


class TransactionListResponse(BaseModel):
    data: List[TransactionResponse]
    meta: PaginationMeta


class TransactionDetailResponse(BaseModel):
    data: TransactionResponse


class MonthlyTotalsResponse(BaseModel):
    """Completed totals for one ``YYYY-MM`` month."""

    month: str
    cost: Money
    sale: Money
    profit: Money
    usd_used: Money
    transactions: int


class MonthlyTotalsListResponse(BaseModel):
    data: List[MonthlyTotalsResponse]
