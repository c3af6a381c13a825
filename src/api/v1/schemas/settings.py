"""Pydantic schemas for workspace Settings API."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from api.v1.schemas.common import Money
from domain.entities.workspace import Theme


class SettingsUpdate(BaseModel):
    """Schema for updating settings (all fields optional)."""

    default_buy_rate: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=4)
    default_sell_rate: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=4)
    theme: Optional[Theme] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)


class RatesUpdate(BaseModel):
    buy_rate: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=4)
    sell_rate: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=4)


class SettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    workspace_id: UUID
    default_buy_rate: Money
    default_sell_rate: Money
    theme: str
    currency: str
    updated_at: datetime


class SettingsDetailResponse(BaseModel):
    data: SettingsResponse


class RatesResponse(BaseModel):
    buy_rate: Money
    sell_rate: Money
