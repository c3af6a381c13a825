"""Pydantic schemas for Workspace API."""

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from api.v1.schemas.common import Money
from domain.entities.workspace import DEFAULT_BUY_RATE, DEFAULT_SELL_RATE, WorkspaceType


class OnboardingRequest(BaseModel):
    """Schema for creating the caller's workspace."""

    name: str = Field(..., min_length=1, max_length=255)
    type: WorkspaceType = WorkspaceType.SOLE_TRADER
    default_buy_rate: Decimal = Field(DEFAULT_BUY_RATE, gt=0, max_digits=10, decimal_places=4)
    default_sell_rate: Decimal = Field(DEFAULT_SELL_RATE, gt=0, max_digits=10, decimal_places=4)


class WorkspaceUpdate(BaseModel):
    """Schema for updating a Workspace (all fields optional)."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[WorkspaceType] = None


class WorkspaceSettingsSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    default_buy_rate: Money
    default_sell_rate: Money
    theme: str
    currency: str


class WorkspaceResponse(BaseModel):
    """Schema for Workspace response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "name": "Male FX",
                "type": "SOLE_TRADER",
                "member_count": 1,
                "created_at": "2026-02-01T10:00:00",
                "updated_at": "2026-02-01T10:00:00",
            }
        },
    )

    id: UUID
    name: str
    type: str
    member_count: int = 0
    settings: Optional[WorkspaceSettingsSummary] = None
    created_at: datetime
    updated_at: datetime


class WorkspaceDetailResponse(BaseModel):
    """Schema for single Workspace response."""

    data: WorkspaceResponse


class WorkspaceMemberResponse(BaseModel):
    """Schema for Workspace Member response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    email: str = ""
    name: Optional[str] = None
    avatar: Optional[str] = None
    role: str
    is_owner: bool
    profit_split: Money
    joined_at: datetime


class WorkspaceMemberListResponse(BaseModel):
    """Members plus the profit split total.

    ``profit_split_balanced`` is False when the splits do not add up to 100;
    this is reported, not enforced.
    """

    data: List[WorkspaceMemberResponse]
    profit_split_total: Money
    profit_split_balanced: bool
    meta: dict[str, Any] = Field(default_factory=dict)


class UpdateProfitSplitRequest(BaseModel):
    member_id: UUID
    profit_split: Decimal = Field(..., ge=0, le=100, decimal_places=2)


class WorkspaceMemberDetailResponse(BaseModel):
    data: WorkspaceMemberResponse
