"""Pydantic schemas for Invitation API."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from api.v1.schemas.common import Money, normalize_email


class CreateInvitationRequest(BaseModel):
    """Schema for inviting a partner to a workspace."""

    email: str = Field(..., min_length=3, max_length=255)
    profit_split: Decimal = Field(Decimal("0"), ge=0, le=100, decimal_places=2)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Basic email validation."""
        return normalize_email(v)


class AcceptInvitationRequest(BaseModel):
    """Schema for accepting a workspace invitation."""

    token: str = Field(..., min_length=1)


class InvitationResponse(BaseModel):
    """Schema for Invitation response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "workspace_id": "456e4567-e89b-12d3-a456-426614174000",
                "email": "partner@example.com",
                "profit_split": 40.0,
                "status": "PENDING",
                "invited_by_id": "789e4567-e89b-12d3-a456-426614174000",
                "created_at": "2026-02-01T10:00:00",
                "expires_at": "2026-02-08T10:00:00",
            }
        },
    )

    id: UUID
    workspace_id: UUID
    email: str
    profit_split: Money
    status: str
    invited_by_id: UUID
    created_at: datetime
    expires_at: datetime
    accepted_at: Optional[datetime] = None


class InvitationListResponse(BaseModel):
    """Schema for list of Invitations response."""

    data: list[InvitationResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class InvitationCreatedResponse(BaseModel):
    """Schema for invitation creation response (includes raw token)."""

    data: InvitationResponse
    token: str = Field(
        ...,
        description="Raw invitation token. Share this with the invitee. "
        "This value is only shown once.",
    )
    invite_link: str


class InvitationPreviewResponse(BaseModel):
    """Public view of an invitation, looked up by its token."""

    workspace_id: UUID
    workspace_name: str
    inviter_name: Optional[str] = None
    email: str
    profit_split: Money
    status: str
    expires_at: datetime


class AcceptInvitationResponse(BaseModel):
    """Schema for accepting an invitation response."""

    workspace_id: UUID
    member_id: UUID
    role: str
    profit_split: Money
    message: str = "Invitation accepted successfully"
