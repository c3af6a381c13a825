"""Pydantic schemas for Auth API."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from api.v1.schemas.common import Money, normalize_email


class RegisterRequest(BaseModel):
    """Schema for email/password registration."""

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=8, max_length=128)
    name: Optional[str] = Field(None, min_length=1, max_length=255)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


class RefreshRequest(BaseModel):
    """Body fallback for clients that cannot hold cookies."""

    refresh_token: Optional[str] = None


class UserResponse(BaseModel):
    """Schema for a user profile."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "email": "a@x.com",
                "name": "Aisha",
                "avatar": None,
                "provider": "EMAIL",
                "email_verified": False,
                "created_at": "2026-02-01T10:00:00",
            }
        },
    )

    id: UUID
    email: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    provider: str
    email_verified: bool
    created_at: datetime


class AuthResponse(BaseModel):
    """Issued session.

    The refresh token is also set as an HTTP-only cookie; it is repeated
    in the body for non-browser clients.
    """

    user: UserResponse
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class MembershipSummary(BaseModel):
    workspace_id: UUID
    workspace_name: str
    workspace_type: str
    member_id: UUID
    role: str
    is_owner: bool
    profit_split: Money


class MeResponse(BaseModel):
    user: UserResponse
    memberships: List[MembershipSummary]


class WorkspaceSummary(BaseModel):
    id: UUID
    name: str
    type: str


class OnboardingStatusResponse(BaseModel):
    has_workspace: bool
    workspace: Optional[WorkspaceSummary] = None


class LogoutAllResponse(BaseModel):
    message: str
    revoked_count: int
