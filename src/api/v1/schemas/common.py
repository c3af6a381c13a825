"""Common Pydantic schemas shared across the API."""

from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, PlainSerializer

# Amounts are kept as Decimal internally and rendered as JSON numbers.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class ErrorResponse(BaseModel):
    """Standardized error response."""

    error_code: str
    message: str
    details: Any | None = None


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


def normalize_email(value: str) -> str:
    """Basic email validation; returns the trimmed, lower-cased address."""
    value = value.strip().lower()
    if "@" not in value or "." not in value.split("@")[-1]:
        raise ValueError("Invalid email address")
    return value
