"""Invitation domain entity."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from enum import StrEnum
from uuid import UUID, uuid4


class InvitationStatus(StrEnum):
    """Status of a workspace invitation."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


# Default invitation expiry: 7 days
INVITATION_EXPIRY_DAYS = 7


@dataclass
class Invitation:
    """Domain entity for a partner invitation.

    ``PENDING`` is the only non-terminal status. An invitation whose expiry
    has passed while still pending is treated as expired on the next read
    (see ``expire_if_stale``).
    """

    workspace_id: UUID
    email: str
    token_hash: str
    invited_by_id: UUID
    id: UUID = field(default_factory=uuid4)
    profit_split: Decimal = Decimal("0")
    invited_user_id: UUID | None = None
    status: InvitationStatus = InvitationStatus.PENDING
    created_at: datetime = field(default_factory=datetime.utcnow)
    expires_at: datetime = field(
        default_factory=lambda: datetime.utcnow() + timedelta(days=INVITATION_EXPIRY_DAYS)
    )
    accepted_at: datetime | None = None

    def __post_init__(self) -> None:
        self.email = self.email.strip().lower()

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check if the invitation's expiry instant has passed."""
        return (now or datetime.utcnow()) > self.expires_at

    @property
    def is_terminal(self) -> bool:
        return self.status != InvitationStatus.PENDING

    def expire_if_stale(self, now: datetime | None = None) -> bool:
        """Apply lazy expiry. Returns True if the status changed."""
        if self.status == InvitationStatus.PENDING and self.is_expired(now):
            self.status = InvitationStatus.EXPIRED
            return True
        return False

    def accept(self, user_id: UUID) -> None:
        """Mark the invitation as accepted by ``user_id``."""
        self._require_pending()
        self.status = InvitationStatus.ACCEPTED
        self.invited_user_id = user_id
        self.accepted_at = datetime.utcnow()

    def cancel(self) -> None:
        """Mark the invitation as cancelled."""
        self._require_pending()
        self.status = InvitationStatus.CANCELLED

    def _require_pending(self) -> None:
        if self.is_terminal:
            raise ValueError(f"Invitation is already {self.status}")
