"""Workspace domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from uuid import UUID, uuid4

DEFAULT_BUY_RATE = Decimal("15.42")
DEFAULT_SELL_RATE = Decimal("15.50")
DEFAULT_CURRENCY = "MVR"


class WorkspaceType(StrEnum):
    """Business shape of a workspace."""

    SOLE_TRADER = "SOLE_TRADER"
    PARTNERSHIP = "PARTNERSHIP"


class WorkspaceRole(StrEnum):
    """Role a member holds inside a workspace.

    Roles are compared by set membership only; there is no ordering.
    """

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class Theme(StrEnum):
    """UI theme preference stored with workspace settings."""

    LIGHT = "LIGHT"
    DARK = "DARK"
    SYSTEM = "SYSTEM"


@dataclass
class Workspace:
    """Domain entity for a Workspace."""

    name: str
    id: UUID = field(default_factory=uuid4)
    type: WorkspaceType = WorkspaceType.SOLE_TRADER
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    def promote_to_partnership(self) -> bool:
        """Move a sole-trader workspace to a partnership.

        The transition is one-way. Returns True if the type changed.
        """
        if self.type == WorkspaceType.PARTNERSHIP:
            return False
        self.type = WorkspaceType.PARTNERSHIP
        self.updated_at = datetime.utcnow()
        return True


@dataclass
class WorkspaceMember:
    """Domain entity for a workspace membership."""

    workspace_id: UUID
    user_id: UUID
    id: UUID = field(default_factory=uuid4)
    role: WorkspaceRole = WorkspaceRole.MEMBER
    is_owner: bool = False
    profit_split: Decimal = Decimal("0")
    joined_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class WorkspaceSettings:
    """Per-workspace defaults used when recording transactions."""

    workspace_id: UUID
    id: UUID = field(default_factory=uuid4)
    default_buy_rate: Decimal = DEFAULT_BUY_RATE
    default_sell_rate: Decimal = DEFAULT_SELL_RATE
    theme: Theme = Theme.SYSTEM
    currency: str = DEFAULT_CURRENCY
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
