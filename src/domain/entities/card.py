"""Card domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

DEFAULT_CARD_COLOR = "#3B82F6"


@dataclass
class Card:
    """A payment card with a monthly USD spending limit."""

    workspace_id: UUID
    name: str
    usd_limit: Decimal
    id: UUID = field(default_factory=uuid4)
    color: str = DEFAULT_CARD_COLOR
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def deactivate(self) -> None:
        self.is_active = False
        self.updated_at = datetime.utcnow()
