"""Event envelope for domain changes."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class Event:
    """One change to a room, tenant, payment or maintenance request."""

    event_id: str
    event_type: str  # entity.action (e.g., payment.recorded)
    occurred_at: datetime
    source: str
    subject: str  # Id or room number of the changed entity
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def entity(self) -> str:
        """Entity part of the event type (``payment`` for ``payment.recorded``)."""
        return self.event_type.split(".", 1)[0]
