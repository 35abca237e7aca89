"""Domain event publishing."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Protocol

from rent_ledger.models import Event

logger = logging.getLogger(__name__)

EVENT_SOURCE = "rent-ledger"


class EventSink(Protocol):
    def send(self, topic: str, record: Any, key: str | None = None) -> None:
        ...


class EventPublisher:
    """Wrap domain changes in :class:`Event` envelopes and send them to a sink.

    Topics are ``<prefix>.<entity>`` where the entity is the part of the
    event type before the dot (``payment.recorded`` goes to
    ``rentals.payment``). Events are keyed by subject so all events for one
    entity land on the same partition.
    """

    def __init__(
        self,
        sink: EventSink,
        topic_prefix: str = "rentals",
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.sink = sink
        self.topic_prefix = topic_prefix
        self.clock = clock

    def publish(self, event_type: str, subject: Any, data: dict[str, Any]) -> Event:
        """Build and send one event."""
        event = Event(
            event_id=uuid.uuid4().hex,
            event_type=event_type,
            occurred_at=self.clock(),
            source=EVENT_SOURCE,
            subject=str(subject),
            data=data,
        )
        self.sink.send(f"{self.topic_prefix}.{event.entity}", event, key=event.subject)
        logger.debug("Published event for %s", event.subject, extra={"event_type": event_type})
        return event


def publish(events: EventPublisher | None, event_type: str, subject: Any, data: dict[str, Any]) -> None:
    """Publish through ``events`` when a publisher is configured."""
    if events is not None:
        events.publish(event_type, subject, data)
