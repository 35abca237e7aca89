"""Maintenance request tracking."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from rent_ledger.models.rental import MaintenanceRequest, MaintenanceStatus
from rent_ledger.services.events import EventPublisher, publish
from rent_ledger.services.validation import require_text
from rent_ledger.store.base import MAINTENANCE_REQUESTS
from rent_ledger.store.rental import RentalRepository

logger = logging.getLogger(__name__)


class MaintenanceService:
    """Submit and resolve maintenance requests."""

    def __init__(
        self,
        repository: RentalRepository,
        *,
        events: EventPublisher | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.repository = repository
        self.store = repository.store
        self.events = events
        self.clock = clock

    def submit(self, room_number: str, issue: str) -> MaintenanceRequest:
        """Open a request against an existing room."""
        room_number = require_text(room_number, "Room number")
        issue = require_text(issue, "Issue description")
        self.repository.get_room(room_number)

        request = self.repository.insert_maintenance_request(
            MaintenanceRequest(room_number=room_number, issue=issue, created_at=self.clock())
        )
        logger.info("Maintenance request %s opened for room %s", request.id, room_number)
        publish(self.events, "maintenance.submitted", request.id, {"room_number": room_number, "issue": issue})
        return request

    def resolve(self, request_id: int) -> MaintenanceRequest:
        """Mark a request resolved. Resolving twice is a no-op."""
        request = self.repository.get_maintenance_request(request_id)
        if request.status == MaintenanceStatus.RESOLVED:
            return request

        self.store.update(
            MAINTENANCE_REQUESTS,
            {"status": MaintenanceStatus.RESOLVED.value},
            eq={"id": request_id},
        )
        request.status = MaintenanceStatus.RESOLVED
        logger.info("Maintenance request %s resolved", request_id)
        publish(self.events, "maintenance.resolved", request_id, {"room_number": request.room_number})
        return request

    def list_requests(self, status: MaintenanceStatus | None = None) -> list[MaintenanceRequest]:
        """List requests, newest first."""
        return self.repository.maintenance_requests(status)
