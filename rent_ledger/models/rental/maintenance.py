"""Maintenance request model."""

from dataclasses import dataclass
from datetime import datetime

from rent_ledger.models.rental.enums import MaintenanceStatus


@dataclass
class MaintenanceRequest:
    """Issue reported against a room."""

    room_number: str
    issue: str
    status: MaintenanceStatus = MaintenanceStatus.OPEN
    created_at: datetime | None = None
    id: int | None = None
