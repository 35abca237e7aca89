"""Services that read and mutate rental data through a repository."""

from rent_ledger.services.dashboard import DashboardService
from rent_ledger.services.events import EventPublisher
from rent_ledger.services.ledger import LedgerService
from rent_ledger.services.maintenance import MaintenanceService
from rent_ledger.services.occupancy import OccupancyService, RoomLocks, derive_occupancy
from rent_ledger.services.payments import PaymentService
from rent_ledger.services.rooms import RoomService

__all__ = [
    "DashboardService",
    "EventPublisher",
    "LedgerService",
    "MaintenanceService",
    "OccupancyService",
    "PaymentService",
    "RoomLocks",
    "RoomService",
    "derive_occupancy",
]
