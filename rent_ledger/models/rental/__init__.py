"""Rental domain models."""

from rent_ledger.models.rental.billing import BillingRow, MonthSummary
from rent_ledger.models.rental.enums import BillingStatus, MaintenanceStatus
from rent_ledger.models.rental.maintenance import MaintenanceRequest
from rent_ledger.models.rental.payment import PaymentRecord
from rent_ledger.models.rental.room import Room
from rent_ledger.models.rental.tenant import Tenant

__all__ = [
    "BillingRow",
    "BillingStatus",
    "MaintenanceRequest",
    "MaintenanceStatus",
    "MonthSummary",
    "PaymentRecord",
    "Room",
    "Tenant",
]
