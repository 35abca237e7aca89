"""Rent payment model."""

from dataclasses import dataclass
from datetime import date


@dataclass
class PaymentRecord:
    """Rent received from one tenant for one billing month."""

    tenant_id: int
    room_number: str
    month: str  # YYYY-MM
    amount: int
    paid_date: date
    id: int | None = None
