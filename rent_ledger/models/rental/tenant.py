"""Tenant model."""

from dataclasses import dataclass
from datetime import date


@dataclass
class Tenant:
    """Person leasing a bed in a room.

    Tenants are never physically deleted: removal flips ``is_active`` and a
    later reactivation assigns a new room and join date.
    """

    name: str
    room_number: str
    join_date: date | None
    contact: str = ""
    deposit_amount: int = 0
    is_active: bool = True
    id: int | None = None
