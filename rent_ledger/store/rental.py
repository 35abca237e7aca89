"""Rental repository: maps table rows to domain models."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime
from enum import Enum
from typing import Any

from rent_ledger.exceptions import EntityNotFoundError, ReferentialIntegrityError
from rent_ledger.ledger.months import coerce_date
from rent_ledger.models.rental import (
    MaintenanceRequest,
    MaintenanceStatus,
    PaymentRecord,
    Room,
    Tenant,
)
from rent_ledger.store.base import (
    MAINTENANCE_REQUESTS,
    RENT_PAYMENTS,
    ROOMS,
    TENANTS,
    TableStore,
)

logger = logging.getLogger(__name__)


class RentalRepository:
    """Typed access to the four rental tables.

    Reads are full-table scans (optionally filtered by one column), matching
    how the dashboard loads its data. Values coming back from hosted backends
    as text are converted leniently; a malformed join date becomes ``None``
    so the ledger skips that tenant instead of failing.
    """

    def __init__(self, store: TableStore) -> None:
        self.store = store

    # Rooms
    def rooms(self) -> list[Room]:
        return [room_from_row(row) for row in self.store.select(ROOMS, order_by="room_number")]

    def find_room(self, room_number: str) -> Room | None:
        rows = self.store.select(ROOMS, eq={"room_number": room_number})
        return room_from_row(rows[0]) if rows else None

    def get_room(self, room_number: str) -> Room:
        """Get a room, raising ReferentialIntegrityError when it is missing."""
        room = self.find_room(room_number)
        if room is None:
            raise ReferentialIntegrityError(f"Room {room_number} not found")
        return room

    def insert_room(self, room: Room) -> Room:
        return room_from_row(self.store.insert(ROOMS, _row(room)))

    # Tenants
    def tenants(self, active_only: bool = False) -> list[Tenant]:
        eq = {"is_active": True} if active_only else None
        return [tenant_from_row(row) for row in self.store.select(TENANTS, eq=eq, order_by="id")]

    def tenants_in_room(self, room_number: str, active_only: bool = True) -> list[Tenant]:
        eq: dict[str, Any] = {"room_number": room_number}
        if active_only:
            eq["is_active"] = True
        return [tenant_from_row(row) for row in self.store.select(TENANTS, eq=eq, order_by="id")]

    def get_tenant(self, tenant_id: int) -> Tenant:
        """Get a tenant, raising EntityNotFoundError when it is missing."""
        rows = self.store.select(TENANTS, eq={"id": tenant_id})
        if not rows:
            raise EntityNotFoundError(f"Tenant {tenant_id} not found")
        return tenant_from_row(rows[0])

    def insert_tenant(self, tenant: Tenant) -> Tenant:
        return tenant_from_row(self.store.insert(TENANTS, _row(tenant)))

    # Payments
    def payments(self, month: str | None = None, tenant_id: int | None = None) -> list[PaymentRecord]:
        eq: dict[str, Any] = {}
        if month is not None:
            eq["month"] = month
        if tenant_id is not None:
            eq["tenant_id"] = tenant_id
        rows = self.store.select(RENT_PAYMENTS, eq=eq or None, order_by="id")
        return [payment_from_row(row) for row in rows]

    def find_payment(self, tenant_id: int, month: str) -> PaymentRecord | None:
        rows = self.store.select(RENT_PAYMENTS, eq={"tenant_id": tenant_id, "month": month})
        return payment_from_row(rows[0]) if rows else None

    def insert_payment(self, payment: PaymentRecord) -> PaymentRecord:
        return payment_from_row(self.store.insert(RENT_PAYMENTS, _row(payment)))

    # Maintenance
    def maintenance_requests(self, status: MaintenanceStatus | None = None) -> list[MaintenanceRequest]:
        eq = {"status": status.value} if status is not None else None
        rows = self.store.select(MAINTENANCE_REQUESTS, eq=eq, order_by="created_at", descending=True)
        return [maintenance_from_row(row) for row in rows]

    def get_maintenance_request(self, request_id: int) -> MaintenanceRequest:
        rows = self.store.select(MAINTENANCE_REQUESTS, eq={"id": request_id})
        if not rows:
            raise EntityNotFoundError(f"Maintenance request {request_id} not found")
        return maintenance_from_row(rows[0])

    def insert_maintenance_request(self, request: MaintenanceRequest) -> MaintenanceRequest:
        return maintenance_from_row(self.store.insert(MAINTENANCE_REQUESTS, _row(request)))


def room_from_row(row: dict[str, Any]) -> Room:
    return Room(
        room_number=str(row["room_number"]),
        monthly_rent=_to_int(row.get("monthly_rent")),
        capacity=_to_int(row.get("capacity")),
        occupied=_to_int(row.get("occupied")),
        id=row.get("id"),
    )


def tenant_from_row(row: dict[str, Any]) -> Tenant:
    join_date = coerce_date(row.get("join_date"))
    if join_date is None and row.get("join_date"):
        logger.warning("Tenant %s has malformed join date %r", row.get("id"), row.get("join_date"))
    return Tenant(
        name=row.get("name") or "",
        room_number=str(row.get("room_number") or ""),
        join_date=join_date,
        contact=row.get("contact") or "",
        deposit_amount=_to_int(row.get("deposit_amount")),
        is_active=_to_bool(row.get("is_active"), default=True),
        id=row.get("id"),
    )


def payment_from_row(row: dict[str, Any]) -> PaymentRecord:
    return PaymentRecord(
        tenant_id=row["tenant_id"],
        room_number=str(row.get("room_number") or ""),
        month=str(row["month"]).strip(),
        amount=_to_int(row.get("amount")),
        paid_date=coerce_date(row.get("paid_date")),
        id=row.get("id"),
    )


def maintenance_from_row(row: dict[str, Any]) -> MaintenanceRequest:
    created_at = row.get("created_at")
    if isinstance(created_at, str):
        created_at = datetime.fromisoformat(created_at)
    return MaintenanceRequest(
        room_number=str(row["room_number"]),
        issue=row.get("issue") or "",
        status=MaintenanceStatus(row.get("status") or MaintenanceStatus.OPEN.value),
        created_at=created_at,
        id=row.get("id"),
    )


def _row(model: Any) -> dict[str, Any]:
    """Convert a model to a row dict, dropping an unset id."""
    row = asdict(model)
    if row.get("id") is None:
        row.pop("id", None)
    for key, value in row.items():
        if isinstance(value, Enum):
            row[key] = value.value
    return row


def _to_int(value: Any) -> int:
    if value is None or value == "":
        return 0
    try:
        return int(float(value))
    except (TypeError, ValueError):
        logger.warning("Could not convert %r to an integer amount", value)
        return 0


_TRUE_TEXT = frozenset({"true", "t", "1", "yes", "y"})
_FALSE_TEXT = frozenset({"false", "f", "0", "no", "n"})


def _to_bool(value: Any, default: bool) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_TEXT:
            return True
        if text in _FALSE_TEXT:
            return False
        logger.warning("Could not convert %r to a boolean, using %s", value, default)
        return default
    return bool(value)
