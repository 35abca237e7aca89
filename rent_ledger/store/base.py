"""Tabular data-provider contract shared by every storage backend."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, Protocol

from rent_ledger.exceptions import ValidationError

ROOMS = "rooms"
TENANTS = "tenants"
RENT_PAYMENTS = "rent_payments"
MAINTENANCE_REQUESTS = "maintenance_requests"

# Column order per table (id is assigned by the store)
TABLE_COLUMNS: dict[str, list[str]] = {
    ROOMS: ["id", "room_number", "monthly_rent", "capacity", "occupied"],
    TENANTS: [
        "id",
        "name",
        "contact",
        "room_number",
        "deposit_amount",
        "join_date",
        "is_active",
    ],
    RENT_PAYMENTS: ["id", "tenant_id", "room_number", "month", "amount", "paid_date"],
    MAINTENANCE_REQUESTS: ["id", "room_number", "issue", "status", "created_at"],
}

UNIQUE_KEYS: dict[str, list[tuple[str, ...]]] = {
    ROOMS: [("room_number",)],
    TENANTS: [],
    RENT_PAYMENTS: [("tenant_id", "month")],
    MAINTENANCE_REQUESTS: [],
}


def check_table(table: str) -> list[str]:
    """Return the columns of ``table``, rejecting unknown tables."""
    try:
        return TABLE_COLUMNS[table]
    except KeyError:
        raise ValidationError(f"Unknown table {table!r}") from None


def check_columns(table: str, names: Any) -> None:
    """Reject column names that ``table`` does not have."""
    columns = check_table(table)
    unknown = [name for name in names if name not in columns]
    if unknown:
        raise ValidationError(f"Unknown column(s) for {table}: {', '.join(unknown)}")


class TableStore(Protocol):
    """Four-table store reachable through request/response calls.

    Every backend offers the same operations: full-table reads optionally
    filtered by column equality and ordered by one column, row insert, row
    update by equality filter, and row delete by id. ``transaction()`` groups
    writes so they apply together or not at all.
    """

    def select(
        self,
        table: str,
        *,
        eq: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        ...

    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        ...

    def update(self, table: str, values: dict[str, Any], *, eq: dict[str, Any]) -> int:
        ...

    def delete(self, table: str, row_id: int) -> int:
        ...

    def transaction(self) -> AbstractContextManager[Any]:
        ...
