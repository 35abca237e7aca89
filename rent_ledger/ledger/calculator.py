"""Rent ledger computation.

Turns tenants, rooms and recorded payments into billing rows: one row per
tenant per month from the first due month up to a cutoff month. Everything
here is a pure function of its arguments; "today" is an explicit input so
results are reproducible.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date

from rent_ledger.ledger.months import (
    add_months,
    coerce_date,
    coerce_month,
    day_in_month,
    format_month,
    month_range,
    month_start,
    normalize_month,
    parse_month,
)
from rent_ledger.ledger.policy import DUE_DAY_OF_MONTH, FIRST_DUE_POLICY, FirstDuePolicy
from rent_ledger.models.rental import BillingRow, MonthSummary, PaymentRecord, Room, Tenant

logger = logging.getLogger(__name__)

RoomCatalog = Mapping[str, Room] | Iterable[Room]
PaymentIndex = dict[tuple[int | None, str], PaymentRecord]


@dataclass(frozen=True)
class LedgerFilters:
    """Optional filters for a bulk ledger computation."""

    tenant_id: int | None = None
    room_number: str | None = None
    month: str | None = None  # Keep only rows for this YYYY-MM
    cutoff_month: str | None = None
    active_only: bool = False

    def matches(self, tenant: Tenant) -> bool:
        """Check whether a tenant passes the tenant-level filters."""
        if self.tenant_id is not None and tenant.id != self.tenant_id:
            return False
        if self.room_number is not None and tenant.room_number != self.room_number:
            return False
        if self.active_only and not tenant.is_active:
            return False
        return True


def first_due_month(join_date: date, policy: FirstDuePolicy = FIRST_DUE_POLICY) -> date:
    """First month for which rent is owed under ``policy``."""
    if policy == FirstDuePolicy.JOIN_MONTH:
        return month_start(join_date)
    return add_months(join_date, 1)


def index_rooms(rooms: RoomCatalog) -> dict[str, Room]:
    """Key rooms by room number."""
    if isinstance(rooms, Mapping):
        return dict(rooms)
    return {room.room_number: room for room in rooms}


def index_payments(payments: Iterable[PaymentRecord]) -> PaymentIndex:
    """Key payments by ``(tenant_id, month)``; the first record of a pair wins."""
    index: PaymentIndex = {}
    for payment in payments:
        index.setdefault((payment.tenant_id, payment.month), payment)
    return index


def compute_due_rows(
    tenant: Tenant,
    rooms: RoomCatalog,
    payments: Iterable[PaymentRecord] | PaymentIndex,
    cutoff_month: str | date | None = None,
    *,
    today: date | None = None,
    policy: FirstDuePolicy = FIRST_DUE_POLICY,
    due_day: int = DUE_DAY_OF_MONTH,
) -> list[BillingRow]:
    """Compute the billing rows owed by one tenant.

    Parameters
    ----------
    tenant : Tenant
        Tenant to bill. Without a usable ``join_date`` no rows are produced.
    rooms : Mapping[str, Room] | Iterable[Room]
        Current room records. A tenant whose room is missing produces no rows.
    payments : Iterable[PaymentRecord] | dict
        Recorded payments, or an index built by :func:`index_payments`.
    cutoff_month : str | date | None
        Last month to bill (``YYYY-MM`` or a date); defaults to the month of
        ``today``.
    today : date | None
        Reference date for overdue calculation; defaults to ``date.today()``.
    policy : FirstDuePolicy
        Whether billing starts in the join month or the following month.
    due_day : int
        Day of month rent falls due (clamped to short months).

    Returns
    -------
    list[BillingRow]
        Rows in chronological month order.
    """
    today = today or date.today()

    join_date = coerce_date(tenant.join_date)
    if join_date is None:
        logger.debug("Tenant %s has no usable join date; skipping", tenant.id)
        return []

    room = index_rooms(rooms).get(tenant.room_number)
    if room is None:
        logger.warning("Tenant %s references unknown room %s", tenant.id, tenant.room_number)
        return []

    if not isinstance(payments, dict):
        payments = index_payments(payments)

    cutoff = coerce_month(cutoff_month, today)
    rows = []
    for month in month_range(first_due_month(join_date, policy), cutoff):
        key = format_month(month)
        payment = payments.get((tenant.id, key))
        due_date = day_in_month(month, due_day)
        days_overdue = 0
        if payment is None and today > due_date:
            days_overdue = (today - due_date).days
        rows.append(
            BillingRow(
                tenant=tenant,
                month=key,
                due_amount=room.per_person_rent,
                due_date=due_date,
                payment=payment,
                days_overdue=days_overdue,
            )
        )
    return rows


def compute_ledger(
    tenants: Iterable[Tenant],
    rooms: RoomCatalog,
    payments: Iterable[PaymentRecord],
    filters: LedgerFilters | None = None,
    *,
    today: date | None = None,
    policy: FirstDuePolicy = FIRST_DUE_POLICY,
    due_day: int = DUE_DAY_OF_MONTH,
) -> list[BillingRow]:
    """Compute billing rows for every tenant matching ``filters``.

    Rows are concatenated in tenant-iteration order, then month order. No
    global sort is applied.

    When ``filters.month`` is set without an explicit cutoff, that month
    becomes the cutoff so future months can be inspected.
    """
    filters = filters or LedgerFilters()
    today = today or date.today()
    room_index = index_rooms(rooms)
    payment_index = index_payments(payments)

    month_key = normalize_month(filters.month) if filters.month is not None else None
    cutoff: str | date | None = filters.cutoff_month
    if cutoff is None and month_key is not None:
        cutoff = parse_month(month_key)

    rows: list[BillingRow] = []
    for tenant in tenants:
        if not filters.matches(tenant):
            continue
        tenant_rows = compute_due_rows(
            tenant,
            room_index,
            payment_index,
            cutoff,
            today=today,
            policy=policy,
            due_day=due_day,
        )
        if month_key is not None:
            tenant_rows = [row for row in tenant_rows if row.month == month_key]
        rows.extend(tenant_rows)

    logger.debug("Computed %d billing rows", len(rows))
    return rows


def summarize_month(
    tenants: Iterable[Tenant],
    rooms: RoomCatalog,
    payments: Iterable[PaymentRecord],
    month: str,
    *,
    today: date | None = None,
    policy: FirstDuePolicy = FIRST_DUE_POLICY,
    due_day: int = DUE_DAY_OF_MONTH,
) -> MonthSummary:
    """Split the active tenants billed for ``month`` into due and paid."""
    month = normalize_month(month)
    rows = compute_ledger(
        tenants,
        rooms,
        payments,
        LedgerFilters(month=month, active_only=True),
        today=today,
        policy=policy,
        due_day=due_day,
    )
    return MonthSummary(
        month=month,
        due=[row for row in rows if not row.is_paid],
        paid=[row for row in rows if row.is_paid],
    )
