"""Headline counters for the dashboard home page."""

from __future__ import annotations

from datetime import date
from typing import Callable

from rent_ledger.config import LedgerConfig
from rent_ledger.ledger.calculator import LedgerFilters, compute_ledger
from rent_ledger.ledger.months import format_month
from rent_ledger.models.rental import BillingStatus, MaintenanceStatus
from rent_ledger.services.occupancy import derive_occupancy
from rent_ledger.store.rental import RentalRepository


class DashboardService:
    """Aggregate counts across rooms, tenants, payments and maintenance."""

    def __init__(
        self,
        repository: RentalRepository,
        config: LedgerConfig | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.repository = repository
        self.config = config or LedgerConfig()
        self.clock = clock

    def summary(self, today: date | None = None) -> dict[str, int]:
        """Return headline counts as of ``today``.

        The ``*_this_month`` keys cover only the month containing ``today``;
        ``overdue_rows_all_months`` counts unpaid overdue rows of active
        tenants across every billed month. Occupancy is derived from active
        tenant rows rather than read from the stored room counters.
        """
        today = today or self.clock()
        rooms = self.repository.rooms()
        tenants = self.repository.tenants()
        active = [tenant for tenant in tenants if tenant.is_active]
        occupancy = derive_occupancy(active)
        month = format_month(today)

        rows = compute_ledger(
            tenants,
            rooms,
            self.repository.payments(),
            LedgerFilters(active_only=True),
            today=today,
            policy=self.config.policy,
            due_day=self.config.due_day,
        )
        current = [row for row in rows if row.month == month]

        beds = sum(room.capacity for room in rooms)
        occupied = sum(occupancy.get(room.room_number, 0) for room in rooms)
        return {
            "rooms": len(rooms),
            "beds": beds,
            "occupied": occupied,
            "vacancies": max(beds - occupied, 0),
            "active_tenants": len(active),
            "archived_tenants": len(tenants) - len(active),
            "open_maintenance": len(self.repository.maintenance_requests(MaintenanceStatus.OPEN)),
            "due_this_month": sum(1 for row in current if not row.is_paid),
            "paid_this_month": sum(1 for row in current if row.is_paid),
            "overdue_rows_all_months": sum(1 for row in rows if row.status == BillingStatus.OVERDUE),
            "collected_this_month": sum(row.payment.amount for row in current if row.payment),
        }
