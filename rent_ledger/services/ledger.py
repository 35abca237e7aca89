"""Loading data for the rent ledger."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from rent_ledger.config import LedgerConfig
from rent_ledger.ledger.calculator import LedgerFilters, compute_due_rows, compute_ledger, summarize_month
from rent_ledger.ledger.months import normalize_month
from rent_ledger.models.rental import BillingRow, MonthSummary
from rent_ledger.store.rental import RentalRepository

logger = logging.getLogger(__name__)


class LedgerService:
    """Load tenants, rooms and payments in full and run the ledger over them."""

    def __init__(
        self,
        repository: RentalRepository,
        config: LedgerConfig | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.repository = repository
        self.config = config or LedgerConfig()
        self.clock = clock

    def ledger(self, filters: LedgerFilters | None = None, today: date | None = None) -> list[BillingRow]:
        """Billing rows for every tenant matching ``filters``."""
        today = today or self.clock()
        tenants = self.repository.tenants()
        rooms = self.repository.rooms()
        payments = self.repository.payments()
        logger.debug(
            "Loaded %d tenants, %d rooms, %d payments", len(tenants), len(rooms), len(payments)
        )
        return compute_ledger(
            tenants,
            rooms,
            payments,
            filters,
            today=today,
            policy=self.config.policy,
            due_day=self.config.due_day,
        )

    def tenant_ledger(
        self,
        tenant_id: int,
        cutoff_month: str | None = None,
        today: date | None = None,
    ) -> list[BillingRow]:
        """Billing rows for one tenant."""
        tenant = self.repository.get_tenant(tenant_id)
        return compute_due_rows(
            tenant,
            self.repository.rooms(),
            self.repository.payments(tenant_id=tenant_id),
            cutoff_month,
            today=today or self.clock(),
            policy=self.config.policy,
            due_day=self.config.due_day,
        )

    def month_summary(self, month: str, today: date | None = None) -> MonthSummary:
        """Due / paid split of active tenants for one month."""
        month = normalize_month(month)
        return summarize_month(
            self.repository.tenants(active_only=True),
            self.repository.rooms(),
            self.repository.payments(month=month),
            month,
            today=today or self.clock(),
            policy=self.config.policy,
            due_day=self.config.due_day,
        )
