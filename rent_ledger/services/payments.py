"""Recording rent payments."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from rent_ledger.exceptions import UniqueViolationError, ValidationError
from rent_ledger.ledger.months import coerce_date, format_month, parse_month
from rent_ledger.models.rental import PaymentRecord
from rent_ledger.services.events import EventPublisher, publish
from rent_ledger.services.validation import whole_amount
from rent_ledger.store.rental import RentalRepository

logger = logging.getLogger(__name__)


class PaymentService:
    """Mark rent as paid, at most once per tenant and month."""

    def __init__(
        self,
        repository: RentalRepository,
        *,
        events: EventPublisher | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.repository = repository
        self.store = repository.store
        self.events = events
        self.clock = clock

    def mark_paid(
        self,
        tenant_id: int,
        month: str,
        *,
        amount: int | None = None,
        paid_date: date | str | None = None,
    ) -> PaymentRecord:
        """Record a payment for ``(tenant_id, month)``.

        Repeating the call for a pair that is already paid returns the
        existing record instead of creating a second one.

        Parameters
        ----------
        tenant_id : int
            Paying tenant.
        month : str
            Billing month as ``YYYY-MM``.
        amount : int | None
            Amount received; defaults to the per-person rent of the tenant's
            current room.
        paid_date : date | str | None
            Date received; defaults to today.

        Returns
        -------
        PaymentRecord
            The stored payment.
        """
        month = format_month(parse_month(month))
        paid_on = coerce_date(paid_date) if paid_date is not None else self.clock()
        if paid_on is None:
            raise ValidationError(f"Invalid paid date {paid_date!r}")

        existing = self.repository.find_payment(tenant_id, month)
        if existing is not None:
            logger.info("Tenant %s already paid for %s; keeping payment %s", tenant_id, month, existing.id)
            return existing

        tenant = self.repository.get_tenant(tenant_id)
        if amount is None:
            amount = self.repository.get_room(tenant.room_number).per_person_rent
        amount = whole_amount(amount, "Amount")

        try:
            with self.store.transaction():
                existing = self.repository.find_payment(tenant_id, month)
                if existing is not None:
                    return existing
                payment = self.repository.insert_payment(
                    PaymentRecord(
                        tenant_id=tenant_id,
                        room_number=tenant.room_number,
                        month=month,
                        amount=amount,
                        paid_date=paid_on,
                    )
                )
        except UniqueViolationError:
            # Another writer recorded the same pair between our read and insert
            existing = self.repository.find_payment(tenant_id, month)
            if existing is None:
                raise
            logger.info("Concurrent payment for tenant %s %s; keeping %s", tenant_id, month, existing.id)
            return existing

        logger.info(
            "Recorded payment %s: amount=%d",
            payment.id,
            amount,
            extra={"tenant_id": tenant_id, "month": month},
        )
        publish(
            self.events,
            "payment.recorded",
            tenant_id,
            {"month": month, "amount": amount, "room_number": tenant.room_number},
        )
        return payment

    def payments_for_month(self, month: str) -> list[PaymentRecord]:
        return self.repository.payments(month=format_month(parse_month(month)))
