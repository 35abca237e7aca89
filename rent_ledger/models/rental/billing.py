"""Derived billing models. Never persisted."""

from dataclasses import dataclass, field
from datetime import date

from rent_ledger.models.rental.enums import BillingStatus
from rent_ledger.models.rental.payment import PaymentRecord
from rent_ledger.models.rental.tenant import Tenant


@dataclass(frozen=True)
class BillingRow:
    """Rent owed by one tenant for one month."""

    tenant: Tenant
    month: str  # YYYY-MM
    due_amount: int
    due_date: date
    payment: PaymentRecord | None
    days_overdue: int = 0

    @property
    def status(self) -> BillingStatus:
        if self.payment is not None:
            return BillingStatus.PAID
        if self.days_overdue > 0:
            return BillingStatus.OVERDUE
        return BillingStatus.PENDING

    @property
    def is_paid(self) -> bool:
        return self.payment is not None

    def to_record(self) -> dict:
        """Flatten into a single-level dict for export."""
        return {
            "tenant_id": self.tenant.id,
            "tenant_name": self.tenant.name,
            "room_number": self.tenant.room_number,
            "month": self.month,
            "due_amount": self.due_amount,
            "due_date": self.due_date,
            "status": self.status.value,
            "paid_amount": self.payment.amount if self.payment else None,
            "paid_date": self.payment.paid_date if self.payment else None,
            "days_overdue": self.days_overdue,
        }


@dataclass(frozen=True)
class MonthSummary:
    """Active tenants of one month split into those who paid and those who owe."""

    month: str
    due: list[BillingRow] = field(default_factory=list)
    paid: list[BillingRow] = field(default_factory=list)

    @property
    def expected(self) -> int:
        return sum(row.due_amount for row in self.due) + sum(row.due_amount for row in self.paid)

    @property
    def collected(self) -> int:
        return sum(row.payment.amount for row in self.paid if row.payment is not None)

    @property
    def outstanding(self) -> int:
        return sum(row.due_amount for row in self.due)
