"""Behavioral patterns for realistic rent payment data."""

import random
from datetime import date, timedelta

from rent_ledger.models.rental import BillingRow


class RentPaymentBehavior:
    """Simulate how tenants pay their monthly rent."""

    def __init__(self, seed: int | None = None) -> None:
        self.rng = random.Random(seed)

    def payment_dates(
        self,
        rows: list[BillingRow],
        on_time_rate: float = 0.80,
        late_rate: float = 0.15,
        reference_date: date | None = None,
    ) -> list[tuple[BillingRow, date]]:
        """Decide which billing rows get paid, and when.

        Each tenant is assigned one behavior for all of their rows: paying
        before the due date, paying some days late, or not paying at all.
        Payments that would land after ``reference_date`` are dropped.

        Parameters
        ----------
        rows : list[BillingRow]
            Rows of a single tenant, in month order.
        on_time_rate : float
            Probability of paying by the due date.
        late_rate : float
            Probability of paying 1-20 days late.
        reference_date : date | None
            Current date; nothing is paid after it.

        Returns
        -------
        list[tuple[BillingRow, date]]
            Rows to pay with the date each was paid.
        """
        if reference_date is None:
            reference_date = date.today()

        behavior = self.rng.choices(
            ["on_time", "late", "non_payer"],
            weights=[on_time_rate, late_rate, max(1.0 - on_time_rate - late_rate, 0.0)],
            k=1,
        )[0]
        if behavior == "non_payer":
            return []

        result = []
        for row in rows:
            if behavior == "on_time":
                paid_on = row.due_date - timedelta(days=self.rng.randint(0, 4))
            else:
                paid_on = row.due_date + timedelta(days=self.rng.randint(1, 20))
            if paid_on <= reference_date:
                result.append((row, paid_on))
        return result
