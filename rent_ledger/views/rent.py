"""Rent page view model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from rent_ledger.models.rental import BillingRow
from rent_ledger.services.ledger import LedgerService
from rent_ledger.views.state import RentViewState, to_filters


@dataclass(frozen=True)
class RentView:
    """Rows shown on the rent page for one state."""

    state: RentViewState
    rows: tuple[BillingRow, ...]

    @property
    def due(self) -> tuple[BillingRow, ...]:
        return tuple(row for row in self.rows if not row.is_paid)

    @property
    def paid(self) -> tuple[BillingRow, ...]:
        return tuple(row for row in self.rows if row.is_paid)

    @property
    def visible(self) -> tuple[BillingRow, ...]:
        if self.state.show == "due":
            return self.due
        if self.state.show == "paid":
            return self.paid
        return self.rows


def build_rent_view(ledger: LedgerService, state: RentViewState, today: date | None = None) -> RentView:
    """Reload the ledger for ``state`` and wrap it for display."""
    rows = ledger.ledger(to_filters(state), today=today)
    return RentView(state=state, rows=tuple(rows))
