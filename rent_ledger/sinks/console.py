"""Console sink for quick reports.

Billing rows print as a fixed-width rent table; month summaries print their
totals above that table. Everything else is printed as JSON, one record per
line unless ``pretty`` is set.
"""

import json
from typing import Any

from rent_ledger.models.rental import BillingRow, MonthSummary
from rent_ledger.sinks.serialization import to_dict

ROW_FORMAT = "{room:<6} {tenant:<22} {month:<7} {due:>8} {status:<8} {paid_on:<10} {overdue:>4}"


def format_billing_row(row: BillingRow) -> str:
    """Render one billing row as a table line."""
    return ROW_FORMAT.format(
        room=row.tenant.room_number,
        tenant=row.tenant.name[:22],
        month=row.month,
        due=row.due_amount,
        status=row.status.value,
        paid_on=row.payment.paid_date.isoformat() if row.payment else "-",
        overdue=row.days_overdue or "",
    )


class ConsoleSink:
    """Output records to stdout."""

    def __init__(self, pretty: bool = True, max_records: int | None = None) -> None:
        """
        Parameters
        ----------
        pretty : bool
            Indent JSON output.
        max_records : int | None
            Maximum records to print per batch (None for all).
        """
        self.pretty = pretty
        self.max_records = max_records
        self._counts: dict[str, int] = {}

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Print a titled batch of records."""
        print(f"\n== {entity_type} ({len(records)} records) ==")

        shown = records[: self.max_records] if self.max_records else records
        if shown and all(isinstance(record, BillingRow) for record in shown):
            self._print_table(shown)
        else:
            for record in shown:
                if isinstance(record, MonthSummary):
                    self._print_summary(record)
                else:
                    self._print_json(record)

        hidden = len(records) - len(shown)
        if hidden:
            print(f"... and {hidden} more records")

        self._counts[entity_type] = self._counts.get(entity_type, 0) + len(records)

    def send(self, topic: str, record: Any, key: str | None = None) -> None:
        """Print a single event."""
        print(f"[{topic}] key={key}")
        self._print_json(record)
        self._counts[topic] = self._counts.get(topic, 0) + 1

    def close(self) -> None:
        """Print per-batch record counts."""
        print("\n== totals ==")
        for entity_type, count in self._counts.items():
            print(f"  {entity_type}: {count} records")

    def _print_table(self, rows: list[BillingRow]) -> None:
        print(
            ROW_FORMAT.format(
                room="ROOM", tenant="TENANT", month="MONTH", due="DUE", status="STATUS", paid_on="PAID ON", overdue="LATE"
            )
        )
        for row in rows:
            print(format_billing_row(row))

    def _print_summary(self, summary: MonthSummary) -> None:
        print(
            f"{summary.month}: expected={summary.expected} collected={summary.collected} "
            f"outstanding={summary.outstanding}"
        )
        for title, rows in (("due", summary.due), ("paid", summary.paid)):
            print(f"-- {title} ({len(rows)}) --")
            if rows:
                self._print_table(rows)

    def _print_json(self, record: Any) -> None:
        indent = 2 if self.pretty else None
        print(json.dumps(to_dict(record), indent=indent, ensure_ascii=False, default=str))
