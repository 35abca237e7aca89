#!/usr/bin/env python3
"""Print or export the rent ledger.

Reports:
- ledger: billing rows per tenant and month (optionally filtered)
- summary: due / paid split of active tenants for one month
- dashboard: headline occupancy, payment and maintenance counters

The store comes from the environment (STORE_BACKEND, POSTGRES_*). With the
in-memory backend, --demo-rooms populates it with a generated boarding house
first so there is something to report on.
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from rent_ledger.config import RentLedgerConfig
from rent_ledger.exceptions import RentLedgerError
from rent_ledger.ledger.calculator import LedgerFilters
from rent_ledger.ledger.months import format_month
from rent_ledger.logging import setup_logging
from rent_ledger.scenarios import BoardingHouseScenario
from rent_ledger.services import DashboardService, EventPublisher, LedgerService
from rent_ledger.sinks import ConsoleSink, JsonFileSink, KafkaSink
from rent_ledger.store.factory import create_store
from rent_ledger.store.rental import RentalRepository

logger = logging.getLogger(__name__)


def build_sink(kind: str, config: RentLedgerConfig):
    """Create the output sink named on the command line."""
    if kind == "json":
        return JsonFileSink(config.output.json_output_dir, pretty=config.output.pretty_json)
    if kind == "kafka":
        return KafkaSink(config.kafka)
    return ConsoleSink(pretty=False)


def run(args: argparse.Namespace, config: RentLedgerConfig) -> None:
    """Run the selected report."""
    today = date.fromisoformat(args.today) if args.today else date.today()
    store = create_store(config)
    sink = build_sink(args.sink, config)

    if args.demo_rooms:
        events = EventPublisher(sink, config.kafka.topic_prefix) if config.kafka.enabled else None
        scenario = BoardingHouseScenario(
            num_rooms=args.demo_rooms,
            seed=config.seed,
            today=today,
            store=store,
            config=config.ledger,
            events=events,
        )
        repository = scenario.generate()
        logger.info("Demo data: %s", scenario.get_summary())
    else:
        repository = RentalRepository(store)

    if args.report == "dashboard":
        summary = DashboardService(repository, config.ledger).summary(today)
        sink.write_batch("dashboard", [summary])
    elif args.report == "summary":
        month = args.month or format_month(today)
        result = LedgerService(repository, config.ledger).month_summary(month, today)
        sink.write_batch(f"summary_{month}", [result])
        logger.info(
            "%s: expected=%d collected=%d outstanding=%d",
            month,
            result.expected,
            result.collected,
            result.outstanding,
        )
    else:
        filters = LedgerFilters(
            tenant_id=args.tenant_id,
            room_number=args.room,
            month=args.month,
            active_only=args.active_only,
        )
        rows = LedgerService(repository, config.ledger).ledger(filters, today)
        sink.write_batch("billing_rows", rows)

    sink.close()


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Rent ledger reports")
    parser.add_argument(
        "report",
        choices=["ledger", "summary", "dashboard"],
        nargs="?",
        default="ledger",
        help="Report to produce (default: ledger)",
    )
    parser.add_argument("--month", type=str, default=None, help="Billing month, YYYY-MM")
    parser.add_argument("--tenant-id", type=int, default=None, help="Only this tenant")
    parser.add_argument("--room", type=str, default=None, help="Only tenants of this room")
    parser.add_argument(
        "--active-only",
        action="store_true",
        help="Skip archived tenants",
    )
    parser.add_argument(
        "--today",
        type=str,
        default=None,
        help="Reference date YYYY-MM-DD for overdue calculation (default: today)",
    )
    parser.add_argument(
        "--demo-rooms",
        type=int,
        default=0,
        help="Generate a demo boarding house with this many rooms first",
    )
    parser.add_argument(
        "--sink",
        choices=["console", "json", "kafka"],
        default="console",
        help="Where to write the report (default: console)",
    )

    args = parser.parse_args()

    try:
        config = RentLedgerConfig.from_env()
    except RentLedgerError as e:
        parser.error(str(e))

    setup_logging(config.log_level, config.log_format)

    try:
        run(args, config)
    except RentLedgerError as e:
        logger.error("%s: %s", type(e).__name__, e)
        sys.exit(1)


if __name__ == "__main__":
    main()
