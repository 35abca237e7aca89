"""Table stores and the rental repository built on them."""

from rent_ledger.store.base import (
    MAINTENANCE_REQUESTS,
    RENT_PAYMENTS,
    ROOMS,
    TABLE_COLUMNS,
    TENANTS,
    TableStore,
)
from rent_ledger.store.memory import InMemoryTableStore
from rent_ledger.store.rental import RentalRepository

__all__ = [
    "InMemoryTableStore",
    "MAINTENANCE_REQUESTS",
    "RENT_PAYMENTS",
    "ROOMS",
    "RentalRepository",
    "TABLE_COLUMNS",
    "TENANTS",
    "TableStore",
]
