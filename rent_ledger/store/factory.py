"""Build the configured table store."""

import logging

from rent_ledger.config import RentLedgerConfig
from rent_ledger.store.base import TableStore
from rent_ledger.store.memory import InMemoryTableStore

logger = logging.getLogger(__name__)


def create_store(config: RentLedgerConfig) -> TableStore:
    """Create the table store selected by ``config.store_backend``.

    The PostgreSQL backend is imported lazily so the in-memory backend works
    without a database driver loaded.
    """
    if config.store_backend == "postgres":
        from rent_ledger.store.postgres import PostgresTableStore

        store = PostgresTableStore(config.postgres.connection_string)
        store.create_schema()
        return store

    logger.info("Using in-memory table store")
    return InMemoryTableStore()
