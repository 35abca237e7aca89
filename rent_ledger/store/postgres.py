"""PostgreSQL table store backed by psycopg 3."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg import sql
from psycopg.rows import dict_row

from rent_ledger.exceptions import StoreError, UniqueViolationError, ValidationError
from rent_ledger.store.base import TABLE_COLUMNS, check_columns, check_table

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS rooms (
    id SERIAL PRIMARY KEY,
    room_number TEXT NOT NULL UNIQUE,
    monthly_rent INTEGER NOT NULL CHECK (monthly_rent >= 0),
    capacity INTEGER NOT NULL CHECK (capacity > 0),
    occupied INTEGER NOT NULL DEFAULT 0 CHECK (occupied >= 0)
);

CREATE TABLE IF NOT EXISTS tenants (
    id SERIAL PRIMARY KEY,
    name TEXT NOT NULL,
    contact TEXT NOT NULL DEFAULT '',
    room_number TEXT NOT NULL,
    deposit_amount INTEGER NOT NULL DEFAULT 0,
    join_date DATE,
    is_active BOOLEAN NOT NULL DEFAULT TRUE
);

CREATE TABLE IF NOT EXISTS rent_payments (
    id SERIAL PRIMARY KEY,
    tenant_id INTEGER NOT NULL REFERENCES tenants (id),
    room_number TEXT NOT NULL,
    month CHAR(7) NOT NULL,
    amount INTEGER NOT NULL DEFAULT 0,
    paid_date DATE NOT NULL,
    UNIQUE (tenant_id, month)
);

CREATE TABLE IF NOT EXISTS maintenance_requests (
    id SERIAL PRIMARY KEY,
    room_number TEXT NOT NULL,
    issue TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'Open',
    created_at TIMESTAMP NOT NULL DEFAULT now()
);
"""


class PostgresTableStore:
    """Table store contract over a PostgreSQL database.

    Single statements run in autocommit mode; ``transaction()`` opens a real
    transaction (or a savepoint when nested) so grouped writes commit
    together.

    All callers share one connection, so a transaction holds the store lock
    until it ends. Other threads wait for it, for their own transactions and
    for single statements alike, and never join it.
    """

    def __init__(self, connection_string: str) -> None:
        """Connect to PostgreSQL.

        Parameters
        ----------
        connection_string : str
            libpq connection string or URL.
        """
        try:
            self.conn = psycopg.connect(connection_string, autocommit=True, row_factory=dict_row)
        except psycopg.Error as exc:
            raise StoreError(f"Could not connect to PostgreSQL: {exc}") from exc
        self._lock = threading.RLock()
        logger.info("Connected to PostgreSQL")

    def create_schema(self) -> None:
        """Create the four tables if they do not exist."""
        self._execute(sql.SQL(SCHEMA_SQL))
        logger.info("Schema ready: %s", ", ".join(TABLE_COLUMNS))

    def select(
        self,
        table: str,
        *,
        eq: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        """Read rows matching every ``eq`` column, optionally ordered."""
        columns = check_table(table)
        query = sql.SQL("SELECT {} FROM {}").format(
            sql.SQL(", ").join(map(sql.Identifier, columns)),
            sql.Identifier(table),
        )
        params: list[Any] = []
        if eq:
            check_columns(table, eq)
            query += sql.SQL(" WHERE ") + _where(eq)
            params.extend(eq.values())
        if order_by is not None:
            check_columns(table, [order_by])
            direction = sql.SQL("DESC NULLS LAST" if descending else "ASC NULLS LAST")
            query += sql.SQL(" ORDER BY {} ").format(sql.Identifier(order_by)) + direction
        return self._execute(query, params, fetch=True)

    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """Insert a row and return it with its assigned id."""
        columns = check_table(table)
        check_columns(table, row)
        names = [name for name in row if name != "id"]
        query = sql.SQL("INSERT INTO {} ({}) VALUES ({}) RETURNING {}").format(
            sql.Identifier(table),
            sql.SQL(", ").join(map(sql.Identifier, names)),
            sql.SQL(", ").join(sql.Placeholder() * len(names)),
            sql.SQL(", ").join(map(sql.Identifier, columns)),
        )
        rows = self._execute(query, [row[name] for name in names], fetch=True)
        return rows[0]

    def update(self, table: str, values: dict[str, Any], *, eq: dict[str, Any]) -> int:
        """Apply ``values`` to every row matching ``eq``; return the row count."""
        if not eq:
            raise ValidationError("Update requires at least one filter column")
        if not values:
            return 0
        check_columns(table, values)
        check_columns(table, eq)
        if "id" in values:
            raise ValidationError("Row ids cannot be updated")
        query = sql.SQL("UPDATE {} SET {} WHERE ").format(
            sql.Identifier(table),
            sql.SQL(", ").join(
                sql.SQL("{} = %s").format(sql.Identifier(name)) for name in values
            ),
        ) + _where(eq)
        return self._execute(query, [*values.values(), *eq.values()])

    def delete(self, table: str, row_id: int) -> int:
        """Delete a row by id; return 1 if it existed, 0 otherwise."""
        check_table(table)
        query = sql.SQL("DELETE FROM {} WHERE id = %s").format(sql.Identifier(table))
        return self._execute(query, [row_id])

    @contextmanager
    def transaction(self) -> Iterator["PostgresTableStore"]:
        """Apply every write in the block atomically."""
        try:
            with self._lock, self.conn.transaction():
                yield self
        except psycopg.errors.UniqueViolation as exc:
            raise UniqueViolationError(str(exc)) from exc
        except psycopg.Error as exc:
            raise StoreError(f"Transaction failed: {exc}") from exc

    def close(self) -> None:
        """Close the connection."""
        with self._lock:
            self.conn.close()
        logger.info("PostgreSQL connection closed")

    def _execute(self, query: sql.Composable, params: list[Any] | None = None, fetch: bool = False) -> Any:
        try:
            with self._lock, self.conn.cursor() as cur:
                cur.execute(query, params or None)
                if fetch:
                    return cur.fetchall()
                return cur.rowcount
        except psycopg.errors.UniqueViolation as exc:
            raise UniqueViolationError(str(exc)) from exc
        except psycopg.Error as exc:
            raise StoreError(f"Query failed: {exc}") from exc


def _where(eq: dict[str, Any]) -> sql.Composed:
    return sql.SQL(" AND ").join(
        sql.SQL("{} = %s").format(sql.Identifier(name)) for name in eq
    )
