"""In-process table store."""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from rent_ledger.exceptions import UniqueViolationError, ValidationError
from rent_ledger.store.base import TABLE_COLUMNS, UNIQUE_KEYS, check_columns, check_table

logger = logging.getLogger(__name__)


@dataclass
class InMemoryTableStore:
    """Dict-backed implementation of the table store contract.

    Rows are plain dicts keyed by a serial integer id per table. Unique keys
    are enforced on insert and update. Transactions snapshot every table on
    entry to the outermost block and restore the snapshot if the block raises.
    """

    tables: dict[str, dict[int, dict[str, Any]]] = field(
        default_factory=lambda: {name: {} for name in TABLE_COLUMNS}
    )
    _next_ids: dict[str, int] = field(default_factory=lambda: {name: 1 for name in TABLE_COLUMNS})
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _depth: int = 0

    def select(
        self,
        table: str,
        *,
        eq: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        """Read rows matching every ``eq`` column, optionally ordered."""
        check_table(table)
        if eq:
            check_columns(table, eq)
        if order_by is not None:
            check_columns(table, [order_by])

        with self._lock:
            rows = [dict(row) for row in self.tables[table].values() if _matches(row, eq)]

        if order_by is not None:
            # Rows without a value sort last regardless of direction
            present = [row for row in rows if row.get(order_by) is not None]
            missing = [row for row in rows if row.get(order_by) is None]
            present.sort(key=lambda row: row[order_by], reverse=descending)
            rows = present + missing
        return rows

    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """Insert a row and return it with its assigned id."""
        columns = check_table(table)
        check_columns(table, row)

        with self._lock:
            record = {column: row.get(column) for column in columns}
            record["id"] = self._next_ids[table]
            self._check_unique(table, record)
            self.tables[table][record["id"]] = record
            self._next_ids[table] += 1
            logger.debug("Inserted %s id=%s", table, record["id"])
            return dict(record)

    def update(self, table: str, values: dict[str, Any], *, eq: dict[str, Any]) -> int:
        """Apply ``values`` to every row matching ``eq``; return the row count."""
        if not eq:
            raise ValidationError("Update requires at least one filter column")
        check_columns(table, values)
        check_columns(table, eq)
        if "id" in values:
            raise ValidationError("Row ids cannot be updated")

        with self._lock:
            targets = [row for row in self.tables[table].values() if _matches(row, eq)]
            for row in targets:
                self._check_unique(table, {**row, **values})
            for row in targets:
                row.update(values)
            return len(targets)

    def delete(self, table: str, row_id: int) -> int:
        """Delete a row by id; return 1 if it existed, 0 otherwise."""
        check_table(table)
        with self._lock:
            return 1 if self.tables[table].pop(row_id, None) is not None else 0

    @contextmanager
    def transaction(self) -> Iterator["InMemoryTableStore"]:
        """Apply every write in the block atomically."""
        with self._lock:
            snapshot = None
            if self._depth == 0:
                snapshot = (copy.deepcopy(self.tables), dict(self._next_ids))
            self._depth += 1
            try:
                yield self
            except BaseException:
                if snapshot is not None:
                    self.tables, self._next_ids = snapshot
                    logger.debug("Rolled back in-memory transaction")
                raise
            finally:
                self._depth -= 1

    def _check_unique(self, table: str, candidate: dict[str, Any]) -> None:
        for key in UNIQUE_KEYS[table]:
            value = tuple(candidate.get(column) for column in key)
            for row_id, row in self.tables[table].items():
                if row_id == candidate.get("id"):
                    continue
                if tuple(row.get(column) for column in key) == value:
                    raise UniqueViolationError(
                        f"{table} already has a row with {_describe(key, value)}"
                    )


def _matches(row: dict[str, Any], eq: dict[str, Any] | None) -> bool:
    if not eq:
        return True
    return all(row.get(column) == value for column, value in eq.items())


def _describe(key: tuple[str, ...], value: tuple[Any, ...]) -> str:
    return ", ".join(f"{column}={item!r}" for column, item in zip(key, value))
