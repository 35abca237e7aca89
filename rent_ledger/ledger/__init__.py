"""Rent ledger computation: month arithmetic and billing rows."""

from rent_ledger.ledger.calculator import (
    LedgerFilters,
    compute_due_rows,
    compute_ledger,
    first_due_month,
    summarize_month,
)
from rent_ledger.ledger.policy import DUE_DAY_OF_MONTH, FIRST_DUE_POLICY, FirstDuePolicy

__all__ = [
    "DUE_DAY_OF_MONTH",
    "FIRST_DUE_POLICY",
    "FirstDuePolicy",
    "LedgerFilters",
    "compute_due_rows",
    "compute_ledger",
    "first_due_month",
    "summarize_month",
]
