"""Domain models for the rent ledger."""

from rent_ledger.models.base import Event

__all__ = ["Event"]
