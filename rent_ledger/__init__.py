"""Rent ledger and occupancy tracking for shared-room rentals."""

__version__ = "0.1.0"
