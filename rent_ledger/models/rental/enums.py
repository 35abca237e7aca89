"""Enumeration types for rental domain entities."""

from enum import Enum


class MaintenanceStatus(str, Enum):
    OPEN = "Open"
    RESOLVED = "Resolved"


class BillingStatus(str, Enum):
    PAID = "PAID"
    PENDING = "PENDING"
    OVERDUE = "OVERDUE"
