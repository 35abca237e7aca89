"""Synthetic data generators for rooms, tenants and payments."""

from rent_ledger.generators.patterns import RentPaymentBehavior
from rent_ledger.generators.rental import RoomGenerator, TenantGenerator

__all__ = ["RentPaymentBehavior", "RoomGenerator", "TenantGenerator"]
