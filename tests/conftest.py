"""Pytest configuration and fixtures."""

from datetime import date

import pytest

from rent_ledger.models.rental import PaymentRecord, Room, Tenant
from rent_ledger.services import (
    LedgerService,
    MaintenanceService,
    OccupancyService,
    PaymentService,
    RoomService,
)
from rent_ledger.store import InMemoryTableStore, RentalRepository


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def today() -> date:
    """Fixed reference date for overdue calculations."""
    return date(2024, 4, 20)


@pytest.fixture
def room() -> Room:
    """Three-bed room renting for 9000 a month."""
    return Room(room_number="101", monthly_rent=9000, capacity=3, occupied=1, id=1)


@pytest.fixture
def tenant() -> Tenant:
    """Active tenant who joined room 101 mid-January 2024."""
    return Tenant(name="Asha Rao", room_number="101", join_date=date(2024, 1, 15), id=7)


@pytest.fixture
def february_payment(tenant: Tenant) -> PaymentRecord:
    """Rent paid for February 2024."""
    return PaymentRecord(
        tenant_id=tenant.id,
        room_number="101",
        month="2024-02",
        amount=3000,
        paid_date=date(2024, 2, 3),
        id=1,
    )


@pytest.fixture
def store() -> InMemoryTableStore:
    """Create a fresh store for each test."""
    return InMemoryTableStore()


@pytest.fixture
def repository(store: InMemoryTableStore) -> RentalRepository:
    return RentalRepository(store)


@pytest.fixture
def rooms(repository: RentalRepository) -> RoomService:
    return RoomService(repository)


@pytest.fixture
def occupancy(repository: RentalRepository, today: date) -> OccupancyService:
    return OccupancyService(repository, clock=lambda: today)


@pytest.fixture
def payments(repository: RentalRepository, today: date) -> PaymentService:
    return PaymentService(repository, clock=lambda: today)


@pytest.fixture
def maintenance(repository: RentalRepository) -> MaintenanceService:
    return MaintenanceService(repository)


@pytest.fixture
def ledger(repository: RentalRepository, today: date) -> LedgerService:
    return LedgerService(repository, clock=lambda: today)
