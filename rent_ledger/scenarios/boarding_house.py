"""Boarding house scenario: a populated property for demos and reports."""

from __future__ import annotations

import logging
import random
from datetime import date
from typing import Any

from rent_ledger.config import LedgerConfig
from rent_ledger.generators import RentPaymentBehavior, RoomGenerator, TenantGenerator
from rent_ledger.ledger.calculator import compute_due_rows
from rent_ledger.services.events import EventPublisher
from rent_ledger.services.occupancy import OccupancyService
from rent_ledger.services.payments import PaymentService
from rent_ledger.services.rooms import RoomService
from rent_ledger.store.base import TableStore
from rent_ledger.store.memory import InMemoryTableStore
from rent_ledger.store.rental import RentalRepository

logger = logging.getLogger(__name__)


class BoardingHouseScenario:
    """Generate rooms, tenants and a payment history.

    This scenario creates:
    - Rooms of one to four beds
    - Tenants filling a share of the beds, joined within the last year
    - Payments per tenant following on-time, late or non-paying behavior
    - A few tenants who moved out (soft-deleted)

    All writes go through the services, so room counters and payment
    uniqueness hold exactly as they would for interactive use.
    """

    def __init__(
        self,
        num_rooms: int = 10,
        fill_rate: float = 0.75,
        move_out_rate: float = 0.10,
        on_time_rate: float = 0.80,
        late_rate: float = 0.15,
        seed: int | None = None,
        today: date | None = None,
        *,
        store: TableStore | None = None,
        config: LedgerConfig | None = None,
        events: EventPublisher | None = None,
    ) -> None:
        """Initialize boarding house scenario.

        Parameters
        ----------
        num_rooms : int
            Number of rooms to create.
        fill_rate : float
            Share of beds given a tenant (0.0 to 1.0).
        move_out_rate : float
            Share of tenants archived after their payments are recorded.
        on_time_rate : float
            Share of tenants paying by the due date.
        late_rate : float
            Share of tenants paying late.
        seed : int | None
            Random seed for reproducibility.
        today : date | None
            Reference date; defaults to ``date.today()``.
        store : TableStore | None
            Store to populate; a fresh in-memory store by default.
        config : LedgerConfig | None
            Billing rules used when deciding what is owed.
        events : EventPublisher | None
            Optional publisher for the domain events of each write.
        """
        self.num_rooms = num_rooms
        self.fill_rate = fill_rate
        self.move_out_rate = move_out_rate
        self.on_time_rate = on_time_rate
        self.late_rate = late_rate
        self.seed = seed
        self.today = today or date.today()
        self.config = config or LedgerConfig()

        self.rng = random.Random(seed)

        self.repository = RentalRepository(store or InMemoryTableStore())
        self.rooms = RoomService(
            self.repository, default_capacity=self.config.default_room_capacity, events=events
        )
        self.occupancy = OccupancyService(self.repository, events=events, clock=lambda: self.today)
        self.payments = PaymentService(self.repository, events=events, clock=lambda: self.today)
        self._room_gen = RoomGenerator(seed=seed)
        self._tenant_gen = TenantGenerator(seed=seed)
        self._behavior = RentPaymentBehavior(seed=seed)

    def generate(self) -> RentalRepository:
        """Populate the store.

        Returns
        -------
        RentalRepository
            Repository over the populated store.
        """
        logger.info(
            "Starting boarding house scenario: %d rooms, %.0f%% occupied",
            self.num_rooms,
            self.fill_rate * 100,
        )

        for generated in self._room_gen.generate_batch(self.num_rooms):
            room = self.rooms.add_room(generated.room_number, generated.monthly_rent, generated.capacity)
            beds = sum(1 for _ in range(room.capacity) if self.rng.random() < self.fill_rate)
            for _ in range(beds):
                profile = self._tenant_gen.generate(room, today=self.today)
                self.occupancy.add_tenant(
                    profile.name,
                    room.room_number,
                    contact=profile.contact,
                    deposit_amount=profile.deposit_amount,
                    join_date=profile.join_date,
                )

        tenants = self.repository.tenants()
        rooms = self.repository.rooms()
        logger.info("Generated %d rooms and %d tenants", len(rooms), len(tenants))

        payment_count = 0
        for tenant in tenants:
            rows = compute_due_rows(
                tenant,
                rooms,
                [],
                today=self.today,
                policy=self.config.policy,
                due_day=self.config.due_day,
            )
            for row, paid_on in self._behavior.payment_dates(
                rows,
                on_time_rate=self.on_time_rate,
                late_rate=self.late_rate,
                reference_date=self.today,
            ):
                self.payments.mark_paid(tenant.id, row.month, paid_date=paid_on)
                payment_count += 1
        logger.info("Recorded %d payments", payment_count)

        movers = [tenant for tenant in tenants if self.rng.random() < self.move_out_rate]
        for tenant in movers:
            self.occupancy.remove_tenant(tenant.id)
        logger.info("Archived %d tenants", len(movers))

        return self.repository

    def get_summary(self) -> dict[str, Any]:
        """Return counts of the generated data."""
        tenants = self.repository.tenants()
        return {
            "rooms": len(self.repository.rooms()),
            "tenants": len(tenants),
            "active_tenants": sum(1 for tenant in tenants if tenant.is_active),
            "payments": len(self.repository.payments()),
        }
