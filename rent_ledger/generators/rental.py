"""Room and tenant generators for the rental domain."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterator

from rent_ledger.generators.base import BaseGenerator
from rent_ledger.models.rental import Room, Tenant


class RoomGenerator(BaseGenerator):
    """Generate synthetic rooms numbered floor by floor (101, 102, ... 201)."""

    CAPACITIES = [1, 2, 3, 4]
    CAPACITY_WEIGHTS = [0.20, 0.45, 0.25, 0.10]

    # Monthly rent per bed, whole currency units
    BED_RENT_RANGE = (3000, 8000)

    def __init__(self, seed: int | None = None, rooms_per_floor: int = 8) -> None:
        super().__init__(seed)
        self.rooms_per_floor = rooms_per_floor
        self._count = 0

    def generate(self) -> Room:
        """Generate the next room."""
        floor, index = divmod(self._count, self.rooms_per_floor)
        self._count += 1

        capacity = self.weighted_choice(self.CAPACITIES, self.CAPACITY_WEIGHTS)
        bed_rent = self.rng.randint(*self.BED_RENT_RANGE)
        # Rooms are priced in steps of 500; shared rooms get a small discount per bed
        monthly_rent = round(bed_rent * capacity * (1 - 0.05 * (capacity - 1)) / 500) * 500

        return Room(
            room_number=f"{floor + 1}{index + 1:02d}",
            monthly_rent=max(monthly_rent, 500),
            capacity=capacity,
        )

    def generate_batch(self, count: int) -> Iterator[Room]:
        """Generate ``count`` rooms."""
        for _ in range(count):
            yield self.generate()


class TenantGenerator(BaseGenerator):
    """Generate tenant profiles for a room."""

    DEPOSIT_MONTHS = [1, 2, 3]
    DEPOSIT_WEIGHTS = [0.50, 0.40, 0.10]

    def generate(
        self,
        room: Room,
        today: date | None = None,
        max_tenure_days: int = 365,
    ) -> Tenant:
        """Generate a tenant joining ``room`` within the last ``max_tenure_days``."""
        today = today or date.today()
        months = self.weighted_choice(self.DEPOSIT_MONTHS, self.DEPOSIT_WEIGHTS)

        return Tenant(
            name=self.fake.name(),
            room_number=room.room_number,
            join_date=today - timedelta(days=self.rng.randint(0, max_tenure_days)),
            contact=self.fake.phone_number(),
            deposit_amount=room.per_person_rent * months,
        )
