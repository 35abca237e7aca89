"""Room model."""

from dataclasses import dataclass


@dataclass
class Room:
    """Rentable unit shared by up to ``capacity`` tenants."""

    room_number: str
    monthly_rent: int  # Whole currency units for the entire room
    capacity: int
    occupied: int = 0
    id: int | None = None

    @property
    def per_person_rent(self) -> int:
        """Monthly rent owed by each occupant, floored to whole units."""
        if self.capacity <= 0:
            return 0
        return self.monthly_rent // self.capacity

    @property
    def vacancies(self) -> int:
        return max(self.capacity - self.occupied, 0)
