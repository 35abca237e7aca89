"""Room catalog management."""

from __future__ import annotations

import logging

from rent_ledger.exceptions import InvalidEntityStateError, ValidationError
from rent_ledger.models.rental import Room
from rent_ledger.services.events import EventPublisher, publish
from rent_ledger.services.validation import require_text, whole_amount
from rent_ledger.store.base import ROOMS
from rent_ledger.store.rental import RentalRepository

logger = logging.getLogger(__name__)


class RoomService:
    """Add, edit, list and delete rooms."""

    def __init__(
        self,
        repository: RentalRepository,
        *,
        default_capacity: int = 2,
        events: EventPublisher | None = None,
    ) -> None:
        self.repository = repository
        self.store = repository.store
        self.default_capacity = default_capacity
        self.events = events

    def list_rooms(self) -> list[Room]:
        return self.repository.rooms()

    def add_room(self, room_number: str, monthly_rent: int, capacity: int | None = None) -> Room:
        """Create an empty room.

        Raises
        ------
        ValidationError
            If the number or rent is missing, or capacity is not positive.
        UniqueViolationError
            If the room number is already taken.
        """
        room_number = require_text(room_number, "Room number")
        if monthly_rent is None or monthly_rent == "":
            raise ValidationError("Monthly rent is required")
        monthly_rent = whole_amount(monthly_rent, "Monthly rent")
        capacity = whole_amount(capacity, "Capacity", default=self.default_capacity, minimum=1)

        room = self.repository.insert_room(
            Room(room_number=room_number, monthly_rent=monthly_rent, capacity=capacity)
        )
        logger.info("Added room %s (rent=%d, capacity=%d)", room_number, monthly_rent, capacity)
        publish(
            self.events,
            "room.created",
            room_number,
            {"monthly_rent": monthly_rent, "capacity": capacity},
        )
        return room

    def update_room(
        self,
        room_number: str,
        *,
        monthly_rent: int | None = None,
        capacity: int | None = None,
    ) -> Room:
        """Change rent or capacity. Capacity cannot drop below current occupancy."""
        changes = {}
        if monthly_rent is not None:
            changes["monthly_rent"] = whole_amount(monthly_rent, "Monthly rent")
        if capacity is not None:
            changes["capacity"] = whole_amount(capacity, "Capacity", minimum=1)

        with self.store.transaction():
            room = self.repository.get_room(room_number)
            if "capacity" in changes and changes["capacity"] < room.occupied:
                raise InvalidEntityStateError(
                    f"Room {room_number} has {room.occupied} occupants; "
                    f"capacity cannot be {changes['capacity']}"
                )
            if changes:
                self.store.update(ROOMS, changes, eq={"id": room.id})
            room = self.repository.get_room(room_number)

        if changes:
            logger.info("Updated room %s: %s", room_number, changes)
            publish(self.events, "room.updated", room_number, changes)
        return room

    def delete_room(self, room_number: str) -> None:
        """Delete a room that no active tenant is assigned to."""
        with self.store.transaction():
            room = self.repository.get_room(room_number)
            occupants = self.repository.tenants_in_room(room_number)
            if occupants:
                raise InvalidEntityStateError(
                    f"Room {room_number} still has {len(occupants)} active tenant(s)"
                )
            self.store.delete(ROOMS, room.id)

        logger.info("Deleted room %s", room_number)
        publish(self.events, "room.deleted", room_number, {})
