"""Tenant lifecycle and room occupancy adjustment.

Every flow that moves a tenant in or out of a room (registration, removal,
reactivation, transfer) updates the tenant row and the affected room
counters inside one store transaction. Counter writes are compare-and-set
on the previously read value, so a concurrent writer surfaces as a
ConflictError instead of silently overwriting. Per-room locks serialize
callers within this process.
"""

from __future__ import annotations

import logging
import threading
from collections import Counter
from collections.abc import Iterable, Iterator
from contextlib import ExitStack, contextmanager
from datetime import date
from typing import Any, Callable

from rent_ledger.exceptions import (
    ConflictError,
    InvalidEntityStateError,
    ValidationError,
)
from rent_ledger.ledger.months import coerce_date
from rent_ledger.models.rental import Room, Tenant
from rent_ledger.services.events import EventPublisher, publish
from rent_ledger.services.validation import require_text, whole_amount
from rent_ledger.store.base import ROOMS, TENANTS
from rent_ledger.store.rental import RentalRepository

logger = logging.getLogger(__name__)


class RoomLocks:
    """Registry of one re-entrant lock per room number."""

    def __init__(self) -> None:
        self._locks: dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    def get(self, room_number: str) -> threading.RLock:
        with self._guard:
            return self._locks.setdefault(room_number, threading.RLock())

    @contextmanager
    def hold(self, *room_numbers: str) -> Iterator[None]:
        """Hold the locks of every given room, acquired in sorted order."""
        with ExitStack() as stack:
            for room_number in sorted(set(room_numbers)):
                stack.enter_context(self.get(room_number))
            yield


def derive_occupancy(tenants: Iterable[Tenant]) -> dict[str, int]:
    """Count active tenants per room number."""
    return dict(Counter(tenant.room_number for tenant in tenants if tenant.is_active))


class OccupancyService:
    """Register, remove, reactivate and transfer tenants."""

    def __init__(
        self,
        repository: RentalRepository,
        *,
        events: EventPublisher | None = None,
        clock: Callable[[], date] = date.today,
        locks: RoomLocks | None = None,
    ) -> None:
        self.repository = repository
        self.store = repository.store
        self.events = events
        self.clock = clock
        self.locks = locks or RoomLocks()

    def add_tenant(
        self,
        name: str,
        room_number: str,
        *,
        contact: str = "",
        deposit_amount: int = 0,
        join_date: date | str | None = None,
    ) -> Tenant:
        """Register an active tenant and take one bed in their room.

        Raises
        ------
        ValidationError
            If the name or room is missing, or the deposit is invalid.
        ReferentialIntegrityError
            If the room does not exist.
        InvalidEntityStateError
            If the room has no vacancy.
        """
        name = require_text(name, "Tenant name")
        room_number = require_text(room_number, "Room number")
        deposit_amount = whole_amount(deposit_amount, "Deposit")
        joined = self._join_date(join_date)

        with self.locks.hold(room_number), self.store.transaction():
            room = self.repository.get_room(room_number)
            _require_vacancy(room)
            tenant = self.repository.insert_tenant(
                Tenant(
                    name=name,
                    room_number=room_number,
                    join_date=joined,
                    contact=(contact or "").strip(),
                    deposit_amount=deposit_amount,
                )
            )
            self._adjust(room, +1)

        logger.info("Registered tenant %s", tenant.id, extra={"tenant_id": tenant.id, "room_number": room_number})
        publish(self.events, "tenant.created", tenant.id, {"room_number": room_number, "name": name})
        return tenant

    def remove_tenant(self, tenant_id: int) -> Tenant:
        """Archive a tenant and free their bed. The row is kept."""
        tenant = self.repository.get_tenant(tenant_id)
        with self.locks.hold(tenant.room_number), self.store.transaction():
            tenant = self.repository.get_tenant(tenant_id)
            if not tenant.is_active:
                raise InvalidEntityStateError(f"Tenant {tenant_id} is already inactive")
            self._write_tenant(tenant, {"is_active": False}, expect_active=True)
            room = self.repository.find_room(tenant.room_number)
            if room is None:
                logger.warning("Tenant %s left unknown room %s", tenant_id, tenant.room_number)
            else:
                self._adjust(room, -1)

        tenant.is_active = False
        logger.info(
            "Removed tenant %s", tenant_id, extra={"tenant_id": tenant_id, "room_number": tenant.room_number}
        )
        publish(self.events, "tenant.removed", tenant_id, {"room_number": tenant.room_number})
        return tenant

    def reactivate_tenant(
        self,
        tenant_id: int,
        room_number: str,
        join_date: date | str | None = None,
    ) -> Tenant:
        """Bring an archived tenant back with a new room and join date."""
        room_number = require_text(room_number, "Room number")
        joined = self._join_date(join_date)

        with self.locks.hold(room_number), self.store.transaction():
            tenant = self.repository.get_tenant(tenant_id)
            if tenant.is_active:
                raise InvalidEntityStateError(f"Tenant {tenant_id} is already active")
            room = self.repository.get_room(room_number)
            _require_vacancy(room)
            self._write_tenant(
                tenant,
                {"is_active": True, "room_number": room_number, "join_date": joined},
                expect_active=False,
            )
            self._adjust(room, +1)

        tenant.is_active = True
        tenant.room_number = room_number
        tenant.join_date = joined
        logger.info("Reactivated tenant %s in room %s", tenant_id, room_number)
        publish(
            self.events,
            "tenant.reactivated",
            tenant_id,
            {"room_number": room_number, "join_date": joined.isoformat()},
        )
        return tenant

    def transfer_tenant(self, tenant_id: int, new_room_number: str) -> Tenant:
        """Move an active tenant to another room, adjusting both counters."""
        new_room_number = require_text(new_room_number, "Room number")
        tenant = self.repository.get_tenant(tenant_id)
        if tenant.room_number == new_room_number:
            return tenant

        old_room_number = tenant.room_number
        with self.locks.hold(old_room_number, new_room_number), self.store.transaction():
            tenant = self.repository.get_tenant(tenant_id)
            if not tenant.is_active:
                raise InvalidEntityStateError(f"Tenant {tenant_id} is inactive and cannot be transferred")
            if tenant.room_number != old_room_number:
                raise ConflictError(f"Tenant {tenant_id} moved rooms concurrently")
            new_room = self.repository.get_room(new_room_number)
            _require_vacancy(new_room)
            self._write_tenant(tenant, {"room_number": new_room_number}, expect_active=True)
            old_room = self.repository.find_room(old_room_number)
            if old_room is None:
                logger.warning("Tenant %s left unknown room %s", tenant_id, old_room_number)
            else:
                self._adjust(old_room, -1)
            self._adjust(new_room, +1)

        tenant.room_number = new_room_number
        logger.info("Transferred tenant %s from room %s to %s", tenant_id, old_room_number, new_room_number)
        publish(
            self.events,
            "tenant.transferred",
            tenant_id,
            {"from_room": old_room_number, "to_room": new_room_number},
        )
        return tenant

    def update_tenant(
        self,
        tenant_id: int,
        *,
        name: str | None = None,
        contact: str | None = None,
        deposit_amount: int | None = None,
        room_number: str | None = None,
    ) -> Tenant:
        """Edit tenant details; a new room number goes through the transfer flow."""
        changes: dict[str, Any] = {}
        if name is not None:
            changes["name"] = require_text(name, "Tenant name")
        if contact is not None:
            changes["contact"] = contact.strip()
        if deposit_amount is not None:
            changes["deposit_amount"] = whole_amount(deposit_amount, "Deposit")

        tenant = self.repository.get_tenant(tenant_id)
        rooms = [tenant.room_number] + ([room_number] if room_number else [])
        with self.locks.hold(*rooms), self.store.transaction():
            if changes:
                self.store.update(TENANTS, changes, eq={"id": tenant_id})
            if room_number is not None:
                self.transfer_tenant(tenant_id, room_number)
            tenant = self.repository.get_tenant(tenant_id)

        if changes:
            logger.info("Updated tenant %s: %s", tenant_id, ", ".join(sorted(changes)))
            publish(self.events, "tenant.updated", tenant_id, changes)
        return tenant

    def reconcile_occupancy(self) -> dict[str, tuple[int, int]]:
        """Rewrite room counters from the active tenant rows.

        Returns
        -------
        dict[str, tuple[int, int]]
            Corrected rooms mapped to ``(stored, derived)`` counts.
        """
        corrections: dict[str, tuple[int, int]] = {}
        with self.store.transaction():
            counts = derive_occupancy(self.repository.tenants(active_only=True))
            for room in self.repository.rooms():
                derived = counts.get(room.room_number, 0)
                if room.occupied != derived:
                    self.store.update(ROOMS, {"occupied": derived}, eq={"id": room.id})
                    corrections[room.room_number] = (room.occupied, derived)

        for room_number, (stored, derived) in corrections.items():
            logger.warning("Room %s occupancy drifted: stored=%d derived=%d", room_number, stored, derived)
        return corrections

    def _adjust(self, room: Room, delta: int) -> None:
        new_value = room.occupied + delta
        if new_value < 0:
            logger.warning("Room %s occupancy would go negative; clamping to 0", room.room_number)
            new_value = 0
        updated = self.store.update(
            ROOMS,
            {"occupied": new_value},
            eq={"id": room.id, "occupied": room.occupied},
        )
        if updated == 0:
            raise ConflictError(f"Room {room.room_number} occupancy changed concurrently")
        room.occupied = new_value

    def _write_tenant(self, tenant: Tenant, values: dict[str, Any], expect_active: bool) -> None:
        updated = self.store.update(TENANTS, values, eq={"id": tenant.id, "is_active": expect_active})
        if updated == 0:
            raise ConflictError(f"Tenant {tenant.id} changed concurrently")

    def _join_date(self, value: date | str | None) -> date:
        if value is None:
            return self.clock()
        joined = coerce_date(value)
        if joined is None:
            raise ValidationError(f"Invalid join date {value!r}")
        return joined


def _require_vacancy(room: Room) -> None:
    if room.vacancies <= 0:
        raise InvalidEntityStateError(
            f"Room {room.room_number} is full ({room.occupied}/{room.capacity})"
        )

