"""Immutable view state and the reducers that produce the next state.

Screens keep their filters and form fields in these frozen values. Every
user action is a pure function ``(state, input) -> new state``; nothing is
mutated in place.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Any

from rent_ledger.exceptions import ValidationError
from rent_ledger.ledger.calculator import LedgerFilters
from rent_ledger.ledger.months import format_month, parse_month

SHOW_OPTIONS = ("all", "due", "paid")


@dataclass(frozen=True)
class RentViewState:
    """Filters of the rent page."""

    month: str
    tenant_id: int | None = None
    room_number: str | None = None
    show: str = "all"

    @classmethod
    def for_today(cls, today: date | None = None) -> "RentViewState":
        return cls(month=format_month(today or date.today()))


@dataclass(frozen=True)
class TenantFormState:
    """Fields of the add-tenant form, kept as entered."""

    name: str = ""
    contact: str = ""
    deposit: str = ""
    room_number: str = ""


@dataclass(frozen=True)
class TenantForm:
    """Validated add-tenant input."""

    name: str
    room_number: str
    contact: str
    deposit_amount: int


def select_month(state: RentViewState, month: str) -> RentViewState:
    return replace(state, month=format_month(parse_month(month)))


def filter_by_tenant(state: RentViewState, tenant_id: int | None) -> RentViewState:
    return replace(state, tenant_id=tenant_id)


def filter_by_room(state: RentViewState, room_number: str | None) -> RentViewState:
    return replace(state, room_number=room_number or None)


def show_only(state: RentViewState, show: str) -> RentViewState:
    if show not in SHOW_OPTIONS:
        raise ValidationError(f"Unknown view {show!r}; expected one of {SHOW_OPTIONS}")
    return replace(state, show=show)


def clear_filters(state: RentViewState) -> RentViewState:
    """Drop tenant/room filters and the due/paid toggle; keep the month."""
    return RentViewState(month=state.month)


def to_filters(state: RentViewState) -> LedgerFilters:
    """Translate the rent page filters into ledger filters."""
    return LedgerFilters(
        tenant_id=state.tenant_id,
        room_number=state.room_number,
        month=state.month,
    )


def set_field(form: TenantFormState, field_name: str, value: Any) -> TenantFormState:
    if field_name not in TenantFormState.__dataclass_fields__:
        raise ValidationError(f"Unknown form field {field_name!r}")
    return replace(form, **{field_name: "" if value is None else str(value)})


def reset_form(form: TenantFormState) -> TenantFormState:
    return TenantFormState()


def validate_tenant_form(form: TenantFormState) -> TenantForm:
    """Check the form before anything is written.

    Raises
    ------
    ValidationError
        If the name or room is blank, or the deposit is not a whole number.
    """
    name = form.name.strip()
    room_number = form.room_number.strip()
    if not name:
        raise ValidationError("Tenant name is required")
    if not room_number:
        raise ValidationError("Room number is required")
    deposit = form.deposit.strip()
    try:
        deposit_amount = int(deposit) if deposit else 0
    except ValueError:
        raise ValidationError(f"Deposit must be a whole number, got {form.deposit!r}") from None
    if deposit_amount < 0:
        raise ValidationError("Deposit cannot be negative")
    return TenantForm(
        name=name,
        room_number=room_number,
        contact=form.contact.strip(),
        deposit_amount=deposit_amount,
    )
