"""Input checks shared by the services. Each raises ValidationError."""

from typing import Any

from rent_ledger.exceptions import ValidationError


def require_text(value: Any, label: str) -> str:
    """Return ``value`` stripped, rejecting missing or blank input."""
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValidationError(f"{label} is required")
    return text


def whole_amount(value: Any, label: str, *, default: int = 0, minimum: int = 0) -> int:
    """Parse a whole-number amount no smaller than ``minimum``."""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be a whole number, got {value!r}")
    try:
        amount = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a whole number, got {value!r}") from None
    if amount < minimum:
        raise ValidationError(f"{label} must be at least {minimum}")
    return amount
