"""Conversion of ledger objects into JSON-ready dicts."""

from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

from rent_ledger.models.rental import BillingRow, MonthSummary


def to_dict(obj: Any) -> dict:
    """Convert a record to a flat, JSON-ready dict.

    Billing rows are flattened to one level (tenant fields inlined); month
    summaries carry their totals next to the flattened rows. Other
    dataclasses and dicts are converted field by field.
    """
    if isinstance(obj, BillingRow):
        return serialize_value(obj.to_record())
    if isinstance(obj, MonthSummary):
        return {
            "month": obj.month,
            "expected": obj.expected,
            "collected": obj.collected,
            "outstanding": obj.outstanding,
            "due": [to_dict(row) for row in obj.due],
            "paid": [to_dict(row) for row in obj.paid],
        }
    if is_dataclass(obj) and not isinstance(obj, type):
        return serialize_value(asdict(obj))
    if isinstance(obj, dict):
        return serialize_value(obj)
    return {"value": str(obj)}


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output.

    Enums become their values and dates ISO-8601 strings; containers are
    converted recursively.
    """
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: serialize_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    return value
