"""Turning domain events into outbox payloads.

A payload is a JSON-compatible dict with ``event_type`` and ``occurred_at``
followed by every declared field of the event. Typed wrappers collapse to
their raw value, collections are converted element by element and value
objects or entities field by field. Protean's private ``_metadata`` and
``_version`` never leave the process.
"""

import dataclasses
from collections.abc import Mapping
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from protean.core.entity import BaseEntity
from protean.core.value_object import BaseValueObject
from protean.utils.reflection import declared_fields

# Fields inspected, in order, for the outbox row's ``aggregate_id``
AGGREGATE_ID_FIELDS = (
    "aggregate_id",
    "order_id",
    "cart_id",
    "inventory_id",
    "product_id",
    "user_id",
)


def event_type_of(event) -> str:
    return type(event).__name__


def _field_names(obj) -> list[str]:
    if dataclasses.is_dataclass(obj):
        return [f.name for f in dataclasses.fields(obj)]
    return [name for name in declared_fields(obj) if not name.startswith("_")]


def to_primitive(value: Any) -> Any:
    """Reduce a field value to JSON-compatible data."""
    if value is None or isinstance(value, bool | int | float | str):
        return value
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, Enum):
        return to_primitive(value.value)
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, BaseValueObject | BaseEntity) or (
        dataclasses.is_dataclass(value) and not isinstance(value, type)
    ):
        return {name: to_primitive(getattr(value, name)) for name in _field_names(value)}
    if isinstance(value, Mapping):
        return {str(key): to_primitive(item) for key, item in value.items()}
    if isinstance(value, list | tuple | set | frozenset):
        return [to_primitive(item) for item in value]
    raise TypeError(f"Cannot serialize value of type {type(value).__name__}")


def serialize_event(event) -> dict[str, Any]:
    occurred_at = getattr(event, "occurred_at", None) or datetime.now(UTC)
    payload = {
        "event_type": event_type_of(event),
        "occurred_at": to_primitive(occurred_at),
    }
    for name in _field_names(event):
        if name in payload:
            continue
        payload[name] = to_primitive(getattr(event, name))
    return payload


def extract_aggregate_id(event) -> str:
    """First non-empty identifier field of the event, else its type name."""
    for name in AGGREGATE_ID_FIELDS:
        value = getattr(event, name, None)
        if value is not None and value != "":
            return str(to_primitive(value))
    return event_type_of(event)
