"""Generic event representation handed to saga participants.

The outbox stores events as JSON payloads. When the processor delivers a row,
it rebuilds an ``EventEnvelope``: the event type, when it happened, the
aggregate it belongs to and the bag of payload fields. Handlers never receive
the producing context's event classes.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def parse_timestamp(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@dataclass(frozen=True)
class EventEnvelope:
    event_type: str
    occurred_at: datetime | None
    aggregate_id: str
    payload: Mapping[str, Any] = field(default_factory=dict)
    record_id: str | None = None

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        event_type: str | None = None,
        aggregate_id: str | None = None,
        record_id: str | None = None,
    ) -> "EventEnvelope":
        """Rebuild an envelope from a stored payload.

        Column values (``event_type``, ``aggregate_id``) win over whatever the
        payload carries, since they are what the row was indexed by.
        """
        data = dict(payload or {})
        event_type = event_type or data.get("event_type")
        if not event_type:
            raise ValueError("Stored event payload has no event_type")

        data["event_type"] = event_type
        return cls(
            event_type=event_type,
            occurred_at=parse_timestamp(data.get("occurred_at")),
            aggregate_id=aggregate_id or event_type,
            payload=data,
            record_id=record_id,
        )

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)

    def __getattr__(self, name: str) -> Any:
        payload = self.__dict__.get("payload") or {}
        if name in payload:
            return payload[name]
        raise AttributeError(f"{type(self).__name__} has no field {name!r}")
