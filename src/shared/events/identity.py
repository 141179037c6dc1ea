"""Event contracts published by the Identity context."""

from dataclasses import dataclass
from datetime import datetime

from shared.events.envelope import EventEnvelope, parse_timestamp

USER_CREATED = "UserCreated"
USER_UPDATED = "UserUpdated"
USER_EMAIL_CHANGED = "UserEmailChanged"


@dataclass(frozen=True)
class UserCreated:
    """A user registered. Consumed by Ordering to open the user's cart."""

    user_id: str
    email: str
    name: str | None = None
    occurred_at: datetime | None = None

    @classmethod
    def from_envelope(cls, envelope: EventEnvelope) -> "UserCreated":
        return cls(
            user_id=str(envelope.get("user_id")),
            email=envelope.get("email"),
            name=envelope.get("name"),
            occurred_at=parse_timestamp(envelope.get("occurred_at")),
        )
