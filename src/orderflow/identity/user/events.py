"""Domain events for the User aggregate."""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, String

from orderflow.domain import orderflow


@orderflow.event(part_of="User")
class UserCreated:
    """A new user registered."""

    __version__ = 1

    user_id = Identifier(required=True)
    email = String(required=True)
    name = String()
    occurred_at = DateTime(default=lambda: datetime.now(UTC))


@orderflow.event(part_of="User")
class UserUpdated:
    __version__ = 1

    user_id = Identifier(required=True)
    occurred_at = DateTime(default=lambda: datetime.now(UTC))


@orderflow.event(part_of="User")
class UserEmailChanged:
    __version__ = 1

    user_id = Identifier(required=True)
    old_email = String(required=True)
    new_email = String(required=True)
    occurred_at = DateTime(default=lambda: datetime.now(UTC))
