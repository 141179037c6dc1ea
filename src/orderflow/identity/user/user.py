"""User aggregate: the account that owns a cart and places orders.

Password hashing and authentication live outside this service; the aggregate
only tracks identity data and announces changes to it.
"""

import re
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from orderflow.domain import orderflow
from orderflow.identity.user.events import UserCreated, UserEmailChanged, UserUpdated
from orderflow.outbox.buffer import drain_events

_EMAIL_PATTERN = re.compile(r"^[^@\s;,<>()\[\]\\]+@[^@\s;,<>()\[\]\\]+\.[^@\s;,<>()\[\]\\]+$")


def normalize_email(email) -> str:
    value = (email or "").strip().lower()
    if not _EMAIL_PATTERN.match(value) or ".." in value:
        raise ValidationError({"email": [f"Invalid email address: {email!r}"]})
    return value


@orderflow.aggregate
class User:
    email = String(required=True, max_length=254)
    name = String(required=True, max_length=100)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(cls, email, name):
        now = datetime.now(UTC)
        user = cls(
            email=normalize_email(email),
            name=name.strip() if name else name,
            created_at=now,
            updated_at=now,
        )
        user.raise_(UserCreated(user_id=str(user.id), email=user.email, name=user.name))
        return user

    def change_email(self, new_email):
        new_email = normalize_email(new_email)
        if new_email == self.email:
            return

        old_email = self.email
        self.email = new_email
        self.updated_at = datetime.now(UTC)

        self.raise_(UserEmailChanged(user_id=str(self.id), old_email=old_email, new_email=new_email))
        self.raise_(UserUpdated(user_id=str(self.id)))

    def rename(self, name):
        name = (name or "").strip()
        if not name:
            raise ValidationError({"name": ["Name cannot be empty"]})
        if name == self.name:
            return

        self.name = name
        self.updated_at = datetime.now(UTC)
        self.raise_(UserUpdated(user_id=str(self.id)))

    def drain_events(self):
        return drain_events(self)
