"""User store: lookups used by other contexts and command handlers."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from orderflow.identity.user.user import User
from orderflow.outbox.buffer import reconstituted
from orderflow.outbox.writer import OutboxWriter
from orderflow.utils.identifiers import ensure_uuid


class UserStore:
    def __init__(self, writer: OutboxWriter | None = None):
        self.writer = writer or OutboxWriter()

    def get(self, user_id) -> User:
        """Load a user, raising ``ObjectNotFoundError`` when missing."""
        return reconstituted(current_domain.repository_for(User).get(ensure_uuid(user_id, "user_id")))

    def find_by_id(self, user_id) -> User | None:
        try:
            return self.get(user_id)
        except ObjectNotFoundError:
            return None

    def find_by_email(self, email) -> User | None:
        results = current_domain.repository_for(User)._dao.query.filter(email=email.strip().lower()).all()
        return reconstituted(results.first) if results.items else None

    def save(self, user: User) -> User:
        return self.writer.save(user)
