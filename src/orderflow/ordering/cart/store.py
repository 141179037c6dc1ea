"""Cart store: carts by id or by owning user."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from orderflow.ordering.cart.cart import Cart
from orderflow.outbox.buffer import reconstituted
from orderflow.outbox.writer import OutboxWriter
from orderflow.utils.identifiers import ensure_uuid


class CartStore:
    def __init__(self, writer: OutboxWriter | None = None):
        self.writer = writer or OutboxWriter()

    def get(self, cart_id) -> Cart:
        return reconstituted(current_domain.repository_for(Cart).get(ensure_uuid(cart_id, "cart_id")))

    def find_by_id(self, cart_id) -> Cart | None:
        try:
            return self.get(cart_id)
        except ObjectNotFoundError:
            return None

    def find_by_user_id(self, user_id) -> Cart | None:
        results = current_domain.repository_for(Cart)._dao.query.filter(user_id=str(user_id)).all()
        return reconstituted(results.first) if results.items else None

    def save(self, cart: Cart) -> Cart:
        return self.writer.save(cart)
