"""Order store: orders by id or by user."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from orderflow.ordering.order.order import Order
from orderflow.outbox.buffer import reconstituted
from orderflow.outbox.writer import OutboxWriter
from orderflow.utils.identifiers import ensure_uuid


class OrderStore:
    def __init__(self, writer: OutboxWriter | None = None):
        self.writer = writer or OutboxWriter()

    def get(self, order_id) -> Order:
        return reconstituted(current_domain.repository_for(Order).get(ensure_uuid(order_id, "order_id")))

    def find_by_id(self, order_id) -> Order | None:
        try:
            return self.get(order_id)
        except ObjectNotFoundError:
            return None

    def find_by_user_id(self, user_id) -> list[Order]:
        orders = (
            current_domain.repository_for(Order)._dao.query.filter(user_id=str(user_id)).order_by("created_at").all()
        )
        return [reconstituted(order) for order in orders.items]

    def save(self, order: Order) -> Order:
        return self.writer.save(order)
