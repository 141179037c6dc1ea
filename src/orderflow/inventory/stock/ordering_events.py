"""Inbound saga participant: Inventory reserves stock for new orders.

On ``OrderCreated`` every line is checked against current stock first. If
any product lacks an inventory record or enough quantity, the order fails
and nothing is touched. Otherwise each line is decreased and saved on its
own, and ``OrderConfirmed`` is dispatched.

The check and the decreases are separate reads and writes with no lock in
between. A concurrent order can consume stock after the check; the decrease
then re-validates, the order fails, and lines already decreased stay
decreased.
"""

from datetime import UTC, datetime

import structlog
from shared.events.envelope import EventEnvelope
from shared.events.ordering import ORDER_CREATED, OrderConfirmed, OrderCreated, OrderFailed

from orderflow.inventory.stock.store import InventoryStore
from orderflow.outbox.writer import OutboxWriter

logger = structlog.get_logger(__name__)


class OrderCreatedInventoryHandler:
    def __init__(self, inventory_store: InventoryStore, writer: OutboxWriter):
        self.inventory_store = inventory_store
        self.writer = writer

    def handle(self, event: EventEnvelope) -> None:
        if event.event_type != ORDER_CREATED:
            return

        order = OrderCreated.from_envelope(event)
        logger.info("Reserving stock for order", order_id=order.order_id, lines=len(order.items))

        if not order.items:
            self._fail(order.order_id, "Order has no items")
            return

        reason = self._first_shortage(order)
        if reason is not None:
            self._fail(order.order_id, reason)
            return

        try:
            for line in order.items:
                inventory = self.inventory_store.get_by_product_id(line.product_id)
                inventory.decrease(line.quantity)
                self.inventory_store.save(inventory)
        except Exception as exc:
            logger.warning("Stock decrease failed", order_id=order.order_id, error=str(exc))
            self._fail(order.order_id, f"Inventory decrease failed: {exc}")
            return

        self.writer.dispatch(
            OrderConfirmed(
                order_id=order.order_id,
                source_cart_id=order.source_cart_id,
                occurred_at=datetime.now(UTC),
            )
        )
        logger.info("Stock reserved, order confirmed", order_id=order.order_id)

    def _first_shortage(self, order: OrderCreated) -> str | None:
        for line in order.items:
            inventory = self.inventory_store.find_by_product_id(line.product_id)
            if inventory is None:
                return f"Inventory not found for product {line.product_id}"
            if not inventory.has_stock(line.quantity):
                return (
                    f"Insufficient stock for product {line.product_id}. "
                    f"Required: {line.quantity}, Available: {inventory.quantity}"
                )
        return None

    def _fail(self, order_id: str, reason: str) -> None:
        self.writer.dispatch(OrderFailed(order_id=order_id, reason=reason, occurred_at=datetime.now(UTC)))
        logger.info("Order failed stock reservation", order_id=order_id, reason=reason)
