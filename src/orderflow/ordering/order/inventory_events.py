"""Inbound saga participants: Ordering applies Inventory's verdict.

``OrderConfirmed`` moves a PENDING order to CONFIRMED and ``OrderFailed``
moves it to FAILED. Both events are also raised by the order itself once it
changes state, so each handler sees its event twice per order, possibly
after the order has moved on. Only a PENDING order is acted on; any other
status means the verdict was already applied or overtaken.
"""

import structlog
from shared.events.envelope import EventEnvelope
from shared.events.ordering import ORDER_CONFIRMED, ORDER_FAILED, OrderConfirmed, OrderFailed

from orderflow.ordering.order.order import DEFAULT_FAILURE_REASON, OrderStatus
from orderflow.ordering.order.store import OrderStore

logger = structlog.get_logger(__name__)


class OrderConfirmedHandler:
    def __init__(self, order_store: OrderStore):
        self.order_store = order_store

    def handle(self, event: EventEnvelope) -> None:
        if event.event_type != ORDER_CONFIRMED:
            return

        confirmed = OrderConfirmed.from_envelope(event)
        order = self.order_store.find_by_id(confirmed.order_id)
        if order is None:
            logger.warning("Order not found for confirmation", order_id=confirmed.order_id)
            return
        if order.status != OrderStatus.PENDING.value:
            logger.info("Order already decided, confirmation ignored", order_id=confirmed.order_id, status=order.status)
            return

        order.confirm()
        self.order_store.save(order)
        logger.info("Order confirmed", order_id=confirmed.order_id)


class OrderFailedHandler:
    def __init__(self, order_store: OrderStore):
        self.order_store = order_store

    def handle(self, event: EventEnvelope) -> None:
        if event.event_type != ORDER_FAILED:
            return

        failed = OrderFailed.from_envelope(event)
        order = self.order_store.find_by_id(failed.order_id)
        if order is None:
            logger.warning("Order not found for failure", order_id=failed.order_id)
            return
        if order.status != OrderStatus.PENDING.value:
            logger.info("Order already decided, failure ignored", order_id=failed.order_id, status=order.status)
            return

        order.mark_as_failed(failed.reason or DEFAULT_FAILURE_REASON)
        self.order_store.save(order)
        logger.info("Order failed", order_id=failed.order_id, reason=failed.reason)
