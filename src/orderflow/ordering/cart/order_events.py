"""Inbound saga participant: confirmed orders leave an empty cart behind.

Checkout already clears the cart when the order is placed. This is the
safety net for a cart that still holds lines when confirmation lands.
"""

import structlog
from shared.events.envelope import EventEnvelope
from shared.events.ordering import ORDER_CONFIRMED, OrderConfirmed

from orderflow.ordering.cart.store import CartStore

logger = structlog.get_logger(__name__)


class CartClearOnOrderConfirmedHandler:
    def __init__(self, cart_store: CartStore):
        self.cart_store = cart_store

    def handle(self, event: EventEnvelope) -> None:
        if event.event_type != ORDER_CONFIRMED:
            return

        confirmed = OrderConfirmed.from_envelope(event)
        if not confirmed.source_cart_id:
            return

        cart = self.cart_store.find_by_id(confirmed.source_cart_id)
        if cart is None:
            logger.warning(
                "Source cart not found for confirmed order",
                order_id=confirmed.order_id,
                cart_id=confirmed.source_cart_id,
            )
            return
        if cart.is_empty():
            return

        cart.clear()
        self.cart_store.save(cart)
        logger.info("Cart cleared after order confirmation", order_id=confirmed.order_id, cart_id=str(cart.id))
