"""Inbound saga participant: a registered user gets an empty cart."""

import structlog
from shared.events.envelope import EventEnvelope
from shared.events.identity import USER_CREATED, UserCreated

from orderflow.ordering.cart.cart import Cart
from orderflow.ordering.cart.store import CartStore

logger = structlog.get_logger(__name__)


class UserCreatedCartHandler:
    def __init__(self, cart_store: CartStore):
        self.cart_store = cart_store

    def handle(self, event: EventEnvelope) -> None:
        if event.event_type != USER_CREATED:
            return

        user = UserCreated.from_envelope(event)
        if self.cart_store.find_by_user_id(user.user_id) is not None:
            logger.info("Cart already exists for user", user_id=user.user_id)
            return

        cart = Cart.create(user_id=user.user_id)
        self.cart_store.save(cart)
        logger.info("Cart created for new user", user_id=user.user_id, cart_id=str(cart.id))
