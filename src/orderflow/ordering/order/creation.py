"""CreateOrder command: checkout of a cart into a PENDING order.

The order is stored and the cart emptied in the same unit of work. Whether
stock can be reserved is decided later by Inventory; the caller only gets
the new order's id back and learns the outcome from the order's status.
"""

import structlog
from protean.exceptions import ValidationError
from protean.fields import Identifier
from protean.utils.mixins import handle

from orderflow.domain import orderflow
from orderflow.ordering.cart.store import CartStore
from orderflow.ordering.order.order import Order
from orderflow.ordering.order.store import OrderStore

logger = structlog.get_logger(__name__)


@orderflow.command(part_of="Order")
class CreateOrder:
    cart_id = Identifier(required=True)


@orderflow.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command: CreateOrder):
        cart_store = CartStore()
        cart = cart_store.get(command.cart_id)
        if cart.is_empty():
            raise ValidationError({"cart_id": ["Cannot create an order from an empty cart"]})

        order = Order.create(user_id=cart.user_id, lines=cart.items, source_cart_id=str(cart.id))
        OrderStore().save(order)

        cart.clear()
        cart_store.save(cart)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            user_id=str(order.user_id),
            total_price=order.total_price,
        )
        return str(order.id)
