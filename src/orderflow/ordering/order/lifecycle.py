"""Order lifecycle commands issued after checkout (payment, shipping, cancellation)."""

from protean.fields import Identifier, String
from protean.utils.mixins import handle

from orderflow.domain import orderflow
from orderflow.ordering.order.order import Order, OrderStatus
from orderflow.ordering.order.store import OrderStore


@orderflow.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)


@orderflow.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)


@orderflow.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command: UpdateOrderStatus):
        store = OrderStore()
        order = store.get(command.order_id)
        order.update_status(command.status)
        store.save(order)
        return order.status

    @handle(CancelOrder)
    def cancel_order(self, command: CancelOrder):
        store = OrderStore()
        order = store.get(command.order_id)
        order.cancel()
        store.save(order)
