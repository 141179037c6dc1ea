"""Order aggregate: a placed order and its fulfilment lifecycle.

Orders are created PENDING from a cart. Inventory answers asynchronously
with ``OrderConfirmed`` or ``OrderFailed``; after confirmation the order
moves through payment, shipping and delivery. The item list is fixed at
creation; only the status (and timestamps) change afterwards.

State Machine:
    PENDING → CONFIRMED → PAID → SHIPPED → DELIVERED
    PENDING → FAILED
    PENDING | CONFIRMED | PAID | SHIPPED → CANCELLED
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from orderflow.domain import orderflow
from orderflow.ordering.order.events import (
    OrderCancelled,
    OrderConfirmed,
    OrderCreated,
    OrderFailed,
    OrderStatusChanged,
)
from orderflow.outbox.buffer import drain_events

DEFAULT_FAILURE_REASON = "Inventory check failed"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PAID = "PAID"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    FAILED = "FAILED"


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.FAILED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
    OrderStatus.FAILED: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@orderflow.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    price_at_order = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    line_total = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@orderflow.aggregate
class Order:
    user_id = Identifier(required=True)
    items = HasMany(OrderItem)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    total_price = Float(default=0.0, min_value=0.0)
    source_cart_id = Identifier()
    failure_reason = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id, lines, source_cart_id=None):
        """Place a PENDING order.

        ``lines`` are objects carrying ``product_id``, ``product_name``,
        ``product_price`` and ``quantity``; cart items and order lines both do.
        """
        lines = list(lines)
        if not lines:
            raise ValidationError({"items": ["Order must have at least one item"]})

        items = [
            OrderItem(
                product_id=str(line.product_id),
                product_name=line.product_name,
                price_at_order=line.product_price,
                quantity=line.quantity,
                line_total=round(line.product_price * line.quantity, 2),
            )
            for line in lines
        ]

        now = datetime.now(UTC)
        order = cls(
            user_id=str(user_id),
            items=items,
            status=OrderStatus.PENDING.value,
            total_price=round(sum(item.line_total for item in items), 2),
            source_cart_id=str(source_cart_id) if source_cart_id else None,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderCreated(
                order_id=str(order.id),
                user_id=str(order.user_id),
                items=[
                    {
                        "product_id": str(item.product_id),
                        "product_name": item.product_name,
                        "product_price": item.price_at_order,
                        "quantity": item.quantity,
                    }
                    for item in order.items
                ],
                total_price=order.total_price,
                source_cart_id=order.source_cart_id,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _assert_pending(self, action):
        if OrderStatus(self.status) != OrderStatus.PENDING:
            raise ValidationError({"status": [f"Only pending orders can be {action}, order is {self.status}"]})

    def _change_status(self, target_status):
        old_status = self.status
        self.status = target_status.value
        self.updated_at = datetime.now(UTC)
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                old_status=old_status,
                new_status=target_status.value,
            )
        )

    def confirm(self):
        """Stock was reserved for every line."""
        self._assert_pending("confirmed")
        self._assert_can_transition(OrderStatus.CONFIRMED)

        self.raise_(OrderConfirmed(order_id=str(self.id), source_cart_id=self.source_cart_id))
        self._change_status(OrderStatus.CONFIRMED)

    def mark_as_failed(self, reason=None):
        """Stock could not be reserved."""
        self._assert_pending("failed")
        self._assert_can_transition(OrderStatus.FAILED)

        self.failure_reason = reason or DEFAULT_FAILURE_REASON
        self.raise_(OrderFailed(order_id=str(self.id), reason=self.failure_reason))
        self._change_status(OrderStatus.FAILED)

    def cancel(self):
        self._assert_can_transition(OrderStatus.CANCELLED)

        self.raise_(OrderCancelled(order_id=str(self.id)))
        self._change_status(OrderStatus.CANCELLED)

    def update_status(self, new_status):
        """Move to ``new_status`` along the transition table.

        Setting the current status again is a no-op.
        """
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status: {new_status}"]}) from None
        if target.value == self.status:
            return

        self._assert_can_transition(target)
        self._change_status(target)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_terminal(self) -> bool:
        return not _VALID_TRANSITIONS[OrderStatus(self.status)]

    def drain_events(self):
        return drain_events(self)
