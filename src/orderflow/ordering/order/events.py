"""Domain events for the Order aggregate."""

from datetime import UTC, datetime

from protean.fields import DateTime, Dict, Float, Identifier, List, String, Text

from orderflow.domain import orderflow


@orderflow.event(part_of="Order")
class OrderCreated:
    """A PENDING order was placed. Inventory reserves stock against it.

    ``items`` carries the line snapshot (product_id, product_name,
    product_price, quantity) so the reservation never reads the order back.
    """

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    items = List(content_type=Dict, required=True)
    total_price = Float(required=True)
    source_cart_id = Identifier()
    occurred_at = DateTime(default=lambda: datetime.now(UTC))


@orderflow.event(part_of="Order")
class OrderConfirmed:
    __version__ = 1

    order_id = Identifier(required=True)
    source_cart_id = Identifier()
    occurred_at = DateTime(default=lambda: datetime.now(UTC))


@orderflow.event(part_of="Order")
class OrderFailed:
    __version__ = 1

    order_id = Identifier(required=True)
    reason = Text(required=True)
    occurred_at = DateTime(default=lambda: datetime.now(UTC))


@orderflow.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    occurred_at = DateTime(default=lambda: datetime.now(UTC))


@orderflow.event(part_of="Order")
class OrderStatusChanged:
    """Raised with every lifecycle transition, next to the specific event."""

    __version__ = 1

    order_id = Identifier(required=True)
    old_status = String(required=True)
    new_status = String(required=True)
    occurred_at = DateTime(default=lambda: datetime.now(UTC))
