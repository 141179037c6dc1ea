"""Event contracts published by the Ordering context.

``OrderCreated`` is what Inventory reserves stock against. ``OrderConfirmed``
and ``OrderFailed`` close the checkout saga; Inventory emits them on the
order's behalf, Ordering consumes them.
"""

from dataclasses import dataclass
from datetime import datetime

from shared.events.envelope import EventEnvelope, parse_timestamp

ORDER_CREATED = "OrderCreated"
ORDER_CONFIRMED = "OrderConfirmed"
ORDER_FAILED = "OrderFailed"
ORDER_CANCELLED = "OrderCancelled"
ORDER_STATUS_CHANGED = "OrderStatusChanged"

CART_CREATED = "CartCreated"
CART_ITEM_ADDED = "CartItemAdded"
CART_ITEM_UPDATED = "CartItemUpdated"
CART_ITEM_REMOVED = "CartItemRemoved"
CART_CLEARED = "CartCleared"


@dataclass(frozen=True)
class OrderLine:
    product_id: str
    product_name: str
    product_price: float
    quantity: int


@dataclass(frozen=True)
class OrderCreated:
    order_id: str
    user_id: str
    items: tuple[OrderLine, ...]
    total_price: float
    source_cart_id: str | None = None
    occurred_at: datetime | None = None

    @classmethod
    def from_envelope(cls, envelope: EventEnvelope) -> "OrderCreated":
        lines = tuple(
            OrderLine(
                product_id=str(item["product_id"]),
                product_name=item.get("product_name", ""),
                product_price=float(item.get("product_price", 0)),
                quantity=int(item["quantity"]),
            )
            for item in envelope.get("items") or []
        )
        return cls(
            order_id=str(envelope.get("order_id")),
            user_id=str(envelope.get("user_id")),
            items=lines,
            total_price=float(envelope.get("total_price") or 0),
            source_cart_id=envelope.get("source_cart_id"),
            occurred_at=parse_timestamp(envelope.get("occurred_at")),
        )


@dataclass(frozen=True)
class OrderConfirmed:
    order_id: str
    source_cart_id: str | None = None
    occurred_at: datetime | None = None

    @classmethod
    def from_envelope(cls, envelope: EventEnvelope) -> "OrderConfirmed":
        return cls(
            order_id=str(envelope.get("order_id")),
            source_cart_id=envelope.get("source_cart_id"),
            occurred_at=parse_timestamp(envelope.get("occurred_at")),
        )


@dataclass(frozen=True)
class OrderFailed:
    order_id: str
    reason: str | None = None
    occurred_at: datetime | None = None

    @classmethod
    def from_envelope(cls, envelope: EventEnvelope) -> "OrderFailed":
        return cls(
            order_id=str(envelope.get("order_id")),
            reason=envelope.get("reason"),
            occurred_at=parse_timestamp(envelope.get("occurred_at")),
        )
