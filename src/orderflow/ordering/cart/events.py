"""Domain events for the Cart aggregate."""

from datetime import UTC, datetime

from protean.fields import DateTime, Dict, Identifier, Integer

from orderflow.domain import orderflow


@orderflow.event(part_of="Cart")
class CartCreated:
    __version__ = 1

    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    occurred_at = DateTime(default=lambda: datetime.now(UTC))


@orderflow.event(part_of="Cart")
class CartItemAdded:
    """A new line was added; ``product`` is the snapshot taken at add time."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product = Dict(required=True)
    quantity = Integer(required=True)
    occurred_at = DateTime(default=lambda: datetime.now(UTC))


@orderflow.event(part_of="Cart")
class CartItemUpdated:
    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    old_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    occurred_at = DateTime(default=lambda: datetime.now(UTC))


@orderflow.event(part_of="Cart")
class CartItemRemoved:
    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    occurred_at = DateTime(default=lambda: datetime.now(UTC))


@orderflow.event(part_of="Cart")
class CartCleared:
    __version__ = 1

    cart_id = Identifier(required=True)
    occurred_at = DateTime(default=lambda: datetime.now(UTC))
