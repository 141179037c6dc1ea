"""Domain events for the Inventory aggregate.

Every stock movement is announced. ``InventoryOutOfStock`` and
``InventoryLowStock`` are alerts raised alongside a decrease; a single
decrease raises at most one of them.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Integer

from orderflow.domain import orderflow


@orderflow.event(part_of="Inventory")
class InventoryCreated:
    __version__ = 1

    inventory_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    occurred_at = DateTime(default=lambda: datetime.now(UTC))


@orderflow.event(part_of="Inventory")
class InventoryIncreased:
    __version__ = 1

    inventory_id = Identifier(required=True)
    product_id = Identifier(required=True)
    old_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    amount = Integer(required=True)
    occurred_at = DateTime(default=lambda: datetime.now(UTC))


@orderflow.event(part_of="Inventory")
class InventoryDecreased:
    __version__ = 1

    inventory_id = Identifier(required=True)
    product_id = Identifier(required=True)
    old_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    amount = Integer(required=True)
    occurred_at = DateTime(default=lambda: datetime.now(UTC))


@orderflow.event(part_of="Inventory")
class InventoryLowStock:
    """Stock fell below the threshold, coming from at or above it."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    threshold = Integer(required=True)
    occurred_at = DateTime(default=lambda: datetime.now(UTC))


@orderflow.event(part_of="Inventory")
class InventoryOutOfStock:
    __version__ = 1

    inventory_id = Identifier(required=True)
    product_id = Identifier(required=True)
    occurred_at = DateTime(default=lambda: datetime.now(UTC))
