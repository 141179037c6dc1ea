"""Domain events for the Product aggregate."""

from datetime import UTC, datetime

from protean.fields import DateTime, Float, Identifier, String

from orderflow.domain import orderflow


@orderflow.event(part_of="Product")
class ProductCreated:
    """A product was added to the catalogue. Inventory opens a stock record for it."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    price = Float(required=True)
    occurred_at = DateTime(default=lambda: datetime.now(UTC))


@orderflow.event(part_of="Product")
class ProductPriceUpdated:
    """Existing carts keep the price they snapshotted; only new lines see this."""

    __version__ = 1

    product_id = Identifier(required=True)
    old_price = Float(required=True)
    new_price = Float(required=True)
    occurred_at = DateTime(default=lambda: datetime.now(UTC))
