"""Event contracts published by the Catalogue context."""

from dataclasses import dataclass
from datetime import datetime

from shared.events.envelope import EventEnvelope, parse_timestamp

PRODUCT_CREATED = "ProductCreated"
PRODUCT_PRICE_UPDATED = "ProductPriceUpdated"


@dataclass(frozen=True)
class ProductCreated:
    """A product was added to the catalogue. Consumed by Inventory."""

    product_id: str
    name: str | None = None
    price: float | None = None
    occurred_at: datetime | None = None

    @classmethod
    def from_envelope(cls, envelope: EventEnvelope) -> "ProductCreated":
        price = envelope.get("price")
        return cls(
            product_id=str(envelope.get("product_id")),
            name=envelope.get("name"),
            price=float(price) if price is not None else None,
            occurred_at=parse_timestamp(envelope.get("occurred_at")),
        )
