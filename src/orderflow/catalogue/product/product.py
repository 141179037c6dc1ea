"""Product aggregate: a catalogue item that can be stocked and ordered."""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, String

from orderflow.catalogue.product.events import ProductCreated, ProductPriceUpdated
from orderflow.domain import orderflow
from orderflow.outbox.buffer import drain_events


def _validate_price(price):
    if price is None or price <= 0:
        raise ValidationError({"price": ["Price must be greater than zero"]})
    if round(price, 2) != price:
        raise ValidationError({"price": ["Price cannot have more than 2 decimal places"]})


@orderflow.aggregate
class Product:
    name = String(required=True, max_length=255)
    price = Float(required=True)
    image = String(max_length=1000)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def name_must_not_be_blank(self):
        if not self.name or not self.name.strip():
            raise ValidationError({"name": ["Product name cannot be empty"]})

    @invariant.post
    def price_must_be_positive_with_two_decimals(self):
        _validate_price(self.price)

    @classmethod
    def create(cls, name, price, image=None):
        now = datetime.now(UTC)
        product = cls(name=name, price=price, image=image, created_at=now, updated_at=now)
        product.raise_(ProductCreated(product_id=str(product.id), name=product.name, price=product.price))
        return product

    def update_price(self, new_price):
        """Change the price. Same price is a no-op and raises nothing."""
        _validate_price(new_price)
        if new_price == self.price:
            return

        old_price = self.price
        self.price = new_price
        self.updated_at = datetime.now(UTC)
        self.raise_(ProductPriceUpdated(product_id=str(self.id), old_price=old_price, new_price=new_price))

    def rename(self, name):
        self.name = name
        self.updated_at = datetime.now(UTC)

    def change_image(self, image):
        self.image = image
        self.updated_at = datetime.now(UTC)

    def drain_events(self):
        return drain_events(self)
