"""Cart aggregate: one per user, turned into an order at checkout.

Each line keeps a snapshot of the product (name, price, image) taken when
it was added. Catalogue changes never reach existing lines, so the price
a user saw is the price the order is placed at.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from orderflow.domain import orderflow
from orderflow.ordering.cart.events import (
    CartCleared,
    CartCreated,
    CartItemAdded,
    CartItemRemoved,
    CartItemUpdated,
)
from orderflow.outbox.buffer import drain_events


def _cart_quantity(quantity):
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError({"quantity": ["Quantity must be a positive integer"]})
    return quantity


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@orderflow.value_object(part_of="Cart")
class ProductSnapshot:
    """Product details as they were when the line was added."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    image = String(max_length=1000)

    @invariant.post
    def name_must_not_be_blank(self):
        if not self.name or not self.name.strip():
            raise ValidationError({"name": ["Product name cannot be empty"]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@orderflow.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    product_price = Float(required=True, min_value=0.0)
    product_image = String(max_length=1000)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()

    @property
    def snapshot(self) -> ProductSnapshot:
        return ProductSnapshot(
            product_id=self.product_id,
            name=self.product_name,
            price=self.product_price,
            image=self.product_image,
        )

    @property
    def line_total(self) -> float:
        return round(self.product_price * self.quantity, 2)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@orderflow.aggregate
class Cart:
    user_id = Identifier(required=True, unique=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        cart = cls(user_id=str(user_id), created_at=now, updated_at=now)
        cart.raise_(CartCreated(cart_id=str(cart.id), user_id=str(user_id)))
        return cart

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def _find_item(self, item_id):
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ValidationError({"item_id": ["Item not found in cart"]})
        return item

    def add_item(self, snapshot: ProductSnapshot, quantity):
        """Add a product line, or grow the existing line for the same product."""
        quantity = _cart_quantity(quantity)
        now = datetime.now(UTC)

        existing = next((i for i in self.items if str(i.product_id) == str(snapshot.product_id)), None)
        if existing is not None:
            old_quantity = existing.quantity
            existing.quantity = old_quantity + quantity
            self.updated_at = now
            self.raise_(
                CartItemUpdated(
                    cart_id=str(self.id),
                    item_id=str(existing.id),
                    product_id=str(existing.product_id),
                    old_quantity=old_quantity,
                    new_quantity=existing.quantity,
                )
            )
            return existing

        item = CartItem(
            product_id=str(snapshot.product_id),
            product_name=snapshot.name,
            product_price=snapshot.price,
            product_image=snapshot.image,
            quantity=quantity,
            added_at=now,
        )
        self.add_items(item)
        self.updated_at = now
        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=str(item.id),
                product=snapshot.to_dict(),
                quantity=quantity,
            )
        )
        return item

    def update_item_quantity(self, item_id, quantity):
        quantity = _cart_quantity(quantity)
        item = self._find_item(item_id)
        if item.quantity == quantity:
            return

        old_quantity = item.quantity
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartItemUpdated(
                cart_id=str(self.id),
                item_id=str(item.id),
                product_id=str(item.product_id),
                old_quantity=old_quantity,
                new_quantity=quantity,
            )
        )

    def remove_item(self, item_id):
        item = self._find_item(item_id)
        self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                item_id=str(item_id),
                product_id=str(item.product_id),
            )
        )

    def clear(self):
        """Empty the cart. Clearing an empty cart raises nothing."""
        if self.is_empty():
            return

        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartCleared(cart_id=str(self.id)))

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def is_empty(self) -> bool:
        return not self.items

    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    def total_price(self) -> float:
        return round(sum(item.line_total for item in self.items), 2)

    def drain_events(self):
        return drain_events(self)
