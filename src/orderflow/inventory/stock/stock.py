"""Inventory aggregate: on-hand stock for one product.

Quantity never goes negative. A decrease is all-or-nothing: an amount larger
than the current quantity is rejected and leaves the record untouched.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer

from orderflow.domain import orderflow
from orderflow.inventory.stock.events import (
    InventoryCreated,
    InventoryDecreased,
    InventoryIncreased,
    InventoryLowStock,
    InventoryOutOfStock,
)
from orderflow.outbox.buffer import drain_events

DEFAULT_LOW_STOCK_THRESHOLD = 10


def _whole_number(value, field, minimum):
    """Accept ints (and integral floats) no smaller than ``minimum``."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValidationError({field: [f"{field} must be an integer"]})
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError({field: [f"{field} must be an integer"]})
        value = int(value)
    if value < minimum:
        qualifier = "positive" if minimum > 0 else "non-negative"
        raise ValidationError({field: [f"{field} must be a {qualifier} integer"]})
    return value


@orderflow.aggregate
class Inventory:
    product_id = Identifier(required=True, unique=True)
    quantity = Integer(default=0, min_value=0)
    low_stock_threshold = Integer(default=DEFAULT_LOW_STOCK_THRESHOLD, min_value=0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def quantity_cannot_be_negative(self):
        if self.quantity is not None and self.quantity < 0:
            raise ValidationError({"quantity": ["Quantity cannot be negative"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, product_id, quantity=0, low_stock_threshold=DEFAULT_LOW_STOCK_THRESHOLD):
        quantity = _whole_number(quantity, "quantity", 0)
        low_stock_threshold = _whole_number(low_stock_threshold, "low_stock_threshold", 0)

        now = datetime.now(UTC)
        inventory = cls(
            product_id=str(product_id),
            quantity=quantity,
            low_stock_threshold=low_stock_threshold,
            created_at=now,
            updated_at=now,
        )
        inventory.raise_(
            InventoryCreated(
                inventory_id=str(inventory.id),
                product_id=str(product_id),
                quantity=quantity,
            )
        )
        return inventory

    # -------------------------------------------------------------------
    # Stock movements
    # -------------------------------------------------------------------
    def increase(self, amount):
        amount = _whole_number(amount, "amount", 1)

        old_quantity = self.quantity
        self.quantity = old_quantity + amount
        self.updated_at = datetime.now(UTC)

        self.raise_(
            InventoryIncreased(
                inventory_id=str(self.id),
                product_id=str(self.product_id),
                old_quantity=old_quantity,
                new_quantity=self.quantity,
                amount=amount,
            )
        )

    def decrease(self, amount):
        amount = _whole_number(amount, "amount", 1)
        if amount > self.quantity:
            raise ValidationError(
                {"quantity": [f"Insufficient stock. Available: {self.quantity}, Requested: {amount}"]}
            )

        old_quantity = self.quantity
        self.quantity = old_quantity - amount
        self.updated_at = datetime.now(UTC)

        self.raise_(
            InventoryDecreased(
                inventory_id=str(self.id),
                product_id=str(self.product_id),
                old_quantity=old_quantity,
                new_quantity=self.quantity,
                amount=amount,
            )
        )
        self._raise_stock_alerts(old_quantity)

    def update_quantity(self, new_quantity):
        """Set the stock level, announcing it as an increase or a decrease."""
        new_quantity = _whole_number(new_quantity, "quantity", 0)
        if new_quantity > self.quantity:
            self.increase(new_quantity - self.quantity)
        elif new_quantity < self.quantity:
            self.decrease(self.quantity - new_quantity)

    def update_low_stock_threshold(self, threshold):
        self.low_stock_threshold = _whole_number(threshold, "low_stock_threshold", 0)
        self.updated_at = datetime.now(UTC)

    def _raise_stock_alerts(self, old_quantity):
        if self.quantity == 0:
            self.raise_(InventoryOutOfStock(inventory_id=str(self.id), product_id=str(self.product_id)))
        elif self.quantity < self.low_stock_threshold <= old_quantity:
            self.raise_(
                InventoryLowStock(
                    inventory_id=str(self.id),
                    product_id=str(self.product_id),
                    quantity=self.quantity,
                    threshold=self.low_stock_threshold,
                )
            )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def has_stock(self, required) -> bool:
        return self.quantity >= required

    def is_available(self) -> bool:
        return self.quantity > 0

    def is_low_stock(self) -> bool:
        return self.quantity < self.low_stock_threshold

    def drain_events(self):
        return drain_events(self)
