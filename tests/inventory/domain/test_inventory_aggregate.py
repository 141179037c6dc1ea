"""Tests for the Inventory aggregate: stock movements and alerts."""

import pytest
from orderflow.inventory.stock.events import (
    InventoryCreated,
    InventoryDecreased,
    InventoryIncreased,
    InventoryLowStock,
    InventoryOutOfStock,
)
from orderflow.inventory.stock.stock import Inventory
from protean.exceptions import ValidationError


def _inventory(quantity=20, threshold=10):
    inventory = Inventory.create(product_id="p-1", quantity=quantity, low_stock_threshold=threshold)
    inventory.drain_events()
    return inventory


def _event_types(inventory):
    return [type(e) for e in inventory.drain_events()]


class TestCreate:
    def test_records_exactly_one_creation_event(self):
        inventory = Inventory.create(product_id="p-1", quantity=5)

        events = inventory.drain_events()
        assert [type(e) for e in events] == [InventoryCreated]
        assert events[0].quantity == 5
        assert inventory.drain_events() == []

    def test_defaults(self):
        inventory = Inventory.create(product_id="p-1")
        assert inventory.quantity == 0
        assert inventory.low_stock_threshold == 10

    @pytest.mark.parametrize("quantity", [-1, 1.5, "3", None])
    def test_rejects_invalid_quantity(self, quantity):
        with pytest.raises(ValidationError):
            Inventory.create(product_id="p-1", quantity=quantity)


class TestDecrease:
    def test_reduces_by_exactly_the_amount(self):
        inventory = _inventory(quantity=20)

        inventory.decrease(3)

        assert inventory.quantity == 17
        (event,) = inventory.drain_events()
        assert isinstance(event, InventoryDecreased)
        assert (event.old_quantity, event.new_quantity, event.amount) == (20, 17, 3)

    @pytest.mark.parametrize("amount", [0, -2, 1.5, True, "2"])
    def test_rejects_invalid_amount_without_state_change(self, amount):
        inventory = _inventory(quantity=20)

        with pytest.raises(ValidationError):
            inventory.decrease(amount)

        assert inventory.quantity == 20
        assert inventory.drain_events() == []

    def test_rejects_more_than_available(self):
        inventory = _inventory(quantity=3)

        with pytest.raises(ValidationError) as exc:
            inventory.decrease(5)

        assert "Insufficient stock. Available: 3, Requested: 5" in str(exc.value.messages)
        assert inventory.quantity == 3
        assert inventory.drain_events() == []

    def test_integral_float_is_accepted(self):
        inventory = _inventory(quantity=5)
        inventory.decrease(2.0)
        assert inventory.quantity == 3


class TestStockAlerts:
    def test_reaching_zero_is_out_of_stock(self):
        inventory = _inventory(quantity=5, threshold=10)

        inventory.decrease(5)

        assert _event_types(inventory) == [InventoryDecreased, InventoryOutOfStock]

    def test_crossing_below_threshold_is_low_stock(self):
        inventory = _inventory(quantity=12, threshold=10)

        inventory.decrease(5)

        events = inventory.drain_events()
        assert [type(e) for e in events] == [InventoryDecreased, InventoryLowStock]
        assert events[1].quantity == 7
        assert events[1].threshold == 10

    def test_starting_exactly_at_threshold_still_crosses(self):
        inventory = _inventory(quantity=10, threshold=10)

        inventory.decrease(1)

        assert _event_types(inventory) == [InventoryDecreased, InventoryLowStock]

    def test_staying_at_or_above_threshold_raises_no_alert(self):
        inventory = _inventory(quantity=20, threshold=10)

        inventory.decrease(10)

        assert _event_types(inventory) == [InventoryDecreased]

    def test_already_below_threshold_raises_no_new_alert(self):
        inventory = _inventory(quantity=8, threshold=10)

        inventory.decrease(2)

        assert _event_types(inventory) == [InventoryDecreased]


class TestIncreaseAndLevels:
    def test_increase(self):
        inventory = _inventory(quantity=2)

        inventory.increase(8)

        assert inventory.quantity == 10
        (event,) = inventory.drain_events()
        assert isinstance(event, InventoryIncreased)
        assert event.amount == 8

    @pytest.mark.parametrize("amount", [0, -1, 2.5])
    def test_increase_rejects_invalid_amount(self, amount):
        inventory = _inventory(quantity=2)
        with pytest.raises(ValidationError):
            inventory.increase(amount)
        assert inventory.quantity == 2

    def test_update_quantity_up_and_down(self):
        inventory = _inventory(quantity=20, threshold=10)

        inventory.update_quantity(25)
        assert _event_types(inventory) == [InventoryIncreased]

        inventory.update_quantity(0)
        assert _event_types(inventory) == [InventoryDecreased, InventoryOutOfStock]
        assert inventory.quantity == 0

    def test_update_quantity_to_same_value_is_silent(self):
        inventory = _inventory(quantity=20)
        inventory.update_quantity(20)
        assert inventory.drain_events() == []

    def test_threshold_must_be_non_negative_integer(self):
        inventory = _inventory()

        inventory.update_low_stock_threshold(0)
        assert inventory.low_stock_threshold == 0

        with pytest.raises(ValidationError):
            inventory.update_low_stock_threshold(-1)

    def test_queries(self):
        inventory = _inventory(quantity=5, threshold=10)

        assert inventory.has_stock(5)
        assert not inventory.has_stock(6)
        assert inventory.is_available()
        assert inventory.is_low_stock()
