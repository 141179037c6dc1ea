"""Tests for the shared event contracts and the generic envelope."""

from datetime import UTC, datetime

import pytest
from shared.events.catalogue import ProductCreated
from shared.events.envelope import EventEnvelope
from shared.events.identity import UserCreated
from shared.events.ordering import OrderConfirmed, OrderCreated, OrderFailed, OrderLine


def _envelope(payload, **kwargs):
    return EventEnvelope.from_payload(payload, **kwargs)


class TestEnvelope:
    def test_rebuilds_type_and_timestamp(self):
        envelope = _envelope({"event_type": "Ping", "occurred_at": "2026-05-01T10:00:00+00:00", "x": 1})

        assert envelope.event_type == "Ping"
        assert envelope.occurred_at == datetime(2026, 5, 1, 10, tzinfo=UTC)
        assert envelope.aggregate_id == "Ping"

    def test_column_values_override_payload(self):
        envelope = _envelope({"event_type": "Old"}, event_type="New", aggregate_id="agg-1", record_id="r-1")

        assert envelope.event_type == "New"
        assert envelope.payload["event_type"] == "New"
        assert envelope.aggregate_id == "agg-1"
        assert envelope.record_id == "r-1"

    def test_fields_are_readable_as_attributes_and_by_key(self):
        envelope = _envelope({"event_type": "Ping", "order_id": "o-1"})

        assert envelope.order_id == "o-1"
        assert envelope.get("order_id") == "o-1"
        assert envelope.get("missing", "default") == "default"

    def test_missing_attribute_raises(self):
        envelope = _envelope({"event_type": "Ping"})

        with pytest.raises(AttributeError):
            envelope.missing

    def test_payload_without_type_is_rejected(self):
        with pytest.raises(ValueError):
            _envelope({"order_id": "o-1"})


class TestContracts:
    def test_order_created(self):
        envelope = _envelope(
            {
                "event_type": "OrderCreated",
                "occurred_at": "2026-05-01T10:00:00+00:00",
                "order_id": "o-1",
                "user_id": "u-1",
                "items": [
                    {"product_id": "p-1", "product_name": "Lamp", "product_price": 10.0, "quantity": 2},
                    {"product_id": "p-2", "product_name": "Desk", "product_price": 99.5, "quantity": 1},
                ],
                "total_price": 119.5,
                "source_cart_id": "c-1",
            }
        )

        event = OrderCreated.from_envelope(envelope)

        assert event.order_id == "o-1"
        assert event.items == (
            OrderLine(product_id="p-1", product_name="Lamp", product_price=10.0, quantity=2),
            OrderLine(product_id="p-2", product_name="Desk", product_price=99.5, quantity=1),
        )
        assert event.total_price == 119.5
        assert event.source_cart_id == "c-1"

    def test_order_created_without_items(self):
        event = OrderCreated.from_envelope(_envelope({"event_type": "OrderCreated", "order_id": "o-1"}))
        assert event.items == ()

    def test_order_confirmed_and_failed(self):
        confirmed = OrderConfirmed.from_envelope(
            _envelope({"event_type": "OrderConfirmed", "order_id": "o-1", "source_cart_id": "c-1"})
        )
        failed = OrderFailed.from_envelope(_envelope({"event_type": "OrderFailed", "order_id": "o-1"}))

        assert confirmed.source_cart_id == "c-1"
        assert failed.reason is None

    def test_product_and_user_created(self):
        product = ProductCreated.from_envelope(
            _envelope({"event_type": "ProductCreated", "product_id": "p-1", "name": "Lamp", "price": 20})
        )
        user = UserCreated.from_envelope(
            _envelope({"event_type": "UserCreated", "user_id": "u-1", "email": "ada@example.com"})
        )

        assert product.price == 20.0
        assert user.email == "ada@example.com"
        assert user.name is None


class TestPublishedNames:
    """Contract names must match the event types written to the outbox."""

    def test_inventory_names(self):
        from orderflow.inventory.stock import events
        from shared.events import inventory

        for name in (
            inventory.INVENTORY_CREATED,
            inventory.INVENTORY_INCREASED,
            inventory.INVENTORY_DECREASED,
            inventory.INVENTORY_LOW_STOCK,
            inventory.INVENTORY_OUT_OF_STOCK,
        ):
            assert getattr(events, name).__name__ == name

    def test_ordering_names(self):
        from orderflow.ordering.cart import events as cart_events
        from orderflow.ordering.order import events as order_events
        from shared.events import ordering

        for name in (
            ordering.ORDER_CREATED,
            ordering.ORDER_CONFIRMED,
            ordering.ORDER_FAILED,
            ordering.ORDER_CANCELLED,
            ordering.ORDER_STATUS_CHANGED,
        ):
            assert hasattr(order_events, name)
        for name in (
            ordering.CART_CREATED,
            ordering.CART_ITEM_ADDED,
            ordering.CART_ITEM_UPDATED,
            ordering.CART_ITEM_REMOVED,
            ordering.CART_CLEARED,
        ):
            assert hasattr(cart_events, name)

    def test_identity_and_catalogue_names(self):
        from orderflow.catalogue.product import events as product_events
        from orderflow.identity.user import events as user_events
        from shared.events import catalogue, identity

        for name in (identity.USER_CREATED, identity.USER_UPDATED, identity.USER_EMAIL_CHANGED):
            assert hasattr(user_events, name)
        for name in (catalogue.PRODUCT_CREATED, catalogue.PRODUCT_PRICE_UPDATED):
            assert hasattr(product_events, name)
