"""Tests for event serialization and aggregate-id extraction."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

import pytest
from orderflow.identity.user.events import UserCreated
from orderflow.ordering.cart.cart import ProductSnapshot
from orderflow.ordering.order.events import OrderCreated
from orderflow.outbox.serialization import (
    event_type_of,
    extract_aggregate_id,
    serialize_event,
    to_primitive,
)


class Colour(Enum):
    RED = "red"


@dataclass
class Point:
    x: int
    y: int


@dataclass(frozen=True)
class SystemAnnouncement:
    message: str
    occurred_at: datetime | None = None


@dataclass(frozen=True)
class CartPing:
    cart_id: str
    user_id: str


class TestToPrimitive:
    def test_scalars_pass_through(self):
        assert to_primitive(None) is None
        assert to_primitive(3) == 3
        assert to_primitive("x") == "x"
        assert to_primitive(True) is True

    def test_dates_become_iso_strings(self):
        moment = datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)
        assert to_primitive(moment) == "2026-01-02T03:04:05+00:00"
        assert to_primitive(date(2026, 1, 2)) == "2026-01-02"

    def test_wrappers_reduce_to_raw_values(self):
        uid = UUID("12345678-1234-5678-1234-567812345678")
        assert to_primitive(uid) == "12345678-1234-5678-1234-567812345678"
        assert to_primitive(Decimal("9.99")) == 9.99
        assert to_primitive(Colour.RED) == "red"

    def test_collections_are_converted_element_wise(self):
        moment = datetime(2026, 1, 2, tzinfo=UTC)
        value = {"when": [moment, (Colour.RED,)], 1: {"nested": Decimal("1.5")}}

        assert to_primitive(value) == {
            "when": ["2026-01-02T00:00:00+00:00", ["red"]],
            "1": {"nested": 1.5},
        }

    def test_data_objects_are_serialized_field_by_field(self):
        assert to_primitive([Point(1, 2)]) == [{"x": 1, "y": 2}]

    def test_value_objects_are_serialized_field_by_field(self):
        snapshot = ProductSnapshot(product_id="p-1", name="Lamp", price=19.5, image=None)
        assert to_primitive(snapshot) == {"product_id": "p-1", "name": "Lamp", "price": 19.5, "image": None}

    def test_unknown_types_are_rejected(self):
        with pytest.raises(TypeError):
            to_primitive(object())


class TestSerializeEvent:
    def test_payload_has_type_timestamp_and_fields(self):
        event = UserCreated(user_id="u-1", email="ada@example.com", name="Ada")

        payload = serialize_event(event)

        assert payload["event_type"] == "UserCreated"
        assert isinstance(datetime.fromisoformat(payload["occurred_at"]), datetime)
        assert payload["user_id"] == "u-1"
        assert payload["email"] == "ada@example.com"
        assert payload["name"] == "Ada"

    def test_private_metadata_is_not_serialized(self):
        payload = serialize_event(UserCreated(user_id="u-1", email="ada@example.com"))
        assert not [key for key in payload if key.startswith("_")]

    def test_nested_items_are_serialized(self):
        event = OrderCreated(
            order_id="o-1",
            user_id="u-1",
            items=[{"product_id": "p-1", "product_name": "Lamp", "product_price": 10.0, "quantity": 2}],
            total_price=20.0,
        )

        payload = serialize_event(event)

        assert payload["items"] == [{"product_id": "p-1", "product_name": "Lamp", "product_price": 10.0, "quantity": 2}]
        assert payload["source_cart_id"] is None

    def test_dataclass_events_without_timestamp_get_one(self):
        payload = serialize_event(SystemAnnouncement(message="hello"))

        assert payload["event_type"] == "SystemAnnouncement"
        assert isinstance(datetime.fromisoformat(payload["occurred_at"]), datetime)
        assert payload["message"] == "hello"


class TestAggregateIdExtraction:
    def test_uses_domain_id_field(self):
        assert extract_aggregate_id(UserCreated(user_id="u-1", email="ada@example.com")) == "u-1"

    def test_order_id_wins_over_user_id(self):
        event = OrderCreated(
            order_id="o-1",
            user_id="u-1",
            items=[{"product_id": "p-1", "product_name": "Lamp", "product_price": 1.0, "quantity": 1}],
            total_price=1.0,
        )
        assert extract_aggregate_id(event) == "o-1"

    def test_cart_id_wins_over_user_id(self):
        assert extract_aggregate_id(CartPing(cart_id="c-1", user_id="u-1")) == "c-1"

    def test_falls_back_to_event_type(self):
        event = SystemAnnouncement(message="hello")
        assert extract_aggregate_id(event) == "SystemAnnouncement"
        assert event_type_of(event) == "SystemAnnouncement"
