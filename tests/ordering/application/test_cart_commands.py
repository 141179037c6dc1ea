"""Tests for cart commands."""

import pytest
from orderflow.catalogue.product.product import Product
from orderflow.catalogue.product.store import ProductStore
from orderflow.ordering.cart.management import (
    AddItemToCart,
    ClearCart,
    CreateCart,
    RemoveItemFromCart,
    UpdateCartItemQuantity,
)
from orderflow.ordering.cart.store import CartStore
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

USER_ID = "2a3b4c5d-6e7f-4a8b-9c0d-1e2f3a4b5c6d"


def _process(command):
    return current_domain.process(command, asynchronous=False)


@pytest.fixture
def product():
    product = Product.create(name="Desk Lamp", price=19.99, image="lamp.png")
    ProductStore().save(product)
    return product


@pytest.fixture
def cart_id():
    return _process(CreateCart(user_id=USER_ID))


def test_one_cart_per_user(cart_id):
    with pytest.raises(ValidationError):
        _process(CreateCart(user_id=USER_ID))


def test_add_item_snapshots_the_product(cart_id, product):
    _process(AddItemToCart(cart_id=cart_id, product_id=str(product.id), quantity=2))

    (item,) = CartStore().get(cart_id).items
    assert item.product_name == "Desk Lamp"
    assert item.product_price == 19.99
    assert item.product_image == "lamp.png"
    assert item.quantity == 2


def test_adding_the_same_product_merges_lines(cart_id, product, outbox_log):
    _process(AddItemToCart(cart_id=cart_id, product_id=str(product.id), quantity=2))
    _process(AddItemToCart(cart_id=cart_id, product_id=str(product.id), quantity=3))

    (item,) = CartStore().get(cart_id).items
    assert item.quantity == 5
    assert outbox_log.of_type("CartItemUpdated")


def test_unknown_product_cannot_be_added(cart_id):
    with pytest.raises(ObjectNotFoundError):
        _process(
            AddItemToCart(cart_id=cart_id, product_id="8b7a6c5d-4e3f-4a2b-9c1d-0e9f8a7b6c5d", quantity=1)
        )


def test_update_remove_and_clear(cart_id, product):
    item_id = _process(AddItemToCart(cart_id=cart_id, product_id=str(product.id), quantity=1))

    _process(UpdateCartItemQuantity(cart_id=cart_id, item_id=item_id, quantity=4))
    assert CartStore().get(cart_id).total_items() == 4

    _process(RemoveItemFromCart(cart_id=cart_id, item_id=item_id))
    assert CartStore().get(cart_id).is_empty()

    _process(AddItemToCart(cart_id=cart_id, product_id=str(product.id), quantity=1))
    _process(ClearCart(cart_id=cart_id))
    assert CartStore().get(cart_id).is_empty()
