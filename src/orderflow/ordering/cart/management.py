"""Cart commands: opening a cart and managing its lines."""

from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer
from protean.utils.mixins import handle

from orderflow.catalogue.product.store import ProductStore
from orderflow.domain import orderflow
from orderflow.ordering.cart.cart import Cart, ProductSnapshot
from orderflow.ordering.cart.store import CartStore


@orderflow.command(part_of="Cart")
class CreateCart:
    user_id = Identifier(required=True)


@orderflow.command(part_of="Cart")
class AddItemToCart:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@orderflow.command(part_of="Cart")
class UpdateCartItemQuantity:
    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True)


@orderflow.command(part_of="Cart")
class RemoveItemFromCart:
    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)


@orderflow.command(part_of="Cart")
class ClearCart:
    cart_id = Identifier(required=True)


@orderflow.command_handler(part_of=Cart)
class CartCommandHandler:
    @handle(CreateCart)
    def create_cart(self, command: CreateCart):
        store = CartStore()
        if store.find_by_user_id(command.user_id) is not None:
            raise ValidationError({"user_id": ["User already has a cart"]})

        cart = Cart.create(user_id=command.user_id)
        store.save(cart)
        return str(cart.id)

    @handle(AddItemToCart)
    def add_item(self, command: AddItemToCart):
        store = CartStore()
        cart = store.get(command.cart_id)
        product = ProductStore().get(command.product_id)

        item = cart.add_item(
            ProductSnapshot(
                product_id=str(product.id),
                name=product.name,
                price=product.price,
                image=product.image,
            ),
            command.quantity,
        )
        store.save(cart)
        return str(item.id)

    @handle(UpdateCartItemQuantity)
    def update_quantity(self, command: UpdateCartItemQuantity):
        store = CartStore()
        cart = store.get(command.cart_id)
        cart.update_item_quantity(command.item_id, command.quantity)
        store.save(cart)

    @handle(RemoveItemFromCart)
    def remove_item(self, command: RemoveItemFromCart):
        store = CartStore()
        cart = store.get(command.cart_id)
        cart.remove_item(command.item_id)
        store.save(cart)

    @handle(ClearCart)
    def clear_cart(self, command: ClearCart):
        store = CartStore()
        cart = store.get(command.cart_id)
        cart.clear()
        store.save(cart)
