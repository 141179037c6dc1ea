"""Catalogue commands: adding products and changing them."""

from protean.fields import Float, Identifier, String
from protean.utils.mixins import handle

from orderflow.catalogue.product.product import Product
from orderflow.catalogue.product.store import ProductStore
from orderflow.domain import orderflow


@orderflow.command(part_of="Product")
class CreateProduct:
    name = String(required=True, max_length=255)
    price = Float(required=True)
    image = String(max_length=1000)


@orderflow.command(part_of="Product")
class UpdateProductPrice:
    product_id = Identifier(required=True)
    price = Float(required=True)


@orderflow.command(part_of="Product")
class UpdateProductDetails:
    product_id = Identifier(required=True)
    name = String(max_length=255)
    image = String(max_length=1000)


@orderflow.command_handler(part_of=Product)
class ProductCommandHandler:
    @handle(CreateProduct)
    def create_product(self, command: CreateProduct):
        product = Product.create(name=command.name, price=command.price, image=command.image)
        ProductStore().save(product)
        return str(product.id)

    @handle(UpdateProductPrice)
    def update_price(self, command: UpdateProductPrice):
        store = ProductStore()
        product = store.get(command.product_id)
        product.update_price(command.price)
        store.save(product)

    @handle(UpdateProductDetails)
    def update_details(self, command: UpdateProductDetails):
        store = ProductStore()
        product = store.get(command.product_id)
        if command.name is not None:
            product.rename(command.name)
        if command.image is not None:
            product.change_image(command.image)
        store.save(product)
