"""Stock management commands."""

from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer
from protean.utils.mixins import handle

from orderflow.domain import orderflow
from orderflow.inventory.stock.stock import DEFAULT_LOW_STOCK_THRESHOLD, Inventory
from orderflow.inventory.stock.store import InventoryStore


@orderflow.command(part_of="Inventory")
class CreateInventory:
    product_id = Identifier(required=True)
    quantity = Integer(default=0)
    low_stock_threshold = Integer(default=DEFAULT_LOW_STOCK_THRESHOLD)


@orderflow.command(part_of="Inventory")
class IncreaseStock:
    product_id = Identifier(required=True)
    amount = Integer(required=True)


@orderflow.command(part_of="Inventory")
class DecreaseStock:
    product_id = Identifier(required=True)
    amount = Integer(required=True)


@orderflow.command(part_of="Inventory")
class SetStockLevel:
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@orderflow.command(part_of="Inventory")
class UpdateLowStockThreshold:
    product_id = Identifier(required=True)
    threshold = Integer(required=True)


@orderflow.command_handler(part_of=Inventory)
class InventoryCommandHandler:
    @handle(CreateInventory)
    def create_inventory(self, command: CreateInventory):
        store = InventoryStore()
        if store.find_by_product_id(command.product_id) is not None:
            raise ValidationError({"product_id": ["Inventory already exists for this product"]})

        inventory = Inventory.create(
            product_id=command.product_id,
            quantity=command.quantity or 0,
            low_stock_threshold=(
                command.low_stock_threshold if command.low_stock_threshold is not None else DEFAULT_LOW_STOCK_THRESHOLD
            ),
        )
        store.save(inventory)
        return str(inventory.id)

    @handle(IncreaseStock)
    def increase_stock(self, command: IncreaseStock):
        store = InventoryStore()
        inventory = store.get_by_product_id(command.product_id)
        inventory.increase(command.amount)
        store.save(inventory)
        return inventory.quantity

    @handle(DecreaseStock)
    def decrease_stock(self, command: DecreaseStock):
        store = InventoryStore()
        inventory = store.get_by_product_id(command.product_id)
        inventory.decrease(command.amount)
        store.save(inventory)
        return inventory.quantity

    @handle(SetStockLevel)
    def set_stock_level(self, command: SetStockLevel):
        store = InventoryStore()
        inventory = store.get_by_product_id(command.product_id)
        inventory.update_quantity(command.quantity)
        store.save(inventory)
        return inventory.quantity

    @handle(UpdateLowStockThreshold)
    def update_threshold(self, command: UpdateLowStockThreshold):
        store = InventoryStore()
        inventory = store.get_by_product_id(command.product_id)
        inventory.update_low_stock_threshold(command.threshold)
        store.save(inventory)
