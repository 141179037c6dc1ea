"""Inventory store: stock records looked up by product."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from orderflow.inventory.stock.stock import Inventory
from orderflow.outbox.buffer import reconstituted
from orderflow.outbox.writer import OutboxWriter
from orderflow.utils.identifiers import ensure_uuid


class InventoryStore:
    def __init__(self, writer: OutboxWriter | None = None):
        self.writer = writer or OutboxWriter()

    def find_by_id(self, inventory_id) -> Inventory | None:
        try:
            return reconstituted(
                current_domain.repository_for(Inventory).get(ensure_uuid(inventory_id, "inventory_id"))
            )
        except ObjectNotFoundError:
            return None

    def find_by_product_id(self, product_id) -> Inventory | None:
        results = current_domain.repository_for(Inventory)._dao.query.filter(product_id=str(product_id)).all()
        return reconstituted(results.first) if results.items else None

    def get_by_product_id(self, product_id) -> Inventory:
        inventory = self.find_by_product_id(product_id)
        if inventory is None:
            raise ObjectNotFoundError(f"Inventory not found for product {product_id}")
        return inventory

    def save(self, inventory: Inventory) -> Inventory:
        return self.writer.save(inventory)
