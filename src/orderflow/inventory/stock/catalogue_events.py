"""Inbound saga participant: every new product gets a stock record."""

import structlog
from shared.events.catalogue import PRODUCT_CREATED, ProductCreated
from shared.events.envelope import EventEnvelope

from orderflow.inventory.stock.stock import Inventory
from orderflow.inventory.stock.store import InventoryStore

logger = structlog.get_logger(__name__)


class ProductCreatedInventoryHandler:
    """Opens a zero-quantity inventory for a new product, once."""

    def __init__(self, inventory_store: InventoryStore):
        self.inventory_store = inventory_store

    def handle(self, event: EventEnvelope) -> None:
        if event.event_type != PRODUCT_CREATED:
            return

        product = ProductCreated.from_envelope(event)
        if self.inventory_store.find_by_product_id(product.product_id) is not None:
            logger.info("Inventory already exists for product", product_id=product.product_id)
            return

        inventory = Inventory.create(product_id=product.product_id, quantity=0)
        self.inventory_store.save(inventory)
        logger.info(
            "Inventory created for new product",
            product_id=product.product_id,
            inventory_id=str(inventory.id),
        )
