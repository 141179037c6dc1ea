"""Startup wiring: the handler registry and the outbox processor.

The registry is assembled here, in one place and in a fixed order, sealed,
and then handed to the processor. Nothing registers handlers as an import
side effect.
"""

import structlog
from shared.events.catalogue import PRODUCT_CREATED
from shared.events.identity import USER_CREATED
from shared.events.ordering import ORDER_CONFIRMED, ORDER_CREATED, ORDER_FAILED

from orderflow.inventory.stock.catalogue_events import ProductCreatedInventoryHandler
from orderflow.inventory.stock.ordering_events import OrderCreatedInventoryHandler
from orderflow.inventory.stock.store import InventoryStore
from orderflow.ordering.cart.identity_events import UserCreatedCartHandler
from orderflow.ordering.cart.order_events import CartClearOnOrderConfirmedHandler
from orderflow.ordering.cart.store import CartStore
from orderflow.ordering.order.inventory_events import OrderConfirmedHandler, OrderFailedHandler
from orderflow.ordering.order.store import OrderStore
from orderflow.outbox.processor import OutboxProcessor, outbox_settings
from orderflow.outbox.registry import EventHandlerRegistry
from orderflow.outbox.store import OutboxStore
from orderflow.outbox.writer import OutboxWriter

logger = structlog.get_logger(__name__)


def build_registry(writer: OutboxWriter | None = None) -> EventHandlerRegistry:
    writer = writer or OutboxWriter()
    inventory_store = InventoryStore(writer)
    order_store = OrderStore(writer)
    cart_store = CartStore(writer)

    registry = EventHandlerRegistry()

    # Inventory
    registry.register(ORDER_CREATED, OrderCreatedInventoryHandler(inventory_store, writer))
    registry.register(PRODUCT_CREATED, ProductCreatedInventoryHandler(inventory_store))

    # Ordering: the order's status flips before the cart safety net runs
    registry.register(ORDER_CONFIRMED, OrderConfirmedHandler(order_store))
    registry.register(ORDER_CONFIRMED, CartClearOnOrderConfirmedHandler(cart_store))
    registry.register(ORDER_FAILED, OrderFailedHandler(order_store))
    registry.register(USER_CREATED, UserCreatedCartHandler(cart_store))

    logger.info("Event handlers registered", event_types=registry.event_types())
    return registry.seal()


def build_processor(registry: EventHandlerRegistry | None = None) -> OutboxProcessor:
    """Processor over the domain's outbox, tuned from ``[custom.outbox]``.

    Must be called inside an active domain context.
    """
    settings = outbox_settings()
    return OutboxProcessor(
        store=OutboxStore(),
        registry=registry or build_registry(),
        batch_size=settings["batch_size"],
        max_retries=settings["max_retries"],
    )
