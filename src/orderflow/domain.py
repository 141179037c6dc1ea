"""Orderflow domain: users, products, carts, orders and inventory.

All bounded contexts share one domain so that an aggregate write and the
outbox rows announcing its events commit in the same unit of work. Events
leave the aggregates through the transactional outbox (``orderflow.outbox``)
and reach the saga participants via the outbox processor.
"""

import structlog
from protean.domain import Domain

orderflow = Domain(name="orderflow")

logger = structlog.get_logger(__name__)
