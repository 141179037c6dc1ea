"""Product store: read access for other contexts."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from orderflow.catalogue.product.product import Product
from orderflow.outbox.buffer import reconstituted
from orderflow.outbox.writer import OutboxWriter
from orderflow.utils.identifiers import ensure_uuid


class ProductStore:
    def __init__(self, writer: OutboxWriter | None = None):
        self.writer = writer or OutboxWriter()

    def get(self, product_id) -> Product:
        return reconstituted(current_domain.repository_for(Product).get(ensure_uuid(product_id, "product_id")))

    def find_by_id(self, product_id) -> Product | None:
        try:
            return self.get(product_id)
        except ObjectNotFoundError:
            return None

    def save(self, product: Product) -> Product:
        return self.writer.save(product)
