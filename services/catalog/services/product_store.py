"""
Product store.

In-memory catalog shared by all requests of the process. There is no
concurrency control; ids come from a monotonic counter so they stay unique
within one process even if entries are later removed.
"""

import itertools
import logging
from typing import Any, Iterable, List, Mapping, Optional, Protocol

from ..models import Product

logger = logging.getLogger("catalog.product_store")

DEFAULT_PRODUCTS = (
    Product(id=1, name="Laptop", price=3500),
    Product(id=2, name="Smartphone", price=1800),
    Product(id=3, name="Headphones", price=350),
)


class ProductStore(Protocol):
    async def list(self) -> List[Product]: ...

    async def get(self, product_id: int) -> Optional[Product]: ...

    async def create(self, fields: Mapping[str, Any]) -> Product: ...


class InMemoryProductStore:
    def __init__(self, products: Iterable[Product] = DEFAULT_PRODUCTS):
        self._products: List[Product] = [p.model_copy() for p in products]
        start = max((p.id for p in self._products), default=0) + 1
        self._ids = itertools.count(start)

    async def list(self) -> List[Product]:
        return list(self._products)

    async def get(self, product_id: int) -> Optional[Product]:
        for product in self._products:
            if product.id == product_id:
                return product
        return None

    async def create(self, fields: Mapping[str, Any]) -> Product:
        product = Product(id=next(self._ids), name=fields["name"], price=fields["price"])
        self._products.append(product)
        logger.info("Created product %s", product.id, extra={"product_id": product.id})
        return product
