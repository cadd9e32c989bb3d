"""
In-memory catalog used for tests, fixtures and small deployments.
"""

import logging
import threading
from typing import Dict, Iterable, List, Optional, Union

from ..models import ProductRecord
from ..search.filters import ProductFilters
from .base import ProductCatalog

logger = logging.getLogger(__name__)


class InMemoryCatalog(ProductCatalog):
    """
    Dict-backed product catalog.

    Products may be given as ProductRecord instances or as raw dicts (camel
    or snake case keys).
    """

    def __init__(self, products: Optional[Iterable[Union[ProductRecord, dict]]] = None):
        self._products: Dict[str, ProductRecord] = {}
        self._lock = threading.RLock()

        for product in products or []:
            self.add(product)

    def add(self, product: Union[ProductRecord, dict]) -> ProductRecord:
        """Insert or replace a product."""
        if not isinstance(product, ProductRecord):
            product = ProductRecord.model_validate(product)

        with self._lock:
            self._products[product.id] = product

        return product

    def remove(self, product_id: str) -> bool:
        with self._lock:
            return self._products.pop(product_id, None) is not None

    def get(self, product_id: str) -> Optional[ProductRecord]:
        with self._lock:
            return self._products.get(product_id)

    def query(self, filters: ProductFilters, limit: Optional[int] = None) -> List[ProductRecord]:
        with self._lock:
            snapshot = [self._products[pid] for pid in sorted(self._products)]

        predicates = filters.build_filters()

        results = []
        for product in snapshot:
            if limit is not None and len(results) >= limit:
                break
            if all(p.matches(product) for p in predicates):
                results.append(product)

        return results

    def __len__(self) -> int:
        return len(self._products)
