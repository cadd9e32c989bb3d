"""
Catalog Interfaces
Read-only access to the product store used by the query engine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable, List, Optional

from ..models import ProductRecord

if TYPE_CHECKING:
    from ..search.filters import ProductFilters


class CatalogLookup(ABC):
    """Resolve products by id."""

    @abstractmethod
    def get(self, product_id: str) -> Optional[ProductRecord]:
        """Return the product, or None when the id does not resolve."""

    def get_many(self, product_ids: Iterable[str]) -> List[ProductRecord]:
        """
        Resolve several ids, keeping the order given and skipping ids that
        do not resolve.
        """
        products = []
        for product_id in product_ids:
            product = self.get(product_id)
            if product is not None:
                products.append(product)
        return products


class ProductCatalog(CatalogLookup):
    """
    Predicate-based access to the product store.

    Implementations return matches in catalog order (ascending id) and wrap
    storage failures in DependencyError.
    """

    @abstractmethod
    def query(self, filters: "ProductFilters", limit: Optional[int] = None) -> List[ProductRecord]:
        """
        Fetch every product matching the filters.

        Args:
            filters: Canonical predicate set
            limit: Optional cap on the number of products

        Returns:
            Matching products in ascending id order
        """

    def count(self, filters: "ProductFilters") -> int:
        return len(self.query(filters))
