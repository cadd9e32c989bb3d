"""
Candidate Retrieval
Apply a predicate set to the catalog and hand the full matching set to
ranking and faceting.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

from ..models import ProductRecord
from .deadline import Deadline
from .filters import ProductFilters

if TYPE_CHECKING:
    from ..catalog.base import ProductCatalog

logger = logging.getLogger(__name__)


@dataclass
class CandidateSet:
    """
    All products passing the filters, in catalog (id-ascending) order.

    Shared by ranking, faceting and counting; never a paginated slice.
    """

    products: List[ProductRecord] = field(default_factory=list)
    retrieval_time_ms: float = 0.0

    @property
    def count(self) -> int:
        return len(self.products)

    def __len__(self) -> int:
        return len(self.products)


class CandidateRetriever:
    """
    Runs catalog queries for every entry point.

    A deadline-bounded query runs on its own short-lived worker thread. If
    the deadline passes first, the request fails and that thread is left to
    finish on its own; it never holds up later requests.
    """

    def __init__(self, catalog: "ProductCatalog"):
        """
        Initialize candidate retriever.

        Args:
            catalog: Catalog collaborator to query
        """
        self.catalog = catalog

    def retrieve(
        self,
        filters: ProductFilters,
        deadline: Optional[Deadline] = None,
        limit: Optional[int] = None,
    ) -> CandidateSet:
        """
        Fetch every product matching the filters.

        Args:
            filters: Canonical predicate set
            deadline: Optional request deadline
            limit: Optional cap on returned products (autocomplete only)

        Returns:
            CandidateSet in catalog order

        Raises:
            DependencyError: Catalog failure, propagated unchanged
            SearchTimeoutError: Deadline expired while waiting on the catalog
        """
        start_time = time.time()

        if deadline is None or deadline.remaining() is None:
            products = self.catalog.query(filters, limit)
        else:
            deadline.check("catalog query")
            products = self._query_with_deadline(filters, limit, deadline)

        elapsed_ms = (time.time() - start_time) * 1000
        logger.debug(f"Retrieved {len(products)} candidates in {elapsed_ms:.2f}ms")

        return CandidateSet(products=list(products), retrieval_time_ms=elapsed_ms)

    def _query_with_deadline(
        self, filters: ProductFilters, limit: Optional[int], deadline: Deadline
    ) -> List[ProductRecord]:
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="catalog-query")
        try:
            future = executor.submit(self.catalog.query, filters, limit)
            return deadline.wait(future, stage="catalog query")
        finally:
            executor.shutdown(wait=False)
