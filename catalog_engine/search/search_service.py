"""
Search Service
Unified query engine over the product catalog.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

from ..config import SearchConfig, get_engine_config
from ..errors import DependencyError
from ..models import (
    AutocompleteSuggestion,
    ProductRecord,
    SearchQuery,
    SearchResult,
    SimilarProduct,
)
from .autocomplete import AutocompleteSuggester
from .deadline import Deadline
from .facets import FacetAggregator
from .filters import FilterBuilder
from .pagination import Page, Paginator
from .ranking import RelevanceRanker
from .retrieval import CandidateRetriever
from .similarity import SimilarityFinder
from .trending import TrendingSelector

logger = logging.getLogger(__name__)


class SearchService:
    """
    Orchestrates the search pipeline and the independent entry points:
    - Filtered, ranked, paginated search with facets
    - Autocomplete
    - Similar products
    - Trending products

    Construct once with a catalog and share the instance; it holds no
    per-request state.
    """

    def __init__(self, catalog, config: Optional[SearchConfig] = None):
        """
        Initialize search service.

        Args:
            catalog: ProductCatalog collaborator
            config: Search configuration
        """
        self.config = config or get_engine_config().search
        self.catalog = catalog

        self.executor = ThreadPoolExecutor(
            max_workers=self.config.worker_threads, thread_name_prefix="catalog-facets"
        )

        # Initialize components
        self.filter_builder = FilterBuilder()
        self.retriever = CandidateRetriever(catalog)
        self.ranker = RelevanceRanker(self.config)
        self.facet_aggregator = FacetAggregator(self.config)
        self.paginator = Paginator()
        self.autocomplete_suggester = AutocompleteSuggester(self.retriever, self.config)
        self.similarity_finder = SimilarityFinder(self.retriever, self.config)
        self.trending_selector = TrendingSelector(self.retriever, self.config)

        logger.info("Search service initialized")

    def search(self, query: SearchQuery, timeout: Optional[float] = None) -> SearchResult:
        """
        Execute a search request.

        The catalog query runs on its own worker thread under the deadline.
        Faceting then runs on the shared pool while this thread ranks and
        paginates the same candidate list. Any failure or an expired deadline
        aborts the whole request.

        Args:
            query: Search query
            timeout: Request budget in seconds (default: from config)

        Returns:
            SearchResult for the requested page

        Raises:
            DependencyError: Catalog failure
            SearchTimeoutError: Budget expired
        """
        start_time = time.time()
        deadline = Deadline(self.config.request_timeout_seconds if timeout is None else timeout)

        logger.info(
            f"Search request: query='{query.query}', category={query.category}, "
            f"sort={query.sort}, page={query.page}, page_size={query.page_size}"
        )

        filters = self.filter_builder.build(query)

        try:
            candidates = self.retriever.retrieve(filters, deadline=deadline)

            facet_future = self.executor.submit(self.facet_aggregator.aggregate, candidates.products)

            try:
                page = self._rank_and_paginate(candidates.products, query)
                deadline.check("ranking")
                facets = deadline.wait(facet_future, stage="faceting")
            except Exception:
                facet_future.cancel()
                raise
        except DependencyError as e:
            logger.error(f"Search failed: {e.message}", extra={"details": e.details})
            raise

        total_time_ms = (time.time() - start_time) * 1000

        logger.info(
            f"Search completed: {page.total_count} results, page {page.page}/{page.pages} "
            f"in {total_time_ms:.2f}ms"
        )

        return SearchResult(
            products=page.items,
            total_count=page.total_count,
            facets=facets,
            pages=page.pages,
            page=page.page,
            page_size=page.page_size,
        )

    def _rank_and_paginate(self, products: List[ProductRecord], query: SearchQuery) -> Page:
        ranked = self.ranker.rank(products, query.sort, query.query)
        return self.paginator.paginate(ranked, query.page, query.page_size)

    def autocomplete(self, query: Optional[str], limit: Optional[int] = None) -> List[AutocompleteSuggestion]:
        """Autocomplete suggestions for a partial query."""
        return self.autocomplete_suggester.suggest(query, limit)

    def similar_products(self, product_id: str, limit: Optional[int] = None) -> List[SimilarProduct]:
        """Products similar to the given one (best effort)."""
        return self.similarity_finder.find_similar(product_id, limit)

    def trending_products(self, limit: Optional[int] = None) -> List[ProductRecord]:
        """Trending products (best effort)."""
        return self.trending_selector.trending(limit)

    def get_service_stats(self) -> Dict[str, Any]:
        """
        Get service statistics.

        Returns:
            Dict with service stats
        """
        return {
            "service": "SearchService",
            "catalog": type(self.catalog).__name__,
            "worker_threads": self.config.worker_threads,
            "request_timeout_seconds": self.config.request_timeout_seconds,
        }

    def close(self) -> None:
        """Release worker threads."""
        self.executor.shutdown(wait=False, cancel_futures=True)
