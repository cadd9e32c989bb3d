"""
Trending Products
Rating-based proxy for trending items, with a minimum-review threshold.
"""

import logging
from typing import List, Optional

from ..config import SearchConfig, get_engine_config
from ..errors import DependencyError
from ..models import ProductRecord
from .filters import ProductFilters
from .retrieval import CandidateRetriever

logger = logging.getLogger(__name__)


class TrendingSelector:
    """
    Highest-rated products with enough reviews to be trusted.

    Also the universal fallback for personalization without signal.
    """

    def __init__(self, retriever: CandidateRetriever, config: Optional[SearchConfig] = None):
        self.retriever = retriever
        self.config = config or get_engine_config().search

    def trending(self, limit: Optional[int] = None) -> List[ProductRecord]:
        """
        Get trending products.

        Args:
            limit: Maximum number of products

        Returns:
            Products ordered by rating desc, then review count desc; empty on
            non-fatal catalog failures
        """
        if limit is None:
            limit = self.config.trending_default_limit
        if limit <= 0:
            return []

        filters = ProductFilters(
            min_reviews=self.config.trending_min_reviews,
            in_stock_only=False,
        )

        try:
            candidates = self.retriever.retrieve(filters)
        except DependencyError as e:
            if e.fatal:
                raise
            logger.warning(f"Trending products degraded to empty: {e.message}")
            return []

        ranked = sorted(candidates.products, key=lambda p: (-p.rating, -p.num_reviews))

        logger.debug(f"Trending: {len(ranked)} eligible products, returning {min(limit, len(ranked))}")

        return ranked[:limit]
