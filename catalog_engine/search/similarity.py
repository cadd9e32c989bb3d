"""
Similar Products
Same-category products scored by shared features.
"""

import logging
from typing import List, Optional

from ..config import SearchConfig, get_engine_config
from ..errors import DependencyError
from ..models import ProductRecord, SimilarProduct
from .filters import ProductFilters
from .retrieval import CandidateRetriever

logger = logging.getLogger(__name__)


class SimilarityFinder:
    """
    Finds products similar to a source product.

    score = |source.features ∩ candidate.features|, ties broken by rating.
    Out-of-stock products are eligible; the source itself never is.
    """

    def __init__(self, retriever: CandidateRetriever, config: Optional[SearchConfig] = None):
        self.retriever = retriever
        self.config = config or get_engine_config().search

    def find_similar(self, product_id: str, limit: Optional[int] = None) -> List[SimilarProduct]:
        """
        Find similar products.

        Args:
            product_id: Source product ID
            limit: Maximum number of results

        Returns:
            Scored products, best first; empty if the source does not
            resolve or the catalog fails non-fatally
        """
        if limit is None:
            limit = self.config.similar_default_limit
        if limit <= 0:
            return []

        try:
            source = self.retriever.catalog.get(product_id)
            if source is None:
                logger.info(f"Similar products: source {product_id} not found")
                return []

            candidates = self.retriever.retrieve(
                ProductFilters(
                    category=str(source.category),
                    exclude_ids=[source.id],
                    in_stock_only=False,
                )
            )
        except DependencyError as e:
            if e.fatal:
                raise
            logger.warning(f"Similar products degraded to empty for {product_id}: {e.message}")
            return []

        return self.score_candidates(source, candidates.products)[:limit]

    def score_candidates(
        self, source: ProductRecord, candidates: List[ProductRecord]
    ) -> List[SimilarProduct]:
        """Score and order candidates against the source product."""
        source_features = source.feature_set

        scored = [
            SimilarProduct(
                **candidate.model_dump(),
                similarity_score=len(source_features & candidate.feature_set),
            )
            for candidate in candidates
            if candidate.id != source.id
        ]
        scored.sort(key=lambda p: (-p.similarity_score, -p.rating))

        return scored
