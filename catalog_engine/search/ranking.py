"""
Relevance Ranking
Orders candidates by the requested sort mode.

Relevance formula (text query present):
score = sum over query terms of (3 × in name + 2 × in category + 1 × in description)
        + exact-name bonus

Every ordering is a stable sort, so products with equal keys keep the
catalog's id-ascending order.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from ..config import SearchConfig, get_engine_config
from ..models import ProductRecord, SortMode
from .filters import tokenize_query

logger = logging.getLogger(__name__)


class TextRelevanceScorer:
    """
    Deterministic text-match score over name, category and description.

    A product whose whole name equals the query gets a bonus larger than any
    partial score, so exact matches always outrank partial ones.
    """

    def __init__(self, config: Optional[SearchConfig] = None):
        """
        Initialize text relevance scorer.

        Args:
            config: Search configuration (field weights)
        """
        self.config = config or get_engine_config().search

    def score_product(self, product: ProductRecord, terms: List[str], normalized_query: str) -> float:
        """
        Score a single product.

        Args:
            product: Candidate product
            terms: Unique lower-cased query terms
            normalized_query: Lower-cased, whitespace-collapsed query

        Returns:
            Relevance score (>= 0)
        """
        name = product.name.lower()
        category = str(product.category).lower()
        description = (product.description or "").lower()

        score = 0.0
        for term in terms:
            if term in name:
                score += self.config.name_weight
            if term in category:
                score += self.config.category_weight
            if term in description:
                score += self.config.description_weight

        if normalized_query and " ".join(name.split()) == normalized_query:
            score += self._exact_match_bonus(len(terms))

        return score

    def score_batch(self, products: List[ProductRecord], query_text: str) -> Dict[str, float]:
        """
        Score multiple products.

        Returns:
            Dict mapping product_id -> relevance score
        """
        terms = tokenize_query(query_text)
        normalized_query = " ".join(query_text.lower().split())

        return {p.id: self.score_product(p, terms, normalized_query) for p in products}

    def _exact_match_bonus(self, num_terms: int) -> float:
        per_term = (
            self.config.name_weight + self.config.category_weight + self.config.description_weight
        )
        return per_term * max(num_terms, 1) + 1.0


class RelevanceRanker:
    """
    Sorts a candidate list for one sort mode.

    | mode                 | key                      |
    |----------------------|--------------------------|
    | relevance (text)     | score desc, rating desc  |
    | relevance (no text)  | rating desc, reviews desc|
    | price_asc/price_desc | price                    |
    | newest               | created_at desc          |
    | rating               | rating desc, reviews desc|
    | popularity           | reviews desc, rating desc|
    | anything else        | id asc                   |
    """

    def __init__(self, config: Optional[SearchConfig] = None):
        self.config = config or get_engine_config().search
        self.text_scorer = TextRelevanceScorer(self.config)

        logger.debug(
            f"Relevance ranker initialized with weights: "
            f"name={self.config.name_weight}, "
            f"category={self.config.category_weight}, "
            f"description={self.config.description_weight}"
        )

    def rank(
        self, products: List[ProductRecord], sort: Optional[str], query_text: str = ""
    ) -> List[ProductRecord]:
        """
        Return a new list ordered for the requested sort mode.

        Args:
            products: Candidates in catalog order
            sort: Raw sort mode string
            query_text: Free-text query (may be empty)

        Returns:
            Ranked products
        """
        if not products:
            return []

        mode = SortMode.parse(sort)
        key = self._sort_key(mode, products, query_text)

        ranked = sorted(products, key=key)

        logger.debug(f"Ranked {len(ranked)} products by {mode.value if mode else 'id'}")

        return ranked

    def _sort_key(
        self, mode: Optional[SortMode], products: List[ProductRecord], query_text: str
    ) -> Callable[[ProductRecord], Tuple]:
        if mode == SortMode.RELEVANCE:
            if query_text:
                scores = self.text_scorer.score_batch(products, query_text)
                return lambda p: (-scores[p.id], -p.rating)
            return lambda p: (-p.rating, -p.num_reviews)
        if mode == SortMode.PRICE_ASC:
            return lambda p: (p.price,)
        if mode == SortMode.PRICE_DESC:
            return lambda p: (-p.price,)
        if mode == SortMode.NEWEST:
            return lambda p: (-p.created_at.timestamp(),)
        if mode == SortMode.RATING:
            return lambda p: (-p.rating, -p.num_reviews)
        if mode == SortMode.POPULARITY:
            return lambda p: (-p.num_reviews, -p.rating)

        # Unrecognized mode: stable id order
        return lambda p: (p.id,)
