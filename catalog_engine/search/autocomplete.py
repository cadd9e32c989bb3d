"""
Autocomplete Suggestions
Case-insensitive substring match over product name and category.
"""

import logging
from typing import List, Optional

from ..config import SearchConfig, get_engine_config
from ..errors import DependencyError
from ..models import AutocompleteSuggestion
from .filters import ProductFilters
from .retrieval import CandidateRetriever

logger = logging.getLogger(__name__)


class AutocompleteSuggester:
    """
    Suggests products for a partial query.

    Matching is substring containment (not prefix), results stay in catalog
    order and ignore stock. Queries shorter than the configured minimum
    return nothing.
    """

    def __init__(self, retriever: CandidateRetriever, config: Optional[SearchConfig] = None):
        self.retriever = retriever
        self.config = config or get_engine_config().search

    def suggest(self, query: Optional[str], limit: Optional[int] = None) -> List[AutocompleteSuggestion]:
        """
        Get suggestions for a partial query.

        Args:
            query: Partial query text
            limit: Maximum number of suggestions

        Returns:
            Up to `limit` suggestions; empty for short queries or on
            non-fatal catalog failures
        """
        text = (query or "").strip()
        if len(text) < self.config.autocomplete_min_length:
            return []

        if limit is None:
            limit = self.config.autocomplete_default_limit
        if limit <= 0:
            return []

        filters = ProductFilters(name_or_category_contains=text, in_stock_only=False)

        try:
            candidates = self.retriever.retrieve(filters, limit=limit)
        except DependencyError as e:
            if e.fatal:
                raise
            logger.warning(f"Autocomplete degraded to empty for '{text}': {e.message}")
            return []

        return [
            AutocompleteSuggestion(
                id=product.id,
                name=product.name,
                category=str(product.category),
                thumbnail=product.thumbnail,
            )
            for product in candidates.products[:limit]
        ]
