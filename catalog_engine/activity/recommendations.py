"""
Recommendation Engine
Personalized products from a user's view history, with trending fallback.
"""

import logging
from typing import Dict, List, Optional

from ..catalog.base import CatalogLookup
from ..config import ActivityConfig, get_engine_config
from ..errors import DependencyError
from ..models import ActivityType, ProductRecord
from ..search.trending import TrendingSelector
from .log import UserActivityLog
from .store import ActivityStore

logger = logging.getLogger(__name__)


def most_viewed_product_ids(log: UserActivityLog) -> List[str]:
    """
    Viewed product ids, most views first.

    Ties go to the product viewed most recently.
    """
    views: Dict[str, int] = {}
    last_seen: Dict[str, int] = {}

    for position, event in enumerate(log.events):
        if event.activity_type == ActivityType.VIEW_PRODUCT and event.product_id:
            views[event.product_id] = views.get(event.product_id, 0) + 1
            last_seen[event.product_id] = position

    return sorted(views, key=lambda pid: (-views[pid], -last_seen[pid]))


class RecommendationEngine:
    """
    Turns most-viewed products into recommendations.

    Falls back to trending products whenever there is no view signal, and
    also when the catalog fails non-fatally while resolving the views.
    """

    def __init__(
        self,
        catalog: CatalogLookup,
        store: ActivityStore,
        trending: TrendingSelector,
        config: Optional[ActivityConfig] = None,
    ):
        """
        Initialize recommendation engine.

        Args:
            catalog: Product lookup for resolving viewed ids
            store: Activity log persistence
            trending: Fallback selector
            config: Activity configuration
        """
        self.config = config or get_engine_config().activity
        self.catalog = catalog
        self.store = store
        self.trending = trending

    def most_viewed(self, user_id: str, limit: Optional[int] = None) -> List[str]:
        log = self.store.load(user_id)
        if log is None:
            return []

        ids = most_viewed_product_ids(log)
        return ids if limit is None else ids[:limit]

    def recommend(self, user_id: Optional[str], limit: Optional[int] = None) -> List[ProductRecord]:
        """
        Get recommendations for a user.

        Args:
            user_id: User ID (None for anonymous callers)
            limit: Maximum number of products

        Returns:
            Resolved most-viewed products, or trending products when there is
            no signal

        Raises:
            DependencyError: Only when the failure is fatal
        """
        if limit is None:
            limit = self.config.recommendation_default_limit
        if limit <= 0:
            return []

        try:
            product_ids = self.most_viewed(user_id) if user_id else []
            if not product_ids:
                logger.debug(f"No view history for user {user_id}, using trending")
                return self.trending.trending(limit)

            # Viewed products may have left the catalog, so resolve all of them
            products = self.catalog.get_many(product_ids)[:limit]
        except DependencyError as e:
            if e.fatal:
                raise
            logger.warning(f"Recommendations for user {user_id} fell back to trending: {e.message}")
            return self.trending.trending(limit)

        if not products:
            return self.trending.trending(limit)

        logger.info(f"Recommended {len(products)} products for user {user_id}")

        return products
