"""
Facet Aggregation
Category, color, price-bucket and feature counts over the full candidate set.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List, Optional, Union

import numpy as np

from ..config import SearchConfig, get_engine_config
from ..models import FacetBucket, ProductRecord, SearchFacets

logger = logging.getLogger(__name__)

FacetKey = Union[int, str]


def _sorted_buckets(counts: Dict[FacetKey, int]) -> List[FacetBucket]:
    # Stable: equal counts keep first-seen order
    ordered = sorted(counts.items(), key=lambda item: -item[1])
    return [FacetBucket(value=value, count=count) for value, count in ordered]


class FacetAggregator:
    """
    Computes facets from the filtered, unpaginated candidates.

    Multi-valued attributes (colors, features) count a product once per
    distinct value, so their bucket totals may exceed the candidate count.
    """

    def __init__(self, config: Optional[SearchConfig] = None):
        self.config = config or get_engine_config().search
        self.boundaries = np.array(self.config.price_facet_boundaries, dtype=float)

    def aggregate(self, products: List[ProductRecord]) -> SearchFacets:
        """
        Compute all facets.

        Args:
            products: Full candidate set (never a page)

        Returns:
            SearchFacets with every facet sorted by count descending
        """
        facets = SearchFacets(
            categories=self.category_facet(products),
            colors=self.color_facet(products),
            price=self.price_facet(products),
            features=self.feature_facet(products),
        )

        logger.debug(
            f"Aggregated facets over {len(products)} candidates: "
            f"{len(facets.categories)} categories, {len(facets.colors)} colors, "
            f"{len(facets.price)} price buckets, {len(facets.features)} features"
        )

        return facets

    def category_facet(self, products: List[ProductRecord]) -> List[FacetBucket]:
        counts: Dict[FacetKey, int] = {}
        for product in products:
            key = str(product.category)
            counts[key] = counts.get(key, 0) + 1
        return _sorted_buckets(counts)

    def color_facet(self, products: List[ProductRecord]) -> List[FacetBucket]:
        return self._multi_valued_facet(dict.fromkeys(p.color_names) for p in products)

    def feature_facet(self, products: List[ProductRecord]) -> List[FacetBucket]:
        return self._multi_valued_facet(p.features for p in products)

    def price_facet(self, products: List[ProductRecord]) -> List[FacetBucket]:
        """
        Bucket prices by the configured boundaries.

        A bucket is keyed by its lower bound; prices at or above the last
        boundary (or not numeric at all) go to the default bucket.
        """
        if not products:
            return []

        other = self.config.price_facet_default
        prices = np.array([self._as_float(p.price) for p in products], dtype=float)

        # Index of the bucket each price falls into; -1 / len-1 are out of range
        positions = np.searchsorted(self.boundaries, prices, side="right") - 1
        in_range = (positions >= 0) & (positions < len(self.boundaries) - 1) & ~np.isnan(prices)

        counts: Dict[FacetKey, int] = {}
        for lower in self.boundaries[:-1]:
            counts[int(lower)] = 0
        counts[other] = 0

        for position, valid in zip(positions, in_range):
            key = int(self.boundaries[position]) if valid else other
            counts[key] += 1

        # Empty buckets are omitted
        return _sorted_buckets({key: count for key, count in counts.items() if count > 0})

    @staticmethod
    def _multi_valued_facet(values_per_product: Iterable[Iterable[str]]) -> List[FacetBucket]:
        counts: Dict[FacetKey, int] = {}
        for values in values_per_product:
            for value in values:
                counts[value] = counts.get(value, 0) + 1
        return _sorted_buckets(counts)

    @staticmethod
    def _as_float(value) -> float:
        try:
            return float(Decimal(str(value)))
        except (InvalidOperation, TypeError, ValueError):
            return float("nan")
