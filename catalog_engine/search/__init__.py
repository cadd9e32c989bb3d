"""
Search Module
Filtering, ranking, faceting and pagination over the product catalog, plus the
autocomplete, similar-products and trending entry points.
"""

from .filters import (
    FilterBuilder,
    FilterOperator,
    ProductFilter,
    ProductFilters,
    tokenize_query,
)
from .deadline import Deadline
from .retrieval import CandidateRetriever, CandidateSet
from .ranking import RelevanceRanker, TextRelevanceScorer
from .facets import FacetAggregator
from .pagination import Page, Paginator
from .autocomplete import AutocompleteSuggester
from .similarity import SimilarityFinder
from .trending import TrendingSelector
from .search_service import SearchService

__all__ = [
    "FilterBuilder",
    "FilterOperator",
    "ProductFilter",
    "ProductFilters",
    "tokenize_query",
    "Deadline",
    "CandidateRetriever",
    "CandidateSet",
    "RelevanceRanker",
    "TextRelevanceScorer",
    "FacetAggregator",
    "Page",
    "Paginator",
    "AutocompleteSuggester",
    "SimilarityFinder",
    "TrendingSelector",
    "SearchService",
]
