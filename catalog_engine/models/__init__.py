"""
Domain Models Package
Pydantic models shared by the search and activity subsystems.
"""

from .product import Category, ColorOption, ProductRecord
from .search import (
    AutocompleteSuggestion,
    FacetBucket,
    SearchFacets,
    SearchQuery,
    SearchResult,
    SimilarProduct,
    SortMode,
)
from .activity import (
    ActivityEvent,
    ActivityInput,
    ActivityReport,
    ActivityType,
    CategoryCount,
    PreferenceUpdate,
    Preferences,
    PriceRange,
    SearchEntry,
)

__all__ = [
    "Category",
    "ColorOption",
    "ProductRecord",
    "AutocompleteSuggestion",
    "FacetBucket",
    "SearchFacets",
    "SearchQuery",
    "SearchResult",
    "SimilarProduct",
    "SortMode",
    "ActivityEvent",
    "ActivityInput",
    "ActivityReport",
    "ActivityType",
    "CategoryCount",
    "PreferenceUpdate",
    "Preferences",
    "PriceRange",
    "SearchEntry",
]
