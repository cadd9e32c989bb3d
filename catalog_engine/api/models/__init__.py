"""
Pydantic Models
Response envelopes for API endpoints.
"""

from .search import AutocompleteResponse, SearchResponse
from .activity import (
    PreferencesResponse,
    ProductListResponse,
    SimilarProductsResponse,
    TrackActivityResponse,
)

__all__ = [
    "AutocompleteResponse",
    "SearchResponse",
    "PreferencesResponse",
    "ProductListResponse",
    "SimilarProductsResponse",
    "TrackActivityResponse",
]
