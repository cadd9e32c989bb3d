"""
Activity Models
Response envelopes for activity, preference and recommendation endpoints.
"""

from typing import List, Optional

from pydantic import Field

from ...models import ActivityEvent, Preferences, ProductRecord, SimilarProduct
from .search import APIModel


class TrackActivityResponse(APIModel):
    """Acknowledgment of a tracked activity."""

    success: bool = True
    message: str = "Activity tracked successfully"
    event: ActivityEvent


class PreferencesResponse(APIModel):
    user_id: str
    preferences: Preferences


class ProductListResponse(APIModel):
    """Trending products or recommendations."""

    products: List[ProductRecord] = Field(default_factory=list)
    count: int = 0
    user_id: Optional[str] = None


class SimilarProductsResponse(APIModel):
    product_id: str
    products: List[SimilarProduct] = Field(default_factory=list)
    count: int = 0
