"""
Activity domain models.
User activity events, derived preferences and the admin activity report.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel


class ActivityType(str, Enum):
    """Types of tracked user actions."""

    VIEW_PRODUCT = "view_product"
    ADD_TO_CART = "add_to_cart"
    ADD_TO_WISHLIST = "add_to_wishlist"
    REMOVE_FROM_CART = "remove_from_cart"
    REMOVE_FROM_WISHLIST = "remove_from_wishlist"
    PURCHASE = "purchase"
    SEARCH = "search"
    FILTER = "filter"
    REVIEW = "review"
    PAGE_VIEW = "page_view"
    CLICK = "click"
    OFFER_CLICK = "offer_click"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ActivityInput(_CamelModel):
    """
    Untrusted activity payload as submitted by a caller.

    Every field is optional here; the tracker enforces what is required so
    that a missing activity type surfaces as a domain ValidationError.
    """

    activity_type: Optional[ActivityType] = None
    product_id: Optional[str] = None
    category: Optional[str] = None
    search_query: Optional[str] = None
    filter_options: Optional[Any] = None
    session_id: Optional[str] = None
    metadata: Optional[Any] = None
    duration_ms: Optional[float] = None


class ActivityEvent(_CamelModel):
    """A single recorded user action."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, use_enum_values=True
    )

    activity_type: ActivityType
    product_id: Optional[str] = None
    category: Optional[str] = None
    search_query: Optional[str] = None
    filter_options: Optional[Any] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    session_id: Optional[str] = None
    metadata: Optional[Any] = None  # Stored opaquely, never validated
    duration_ms: Optional[float] = None


class PriceRange(_CamelModel):
    min: Optional[Decimal] = None
    max: Optional[Decimal] = None

    @field_serializer("min", "max", when_used="json")
    def serialize_bound(self, value: Optional[Decimal]) -> Optional[float]:
        return None if value is None else float(value)


class Preferences(_CamelModel):
    """
    Derived summary of a user's recent activity.

    Only favorite_categories is recomputed from events; the remaining fields
    change through explicit preference updates.
    """

    favorite_categories: List[str] = Field(default_factory=list)
    price_range: Optional[PriceRange] = None
    feature_preferences: List[str] = Field(default_factory=list)
    color_preferences: List[str] = Field(default_factory=list)


class PreferenceUpdate(_CamelModel):
    """Partial preference override; None means 'leave unchanged'."""

    favorite_categories: Optional[List[str]] = None
    price_range: Optional[PriceRange] = None
    feature_preferences: Optional[List[str]] = None
    color_preferences: Optional[List[str]] = None


class CategoryCount(_CamelModel):
    name: str
    count: int


class SearchEntry(_CamelModel):
    query: str
    timestamp: datetime


class ActivityReport(_CamelModel):
    """Per-user activity summary for administrators."""

    user_id: str
    preferences: Preferences
    viewed_products_count: int
    favorite_categories: List[CategoryCount] = Field(default_factory=list)
    recent_searches: List[SearchEntry] = Field(default_factory=list)
    last_active_at: Optional[datetime] = None
    recent_activities: List[ActivityEvent] = Field(default_factory=list)
