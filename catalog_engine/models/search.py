"""
Search domain models.
Query value object, result envelope and facet buckets.
"""

from decimal import Decimal
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .product import ProductRecord


class SortMode(str, Enum):
    """Supported result orderings."""

    RELEVANCE = "relevance"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    NEWEST = "newest"
    RATING = "rating"
    POPULARITY = "popularity"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["SortMode"]:
        """Resolve a raw sort string; None for unrecognized modes."""
        if value is None:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SearchQuery(_CamelModel):
    """
    Raw search request.

    Unrecognized sort strings are kept as-is; the ranker falls back to id order
    for them rather than rejecting the request.
    """

    query: str = ""
    category: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    colors: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    sort: str = SortMode.RELEVANCE.value
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1)
    include_out_of_stock: bool = False

    @field_validator("query", mode="before")
    @classmethod
    def normalize_query(cls, v):
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("colors", "features", mode="before")
    @classmethod
    def drop_blank_values(cls, v):
        """Treat None and blank entries as 'no constraint'."""
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        return [item.strip() for item in v if item and item.strip()]


class FacetBucket(_CamelModel):
    """One facet value with its candidate count."""

    value: Union[int, str]
    count: int


class SearchFacets(_CamelModel):
    """Facet counts over the full filtered candidate set."""

    categories: List[FacetBucket] = Field(default_factory=list)
    colors: List[FacetBucket] = Field(default_factory=list)
    price: List[FacetBucket] = Field(default_factory=list)
    features: List[FacetBucket] = Field(default_factory=list)


class SearchResult(_CamelModel):
    """One page of ranked products plus facets and page metadata."""

    products: List[ProductRecord] = Field(default_factory=list)
    total_count: int = 0
    facets: SearchFacets = Field(default_factory=SearchFacets)
    pages: int = 0
    page: int = 1
    page_size: int = 20


class AutocompleteSuggestion(_CamelModel):
    """Lightweight product projection for the search box."""

    type: str = "product"
    id: str
    name: str
    category: str
    thumbnail: Optional[str] = None


class SimilarProduct(ProductRecord):
    """Product projection carrying its feature-overlap score."""

    similarity_score: int = 0
