"""
Product domain models.
Read-only catalog records as seen by the query engine.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel


class Category(str, Enum):
    """Fixed catalog categories."""

    IPHONE = "iphone"
    IPAD = "ipad"
    MAC = "mac"
    WATCH = "watch"
    AIRPODS = "airpods"
    ACCESSORIES = "accessories"


class ColorOption(BaseModel):
    """A purchasable color of a product."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    display_color: str = ""  # CSS value / swatch used by the storefront


class ProductRecord(BaseModel):
    """
    Product as stored by the catalog collaborator.

    `features` keeps its display order; matching treats it as a set.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
    )

    id: str
    name: str
    description: str = ""
    category: Category
    price: Decimal = Field(..., ge=0)
    colors: List[ColorOption] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    num_reviews: int = Field(default=0, ge=0)
    stock_count: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @field_validator("features", mode="before")
    @classmethod
    def dedupe_features(cls, v):
        """Drop repeated features while keeping first-seen order."""
        if v is None:
            return []
        seen = set()
        ordered = []
        for feature in v:
            if feature not in seen:
                seen.add(feature)
                ordered.append(feature)
        return ordered

    @field_serializer("price", when_used="json")
    def serialize_price(self, price: Decimal) -> float:
        return float(price)

    @property
    def color_names(self) -> List[str]:
        return [color.name for color in self.colors]

    @property
    def feature_set(self) -> FrozenSet[str]:
        return frozenset(self.features)

    @property
    def thumbnail(self) -> Optional[str]:
        return self.images[0] if self.images else None
