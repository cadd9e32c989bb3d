"""
Product Filtering
Translate raw search parameters into a canonical predicate set.

Colors use OR semantics (any requested color matches) while features use AND
semantics (every requested feature must be present).
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

from ..models import ProductRecord, SearchQuery

logger = logging.getLogger(__name__)


class FilterOperator(Enum):
    """Comparison operators for filters."""

    EQ = "="
    GTE = ">="
    LTE = "<="
    GT = ">"
    NOT_IN = "NOT IN"
    ANY_OF = "ANY OF"  # Multi-valued field shares at least one value
    ALL_OF = "ALL OF"  # Multi-valued field contains every value
    MATCH_ANY_TERM = "MATCH"  # Free-text: any term found in the text fields
    ILIKE = "ILIKE"  # Case-insensitive substring


# Fields a storage engine can evaluate as plain columns
SCALAR_FIELDS = {"id", "category", "price", "stock_count", "num_reviews"}

# Fields searched by free text
TEXT_FIELDS = ("name", "description", "category")


def _field_value(product: ProductRecord, name: str) -> Any:
    if name == "colors":
        return product.color_names
    if name == "features":
        return product.feature_set
    if name == "text":
        return [str(getattr(product, f) or "").lower() for f in TEXT_FIELDS]
    if name == "name_or_category":
        return [product.name.lower(), str(product.category).lower()]
    return getattr(product, name)


@dataclass
class ProductFilter:
    """
    Single filter condition for products.

    Example:
        ProductFilter("price", FilterOperator.LTE, Decimal("100"))  # price <= 100
        ProductFilter("colors", FilterOperator.ANY_OF, ["Black", "Blue"])
    """

    field: str
    operator: FilterOperator
    value: Any

    @property
    def is_scalar(self) -> bool:
        """True when the condition only touches a single plain column."""
        return self.field in SCALAR_FIELDS

    def matches(self, product: ProductRecord) -> bool:
        """Evaluate this condition against one product."""
        actual = _field_value(product, self.field)
        op = self.operator

        if op == FilterOperator.EQ:
            return actual == self.value
        if op == FilterOperator.GTE:
            return actual >= self.value
        if op == FilterOperator.LTE:
            return actual <= self.value
        if op == FilterOperator.GT:
            return actual > self.value
        if op == FilterOperator.NOT_IN:
            return actual not in self.value
        if op == FilterOperator.ANY_OF:
            return any(v in actual for v in self.value)
        if op == FilterOperator.ALL_OF:
            return all(v in actual for v in self.value)
        if op == FilterOperator.MATCH_ANY_TERM:
            return any(term in text for term in self.value for text in actual)
        if op == FilterOperator.ILIKE:
            needle = str(self.value).lower()
            return any(needle in text for text in actual)

        raise ValueError(f"Unsupported filter operator: {op}")


@dataclass
class ProductFilters:
    """
    Canonical predicate set for candidate retrieval.

    Every field defaults to 'no constraint' except stock, which hides
    out-of-stock products unless explicitly disabled.
    """

    # Free text (lower-cased terms, any must match)
    text_terms: List[str] = field(default_factory=list)

    # Category
    category: Optional[str] = None

    # Price filters (both bounds inclusive)
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None

    # Multi-valued attributes
    colors: List[str] = field(default_factory=list)  # OR
    features: List[str] = field(default_factory=list)  # AND

    # Availability
    in_stock_only: bool = True

    # Primitives used by the best-effort endpoints
    min_reviews: int = 0
    exclude_ids: List[str] = field(default_factory=list)
    name_or_category_contains: Optional[str] = None

    def build_filters(self) -> List[ProductFilter]:
        """
        Build list of ProductFilter objects from this config.

        Returns:
            List of ProductFilter objects
        """
        filters = []

        if self.text_terms:
            filters.append(ProductFilter("text", FilterOperator.MATCH_ANY_TERM, self.text_terms))

        if self.category:
            filters.append(ProductFilter("category", FilterOperator.EQ, self.category))

        # Price filters
        if self.min_price is not None:
            filters.append(ProductFilter("price", FilterOperator.GTE, self.min_price))
        if self.max_price is not None:
            filters.append(ProductFilter("price", FilterOperator.LTE, self.max_price))

        if self.colors:
            filters.append(ProductFilter("colors", FilterOperator.ANY_OF, self.colors))
        if self.features:
            filters.append(ProductFilter("features", FilterOperator.ALL_OF, self.features))

        # Stock filter
        if self.in_stock_only:
            filters.append(ProductFilter("stock_count", FilterOperator.GT, 0))

        if self.min_reviews > 0:
            filters.append(ProductFilter("num_reviews", FilterOperator.GTE, self.min_reviews))
        if self.exclude_ids:
            filters.append(ProductFilter("id", FilterOperator.NOT_IN, self.exclude_ids))

        if self.name_or_category_contains:
            filters.append(
                ProductFilter("name_or_category", FilterOperator.ILIKE, self.name_or_category_contains)
            )

        return filters

    def matches(self, product: ProductRecord) -> bool:
        """True when the product satisfies every condition."""
        return all(f.matches(product) for f in self.build_filters())


class FilterBuilder:
    """Turns a SearchQuery into ProductFilters. Never raises."""

    def build(self, query: SearchQuery) -> ProductFilters:
        filters = ProductFilters(
            text_terms=tokenize_query(query.query),
            category=query.category or None,
            min_price=query.min_price,
            max_price=query.max_price,
            colors=list(query.colors),
            features=list(query.features),
            in_stock_only=not query.include_out_of_stock,
        )

        logger.debug(f"Built {len(filters.build_filters())} predicates for query '{query.query}'")

        return filters


def tokenize_query(text: Optional[str]) -> List[str]:
    """Split query text into unique lower-cased terms, keeping first-seen order."""
    if not text:
        return []

    terms = []
    for term in text.lower().split():
        if term not in terms:
            terms.append(term)
    return terms
