"""
Search Models
Response envelopes for the search endpoints.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...models import AutocompleteSuggestion, SearchResult


class APIModel(BaseModel):
    """Base for response envelopes: camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SearchResponse(SearchResult):
    """
    Search response model.

    One page of products with facets over the whole filtered set.
    """

    took_ms: float = Field(default=0.0, description="Server-side search time in milliseconds")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "products": [],
                "totalCount": 1,
                "facets": {
                    "categories": [{"value": "iphone", "count": 1}],
                    "colors": [{"value": "Black", "count": 1}],
                    "price": [{"value": 100, "count": 1}],
                    "features": [{"value": "5G", "count": 1}],
                },
                "pages": 1,
                "page": 1,
                "pageSize": 20,
                "tookMs": 3.2,
            }
        }
    )


class AutocompleteResponse(APIModel):
    """Autocomplete suggestions for a partial query."""

    query: str
    suggestions: List[AutocompleteSuggestion] = Field(default_factory=list)
