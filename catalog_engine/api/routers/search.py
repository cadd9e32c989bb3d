"""
Search Endpoints
GET /api/v1/search - Filtered, ranked, faceted product search.
GET /api/v1/search/autocomplete - Search-box suggestions.
"""

import logging
import time
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ...models import SearchQuery
from ...search import SearchService
from ..dependencies import get_request_id, get_search_service
from ..models.search import AutocompleteResponse, SearchResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/search", tags=["search"])


def _split_multi(values: Optional[List[str]]) -> List[str]:
    """Accept both repeated parameters and comma-separated lists."""
    items = []
    for value in values or []:
        items.extend(part.strip() for part in value.split(",") if part.strip())
    return items


@router.get("", response_model=SearchResponse, status_code=status.HTTP_200_OK)
def search(
    query: str = Query("", max_length=500, description="Free-text query"),
    category: Optional[str] = Query(None, description="Exact category"),
    min_price: Optional[Decimal] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice", ge=0),
    colors: Optional[List[str]] = Query(None, description="Any of these colors"),
    features: Optional[List[str]] = Query(None, description="All of these features"),
    sort: str = Query("relevance", description="relevance, price_asc, price_desc, newest, rating, popularity"),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, alias="pageSize", ge=1, le=100),
    include_out_of_stock: bool = Query(False, alias="includeOutOfStock"),
    search_service: SearchService = Depends(get_search_service),
    request_id: str = Depends(get_request_id),
) -> SearchResponse:
    """
    Search the catalog.

    Facets are computed over every product that passes the filters, so they
    do not change with page or pageSize.

    Returns:
        One page of products with facets and page metadata
    """
    start_time = time.time()

    search_query = SearchQuery(
        query=query,
        category=category,
        min_price=min_price,
        max_price=max_price,
        colors=_split_multi(colors),
        features=_split_multi(features),
        sort=sort,
        page=page,
        page_size=page_size or search_service.config.default_page_size,
        include_out_of_stock=include_out_of_stock,
    )

    result = search_service.search(search_query)

    took_ms = (time.time() - start_time) * 1000

    logger.info(
        f"Search served: {result.total_count} matches, {len(result.products)} returned",
        extra={"request_id": request_id, "took_ms": took_ms},
    )

    return SearchResponse(**result.model_dump(), took_ms=took_ms)


@router.get("/autocomplete", response_model=AutocompleteResponse, status_code=status.HTTP_200_OK)
def autocomplete(
    query: str = Query("", max_length=100),
    limit: Optional[int] = Query(None, ge=1, le=50),
    search_service: SearchService = Depends(get_search_service),
) -> AutocompleteResponse:
    """
    Autocomplete suggestions.

    Queries shorter than two characters return no suggestions.
    """
    suggestions = search_service.autocomplete(query, limit)

    return AutocompleteResponse(query=query, suggestions=suggestions)
