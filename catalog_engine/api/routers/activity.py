"""
Activity Endpoints
Activity tracking, preferences, recommendations, similar and trending products.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from ...activity import ActivityTracker, RecommendationEngine
from ...caching import ResultCache
from ...models import ActivityInput, ActivityReport, PreferenceUpdate
from ...search import SearchService
from ..config import APISettings, get_settings
from ..dependencies import (
    get_activity_tracker,
    get_recommendation_engine,
    get_result_cache,
    get_search_service,
    get_user_id,
)
from ..models.activity import (
    PreferencesResponse,
    ProductListResponse,
    SimilarProductsResponse,
    TrackActivityResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/activity", tags=["activity"])


@router.get("/trending", response_model=ProductListResponse, status_code=status.HTTP_200_OK)
def trending_products(
    limit: int = Query(8, ge=1, le=50),
    search_service: SearchService = Depends(get_search_service),
    cache: Optional[ResultCache] = Depends(get_result_cache),
    settings: APISettings = Depends(get_settings),
) -> ProductListResponse:
    """Highest-rated products with at least five reviews."""
    if cache is not None:
        products = cache.get_or_compute(
            cache.key("trending", limit),
            lambda: search_service.trending_products(limit),
            ttl=settings.cache_ttl_trending,
        )
    else:
        products = search_service.trending_products(limit)

    return ProductListResponse(products=products, count=len(products))


@router.get(
    "/similar/{product_id}", response_model=SimilarProductsResponse, status_code=status.HTTP_200_OK
)
def similar_products(
    product_id: str = Path(..., min_length=1),
    limit: int = Query(4, ge=1, le=50),
    search_service: SearchService = Depends(get_search_service),
    cache: Optional[ResultCache] = Depends(get_result_cache),
    settings: APISettings = Depends(get_settings),
) -> SimilarProductsResponse:
    """
    Same-category products ranked by shared features.

    Unknown product ids yield an empty list rather than an error.
    """
    if cache is not None:
        products = cache.get_or_compute(
            cache.key("similar", product_id, limit),
            lambda: search_service.similar_products(product_id, limit),
            ttl=settings.cache_ttl_similar,
        )
    else:
        products = search_service.similar_products(product_id, limit)

    return SimilarProductsResponse(product_id=product_id, products=products, count=len(products))


@router.post("", response_model=TrackActivityResponse, status_code=status.HTTP_200_OK)
def track_activity(
    payload: ActivityInput,
    user_id: str = Depends(get_user_id),
    tracker: ActivityTracker = Depends(get_activity_tracker),
) -> TrackActivityResponse:
    """
    Track a user activity.

    Returns:
        Acknowledgment with the stored event

    Raises:
        ValidationError: activityType missing (400)
        NotFoundError: productId not in the catalog (404)
    """
    event = tracker.add_activity(user_id, payload)

    return TrackActivityResponse(event=event)


@router.get("/recommendations", response_model=ProductListResponse, status_code=status.HTTP_200_OK)
def recommendations(
    limit: Optional[int] = Query(None, ge=1, le=50),
    user_id: str = Depends(get_user_id),
    engine: RecommendationEngine = Depends(get_recommendation_engine),
    settings: APISettings = Depends(get_settings),
) -> ProductListResponse:
    """Personalized recommendations, trending products when there is no view history."""
    products = engine.recommend(user_id, limit or settings.recommendations_default_limit)

    return ProductListResponse(products=products, count=len(products), user_id=user_id)


@router.get("/preferences", response_model=PreferencesResponse, status_code=status.HTTP_200_OK)
def get_preferences(
    user_id: str = Depends(get_user_id),
    tracker: ActivityTracker = Depends(get_activity_tracker),
) -> PreferencesResponse:
    """Caller's preferences."""
    return PreferencesResponse(user_id=user_id, preferences=tracker.get_preferences(user_id))


@router.put("/preferences", response_model=PreferencesResponse, status_code=status.HTTP_200_OK)
def update_preferences(
    update: PreferenceUpdate,
    user_id: str = Depends(get_user_id),
    tracker: ActivityTracker = Depends(get_activity_tracker),
) -> PreferencesResponse:
    """
    Partially update the caller's preferences.

    Omitted or null fields are left unchanged.
    """
    preferences = tracker.update_preferences(user_id, update)

    return PreferencesResponse(user_id=user_id, preferences=preferences)


@router.get("/report/{user_id}", response_model=ActivityReport, status_code=status.HTTP_200_OK)
def activity_report(
    user_id: str = Path(..., min_length=1),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    tracker: ActivityTracker = Depends(get_activity_tracker),
) -> ActivityReport:
    """
    Activity summary for one user.

    Raises:
        NotFoundError: No activity for the user (in the date range) (404)
    """
    return tracker.activity_report(user_id, start_date, end_date)
