"""
API Routers
FastAPI route handlers for different endpoints.
"""

from .activity import router as activity_router
from .health import router as health_router
from .search import router as search_router

__all__ = [
    "activity_router",
    "health_router",
    "search_router",
]
