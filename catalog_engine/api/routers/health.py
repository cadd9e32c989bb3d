"""
Health Check Endpoints
Liveness and component status.
"""

import logging
from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from ..config import APISettings, get_settings
from ..dependencies import EngineContainer, get_container
from ..middleware.timing import get_latency_tracker

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, str]:
    """
    Basic health check.

    Returns:
        Simple health status
    """
    return {"status": "healthy", "timestamp": datetime.utcnow().isoformat()}


@router.get("/status", status_code=status.HTTP_200_OK)
def status_check(
    settings: APISettings = Depends(get_settings),
    container: EngineContainer = Depends(get_container),
) -> Dict[str, Any]:
    """
    Detailed status check.

    Checks status of:
    - Product catalog
    - Result cache (when enabled)
    - Request latency

    Returns:
        Detailed status information
    """
    status_info = {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "version": settings.version,
        "components": {},
    }

    # Check catalog
    try:
        container.catalog.get("__status_check__")
        status_info["components"]["catalog"] = {
            "status": "healthy",
            "backend": type(container.catalog).__name__,
        }
    except Exception as e:
        logger.error(f"Catalog health check failed: {e}")
        status_info["components"]["catalog"] = {"status": "unhealthy", "error": str(e)}
        status_info["status"] = "degraded"

    # Check cache
    if container.cache is None:
        status_info["components"]["cache"] = {"status": "disabled"}
    elif container.cache.ping():
        status_info["components"]["cache"] = {"status": "healthy"}
    else:
        status_info["components"]["cache"] = {"status": "unhealthy"}
        status_info["status"] = "degraded"

    status_info["components"]["search"] = container.search_service.get_service_stats()
    status_info["latency_ms"] = get_latency_tracker().get_stats()

    return status_info
