"""
Middleware
Request logging and timing for the FastAPI application.
"""

from .logging import RequestLoggingMiddleware
from .timing import LatencyTracker, RequestTimingMiddleware, get_latency_tracker

__all__ = [
    "RequestLoggingMiddleware",
    "RequestTimingMiddleware",
    "LatencyTracker",
    "get_latency_tracker",
]
