"""
Request Timing Middleware
Rolling latency window exposed on /status.
"""

import logging
import time
from collections import deque
from threading import Lock
from typing import Callable, Dict, List, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class LatencyTracker:
    """Keeps the most recent request latencies and reports percentiles."""

    def __init__(self, window_size: int = 1000):
        self.window_size = window_size
        self.latencies: deque = deque(maxlen=window_size)
        self.lock = Lock()

    def record(self, latency_ms: float) -> None:
        with self.lock:
            self.latencies.append(latency_ms)

    def reset(self) -> None:
        with self.lock:
            self.latencies.clear()

    def get_stats(self) -> Dict[str, float]:
        """
        Get latency statistics.

        Returns:
            Dict with count, p50, p95, p99, mean, max
        """
        with self.lock:
            values = sorted(self.latencies)

        if not values:
            return {"count": 0, "p50": 0.0, "p95": 0.0, "p99": 0.0, "mean": 0.0, "max": 0.0}

        return {
            "count": len(values),
            "p50": self._percentile(values, 50),
            "p95": self._percentile(values, 95),
            "p99": self._percentile(values, 99),
            "mean": sum(values) / len(values),
            "max": values[-1],
        }

    @staticmethod
    def _percentile(sorted_values: List[float], percentile: int) -> float:
        index = min(int(percentile / 100.0 * len(sorted_values)), len(sorted_values) - 1)
        return sorted_values[index]


# Global latency tracker
_latency_tracker = LatencyTracker()


def get_latency_tracker() -> LatencyTracker:
    """Get global latency tracker."""
    return _latency_tracker


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Records each request's latency and flags slow ones."""

    def __init__(self, app, tracker: Optional[LatencyTracker] = None, slow_request_ms: float = 300):
        """
        Initialize timing middleware.

        Args:
            app: ASGI application
            tracker: Latency tracker (uses global if not provided)
            slow_request_ms: Threshold for slow-request warnings
        """
        super().__init__(app)
        self.tracker = tracker or get_latency_tracker()
        self.slow_request_ms = slow_request_ms

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        self.tracker.record(duration_ms)

        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

        if duration_ms > self.slow_request_ms:
            logger.warning(
                f"Slow request: {request.method} {request.url.path} took {duration_ms:.2f}ms",
                extra={"duration_ms": duration_ms},
            )

        return response
