"""
Request deadline shared by every stage of one search request.
"""

import time
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Any, Optional

from ..errors import SearchTimeoutError


class Deadline:
    """Absolute expiry for one request; None timeout means unbounded."""

    def __init__(self, timeout: Optional[float]):
        self.timeout = timeout
        self.expires_at = None if timeout is None else time.monotonic() + timeout

    def remaining(self) -> Optional[float]:
        if self.expires_at is None:
            return None
        return max(0.0, self.expires_at - time.monotonic())

    def check(self, stage: str) -> None:
        """Raise if the budget is already spent."""
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise SearchTimeoutError(stage, self.timeout)

    def wait(self, future: Future, stage: str) -> Any:
        """Wait for a future within the remaining budget, cancelling it on expiry."""
        try:
            return future.result(timeout=self.remaining())
        except FuturesTimeoutError:
            future.cancel()
            raise SearchTimeoutError(stage, self.timeout) from None
