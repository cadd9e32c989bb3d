"""
Engine Errors
Exception hierarchy shared by the search and activity subsystems.

The HTTP layer maps these onto responses (see api/errors.py); the core never
imports FastAPI.
"""

from typing import Optional, Union


class CatalogEngineError(Exception):
    """Base exception for engine errors."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(CatalogEngineError):
    """A required field is missing or malformed."""

    status_code = 400


class NotFoundError(CatalogEngineError):
    """A referenced product or user does not resolve."""

    status_code = 404

    def __init__(self, resource: str, resource_id: Union[int, str, None]):
        super().__init__(
            message=f"{resource} not found: {resource_id}",
            details={"resource": resource, "id": resource_id},
        )


class DependencyError(CatalogEngineError):
    """
    The external catalog (or activity store) failed.

    `fatal` marks failures that best-effort endpoints must still propagate
    instead of degrading to an empty result.
    """

    status_code = 503

    def __init__(self, message: str, details: Optional[dict] = None, fatal: bool = False):
        super().__init__(message, details)
        self.fatal = fatal


class SearchTimeoutError(DependencyError):
    """The request budget expired before the pipeline finished."""

    status_code = 504

    def __init__(self, stage: str, timeout: float):
        super().__init__(
            message=f"Request timed out during {stage} after {timeout:.2f}s",
            details={"stage": stage, "timeout_seconds": timeout},
            fatal=True,
        )
