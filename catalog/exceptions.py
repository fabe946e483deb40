"""
Exceptions raised by the catalog services.

Routers translate these into HTTP errors; services never raise HTTPException.
"""
from typing import Any, Optional


class CatalogError(Exception):
    """
    Base exception for catalog sync and segment errors.

    Attributes:
        message: Human-readable message
        details: Additional context (ids, counts, upstream status...)
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class SourceUnavailable(CatalogError):
    """The remote catalog could not supply product records."""


class StoreWriteFailed(CatalogError):
    """A product could not be inserted or updated in the local store."""


class StoreQueryFailed(CatalogError):
    """The local store could not answer a read query."""


class SyncInProgress(CatalogError):
    """A sync pass was requested while another one is still running."""

    def __init__(self, message: str = "A catalog sync pass is already running"):
        super().__init__(message)
