"""
Error types for the ingestion pipeline.

Each stage raises its own error type so the orchestrator can decide
at which scope (variant or product) a failure is contained.
"""

from typing import Optional


class CatalogError(Exception):
    """Base class for all pipeline errors."""


class FetchError(CatalogError):
    """Network or HTTP failure reaching a source site or dependent service."""

    def __init__(self, message: str, url: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class NotFoundError(CatalogError):
    """Source page no longer exists (HTTP 404 or equivalent). Never retried."""

    def __init__(self, message: str, url: str = ""):
        super().__init__(message)
        self.url = url


class ParseError(CatalogError):
    """Expected page structure is missing."""


class ImageError(CatalogError):
    """Image download, transcode or upload failed."""


class PersistenceError(CatalogError):
    """Relational store rejected a query or insert."""


class TrackerError(CatalogError):
    """Tracker API call failed. Never affects catalog correctness."""


class ConfigError(CatalogError):
    """Required configuration is missing or unreadable."""
