"""
Shared error types for the Edge Article Cache.

Adapters (store, upstream client) raise these. The cache core catches them at
its operation boundaries and turns them into result values, so nothing below
the HTTP layer lets them escape.
"""

from typing import Dict, Any, Optional


class ArticleCacheException(Exception):
    """Base exception for article cache components."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable view, used in logs and CLI output."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


class UpstreamFetchError(ArticleCacheException):
    """Transport failure or non-success status from the upstream API."""

    def __init__(self, message: str = "Upstream fetch failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("UPSTREAM_FETCH_ERROR", message, details)


class UpstreamShapeError(ArticleCacheException):
    """Upstream payload could not be parsed into an article set."""

    def __init__(self, message: str = "Upstream payload has an unexpected shape", details: Optional[Dict[str, Any]] = None):
        super().__init__("UPSTREAM_SHAPE_ERROR", message, details)


class StoreUnavailableError(ArticleCacheException):
    """Key-value store could not be reached."""

    def __init__(self, message: str = "Key-value store unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__("STORE_UNAVAILABLE", message, details)


class CacheWriteError(ArticleCacheException):
    """One or more store writes failed during a refresh."""

    def __init__(self, message: str = "Cache write failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("CACHE_WRITE_ERROR", message, details)
