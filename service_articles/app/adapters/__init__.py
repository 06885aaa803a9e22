"""
Adapters package for the Articles Service.

Contains the HTTP client for the upstream content API. Adapters raise the
shared error types; the cache core turns them into result values.
"""

from .upstream_client import UpstreamClient

__all__ = [
    "UpstreamClient",
]
