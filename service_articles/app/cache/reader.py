"""
Read path for the article cache.
"""

from typing import Optional, TYPE_CHECKING

from shared.logging import get_logger
from shared.errors import StoreUnavailableError
from ..models import is_valid_slug
from ..results import ReadResult
from .keys import SUMMARY_KEY, article_key
from .store import KeyValueStore

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


class CacheReader:
    """Serves stored payloads verbatim. A miss is final; nothing is fetched upstream."""

    def __init__(self, store: KeyValueStore, *, metrics: Optional["MetricsCollector"] = None):
        self.store = store
        self.metrics = metrics
        self.logger = get_logger("articles.cache.reader")

    async def get_summary_list(self) -> ReadResult:
        """Return the serialized summary list."""
        return await self._read("summary_list", SUMMARY_KEY)

    async def get_article_by_slug(self, slug: str) -> ReadResult:
        """Return the serialized full record for a slug."""
        if not is_valid_slug(slug):
            self.logger.info("Rejected invalid slug", slug=slug)
            self._record("article", "not_found")
            return ReadResult.not_found()
        return await self._read("article", article_key(slug))

    async def _read(self, operation: str, key: str) -> ReadResult:
        try:
            payload = await self.store.get(key)
        except StoreUnavailableError as e:
            self.logger.error("Cache read failed", key=key, error=e.message)
            self._record(operation, "store_unavailable")
            return ReadResult.store_unavailable()

        if payload is None:
            self.logger.info("Cache miss", key=key)
            self._record(operation, "not_found")
            return ReadResult.not_found()

        self.logger.debug("Cache hit", key=key)
        self._record(operation, "hit")
        return ReadResult.found(payload)

    def _record(self, operation: str, outcome: str):
        if self.metrics:
            self.metrics.increment_counter("article_cache_reads_total", operation=operation, outcome=outcome)
