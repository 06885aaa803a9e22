"""
Bulk writer that lays an article set out in the key-value store.
"""

import asyncio
import json
from typing import List, Optional, Tuple, TYPE_CHECKING

from shared.logging import get_logger
from ..models import ArticleSet
from ..results import PartialWriteResult
from .keys import SUMMARY_KEY, article_key
from .store import KeyValueStore

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


def build_payloads(article_set: ArticleSet) -> Tuple[List[Tuple[str, bytes]], bytes]:
    """Serialize the set into (key, bytes) pairs plus the summary payload."""
    article_payloads = [
        (article_key(article.slug), article.model_dump_json().encode("utf-8"))
        for article in article_set.articles
    ]
    summary_payload = json.dumps(
        [summary.model_dump(mode="json") for summary in article_set.summaries()],
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")
    return article_payloads, summary_payload


class CacheWriter:
    """Writes full records and the summary projection for one article set."""

    def __init__(self, store: KeyValueStore, *, metrics: Optional["MetricsCollector"] = None):
        self.store = store
        self.metrics = metrics
        self.logger = get_logger("articles.cache.writer")

    async def write(self, article_set: ArticleSet) -> PartialWriteResult:
        """Write every article and the summary concurrently.

        Never raises for store failures; the returned result records which
        keys made it. Keys written before a failure are left in place.
        """
        article_payloads, summary_payload = build_payloads(article_set)
        writes = article_payloads + [(SUMMARY_KEY, summary_payload)]

        outcomes = await asyncio.gather(
            *(self.store.put(key, payload) for key, payload in writes),
            return_exceptions=True
        )

        result = PartialWriteResult(articles_total=len(article_payloads))
        for (key, payload), outcome in zip(writes, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                result.failed_keys.append(key)
                self.logger.error("Cache write failed", key=key, error=str(outcome))
                continue

            result.bytes_written += len(payload)
            if key == SUMMARY_KEY:
                result.summary_written = True
            else:
                result.articles_written += 1

        if self.metrics:
            succeeded = len(writes) - len(result.failed_keys)
            if succeeded:
                self.metrics.increment_counter("article_cache_writes_total", succeeded, outcome="ok")
            if result.failed_keys:
                self.metrics.increment_counter("article_cache_writes_total", len(result.failed_keys), outcome="error")

        log = self.logger.info if result.ok else self.logger.warning
        log(
            "Cache write finished",
            articles_written=result.articles_written,
            articles_total=result.articles_total,
            summary_written=result.summary_written,
            failed=len(result.failed_keys),
            bytes_written=result.bytes_written
        )
        return result
