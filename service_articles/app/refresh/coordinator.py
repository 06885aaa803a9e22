"""
Refresh orchestration: upstream fetch followed by a full cache replace.
"""

import asyncio
import json
import time
from typing import List, Optional, Protocol, TYPE_CHECKING

from shared.logging import get_logger
from shared.errors import (
    ArticleCacheException,
    CacheWriteError,
    UpstreamFetchError,
    UpstreamShapeError,
)
from ..cache.reader import CacheReader
from ..cache.writer import CacheWriter
from ..models import ArticleSet
from ..results import PartialWriteResult, RefreshErrorKind, RefreshResult, RefreshSummary

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


class UpstreamSource(Protocol):
    async def fetch_article_set(self) -> ArticleSet:
        ...


_ERROR_KINDS = {
    UpstreamFetchError: RefreshErrorKind.UPSTREAM_FETCH_ERROR,
    UpstreamShapeError: RefreshErrorKind.UPSTREAM_SHAPE_ERROR,
    CacheWriteError: RefreshErrorKind.CACHE_WRITE_ERROR,
}


def _classify(exc: Exception, failing_step: RefreshErrorKind) -> RefreshErrorKind:
    """Map an exception to its error kind, falling back to the step that raised it."""
    for error_type, kind in _ERROR_KINDS.items():
        if isinstance(exc, error_type):
            return kind
    return failing_step


class RefreshCoordinator:
    """Runs on-demand refreshes.

    Each step short-circuits the rest on failure and nothing is retried.
    Within one coordinator at most one refresh runs at a time. Triggers that
    arrive while a refresh is running are coalesced into a single follow-up
    run that starts once the current one finishes, so every caller gets a
    result whose upstream fetch began after its trigger. Coordinators in other
    processes are not serialized; for those the last write to each key wins.
    """

    def __init__(
        self,
        upstream: UpstreamSource,
        writer: CacheWriter,
        reader: CacheReader,
        *,
        metrics: Optional["MetricsCollector"] = None,
    ):
        self.upstream = upstream
        self.writer = writer
        self.reader = reader
        self.metrics = metrics
        self.logger = get_logger("articles.refresh")
        self._inflight: Optional["asyncio.Future[RefreshResult]"] = None
        self._followup: Optional["asyncio.Future[RefreshResult]"] = None

    @property
    def in_progress(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    async def refresh(self) -> RefreshResult:
        """Refresh the cache, queueing behind a refresh that is already running."""
        if not self.in_progress:
            self._inflight = asyncio.ensure_future(self._run())
            target = self._inflight
        elif self._followup is None:
            self.logger.info("Refresh in flight; queueing follow-up run")
            self._followup = asyncio.ensure_future(self._run_after(self._inflight))
            target = self._followup
        else:
            self.logger.info("Joining queued follow-up refresh")
            target = self._followup
        # Shielded so a cancelled caller does not abort the shared refresh.
        return await asyncio.shield(target)

    async def _run_after(self, previous: "asyncio.Future[RefreshResult]") -> RefreshResult:
        await asyncio.wait({previous})
        self._inflight, self._followup = self._followup, None
        return await self._run()

    async def _run(self) -> RefreshResult:
        start_time = time.time()
        write_result: Optional[PartialWriteResult] = None
        failing_step = RefreshErrorKind.UPSTREAM_FETCH_ERROR

        try:
            article_set = await self.upstream.fetch_article_set()

            failing_step = RefreshErrorKind.CACHE_WRITE_ERROR
            previous_slugs = await self._previous_slugs()
            write_result = await self.writer.write(article_set)
            write_result.raise_for_failure()
        except Exception as exc:
            kind = _classify(exc, failing_step)
            if isinstance(exc, ArticleCacheException):
                message = exc.message
                exc_info = False
            else:
                message = f"{type(exc).__name__}: {exc}"
                exc_info = True
            duration = time.time() - start_time
            self._record(kind.value, duration)
            self.logger.error(
                "Refresh failed",
                error_kind=kind.value,
                error=message,
                duration_ms=round(duration * 1000, 2),
                exc_info=exc_info
            )
            return RefreshResult(error=kind, message=message, write_result=write_result)

        duration = time.time() - start_time
        current_slugs = set(article_set.slugs)
        orphaned = [slug for slug in previous_slugs if slug not in current_slugs]
        if orphaned:
            # Stale records are reported, never deleted.
            self.logger.warning("Articles removed upstream remain cached", orphaned_slugs=orphaned)

        summary = RefreshSummary(
            articles_written=write_result.articles_written,
            summary_written=write_result.summary_written,
            orphaned_slugs=orphaned,
            duration_ms=round(duration * 1000, 2),
        )
        self._record("ok", duration)
        self.logger.info(
            "Refresh completed",
            articles_written=summary.articles_written,
            orphaned=len(orphaned),
            duration_ms=summary.duration_ms
        )
        return RefreshResult(
            summary=summary,
            message=f"{summary.articles_written} articles written",
            write_result=write_result
        )

    async def _previous_slugs(self) -> List[str]:
        """Slugs listed in the summary currently stored, if it can be read."""
        result = await self.reader.get_summary_list()
        if not result.ok:
            return []
        try:
            return [entry["slug"] for entry in json.loads(result.payload)]
        except (ValueError, TypeError, KeyError) as exc:
            self.logger.warning("Stored summary is unreadable", error=str(exc))
            return []

    def _record(self, outcome: str, duration: float):
        if self.metrics:
            self.metrics.increment_counter("article_refresh_total", outcome=outcome)
            self.metrics.observe_histogram("article_refresh_duration_seconds", duration, outcome=outcome)
