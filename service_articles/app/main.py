"""
Articles service for the Edge Article Cache.
"""

from typing import Dict, Optional

from fastapi import Request, Response
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.base_service import BaseService
from shared.config import ServiceConfig, describe_config

from .adapters.upstream_client import UpstreamClient
from .cache.reader import CacheReader
from .cache.store import KeyValueStore, RedisKeyValueStore
from .cache.writer import CacheWriter
from .refresh.coordinator import RefreshCoordinator, UpstreamSource
from .results import ReadErrorKind, ReadResult, RefreshErrorKind


JSON_CONTENT_TYPE = "application/json;charset=UTF-8"

READ_ERROR_STATUS = {
    ReadErrorKind.NOT_FOUND: 404,
    ReadErrorKind.STORE_UNAVAILABLE: 503,
}

REFRESH_ERROR_STATUS = {
    RefreshErrorKind.UPSTREAM_FETCH_ERROR: 502,
    RefreshErrorKind.UPSTREAM_SHAPE_ERROR: 502,
    RefreshErrorKind.CACHE_WRITE_ERROR: 500,
}


class ArticlesService(BaseService):
    """Serves cached articles and accepts refresh triggers."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        *,
        store: Optional[KeyValueStore] = None,
        upstream: Optional[UpstreamSource] = None,
    ):
        super().__init__("articles", 8020, config=config)

        self.store = store or RedisKeyValueStore(self.config.redis_url)
        self.upstream = upstream or UpstreamClient(
            self.config.api_server_base_url,
            timeout=self.config.upstream_timeout_seconds
        )
        self.reader = CacheReader(self.store, metrics=self.metrics)
        self.writer = CacheWriter(self.store, metrics=self.metrics)
        self.coordinator = RefreshCoordinator(
            self.upstream,
            self.writer,
            self.reader,
            metrics=self.metrics
        )

        self._setup_article_routes()

    def _setup_article_routes(self):
        """Set up article routes."""

        @self.app.get("/articles")
        async def list_articles():
            """Return the cached summary list."""
            result = await self.reader.get_summary_list()
            return self._read_response(result, not_found_message="Articles not found")

        @self.app.get("/articles/{slug}")
        async def get_article(slug: str):
            """Return one cached article."""
            result = await self.reader.get_article_by_slug(slug)
            return self._read_response(result, not_found_message="Article not found")

        @self.app.api_route("/update-kv", methods=["GET", "POST"])
        async def update_kv():
            """Pull the article set from upstream and replace the cache."""
            result = await self.coordinator.refresh()

            if not result.ok:
                return PlainTextResponse(
                    f"Error updating KV Store: {result.message}",
                    status_code=REFRESH_ERROR_STATUS[result.error]
                )

            return PlainTextResponse(
                "KV Store Updated",
                status_code=200,
                headers={"X-Articles-Written": str(result.summary.articles_written)}
            )

        @self.app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(request: Request, exc: StarletteHTTPException):
            """Plain-text bodies for routing errors."""
            if exc.status_code == 404:
                return PlainTextResponse("Invalid endpoint", status_code=404)
            return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)

    def _read_response(self, result: ReadResult, *, not_found_message: str) -> Response:
        if result.ok:
            return Response(content=result.payload, media_type=JSON_CONTENT_TYPE)

        if result.error is ReadErrorKind.NOT_FOUND:
            message = not_found_message
        else:
            message = "Article store unavailable"
        return PlainTextResponse(message, status_code=READ_ERROR_STATUS[result.error])

    async def _check_dependencies(self) -> Dict[str, str]:
        """Check articles service dependencies."""
        dependencies = {}

        health_check = getattr(self.store, "health_check", None)
        if health_check is not None:
            dependencies["store"] = "ok" if await health_check() else "error"

        return dependencies

    async def start(self):
        """Start service components."""
        for component in (self.store, self.upstream):
            start = getattr(component, "start", None)
            if start is not None:
                await start()

        self.logger.info("Articles service started", config=describe_config(self.config))

    async def stop(self):
        """Stop service components."""
        for component in (self.upstream, self.store):
            stop = getattr(component, "stop", None)
            if stop is not None:
                await stop()

        self.logger.info("Articles service stopped")


def create_app():
    """Create articles service application."""
    service = ArticlesService()
    return service.app


if __name__ == "__main__":
    service = ArticlesService()
    service.run()
