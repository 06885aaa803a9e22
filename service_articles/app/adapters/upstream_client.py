"""
Content API client for the Articles Service.
"""

from typing import Optional

import httpx
from pydantic import ValidationError

from shared.logging import get_logger
from shared.errors import UpstreamFetchError, UpstreamShapeError
from ..models import ArticleSet


ARTICLES_PATH = "/api/articles"


class UpstreamClient:
    """Fetches the full article set from the upstream content API.

    Failures are not retried here; the refresh caller decides whether to try
    again.
    """

    def __init__(
        self,
        api_server_base_url: str,
        *,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = api_server_base_url.rstrip('/')
        self.timeout = timeout
        self.logger = get_logger("articles.upstream_client")
        self._client = client
        self._owns_client = client is None

    async def start(self):
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True

    async def stop(self):
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch_article_set(self) -> ArticleSet:
        """GET the article set and validate its shape.

        Raises UpstreamFetchError on transport failures and non-2xx statuses,
        UpstreamShapeError when the body is not a valid article set.
        """
        url = f"{self.base_url}{ARTICLES_PATH}"

        try:
            if self._client is not None:
                response = await self._client.get(url)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url)
        except httpx.HTTPError as exc:
            self.logger.error("Upstream request failed", url=url, error=str(exc))
            raise UpstreamFetchError(
                f"request to {url} failed: {exc}",
                details={"url": url, "error_type": type(exc).__name__}
            )

        if not response.is_success:
            self.logger.error(
                "Upstream returned error status",
                url=url,
                status_code=response.status_code,
                response=response.text[:500]
            )
            raise UpstreamFetchError(
                f"upstream responded with status {response.status_code}",
                details={"url": url, "status_code": response.status_code}
            )

        try:
            article_set = ArticleSet.model_validate_json(response.content)
        except ValidationError as exc:
            self.logger.error("Upstream payload rejected", url=url, errors=exc.error_count())
            raise UpstreamShapeError(
                f"payload is not a valid article set: {exc.error_count()} validation error(s)",
                details={"url": url, "errors": exc.errors(include_url=False, include_context=False, include_input=False)}
            )

        self.logger.info("Fetched article set", url=url, articles=len(article_set.articles))
        return article_set
