"""
Shared fixtures for Articles Service tests.
"""

import asyncio
from typing import Any, Dict, List, Optional, Set

import pytest

from shared.errors import StoreUnavailableError, UpstreamFetchError
from service_articles.app.models import ArticleSet


class InMemoryKeyValueStore:
    """KeyValueStore test double that records every put."""

    def __init__(self, fail_keys: Optional[Set[str]] = None, unavailable: bool = False):
        self.data: Dict[str, bytes] = {}
        self.puts: List[str] = []
        self.gets: List[str] = []
        self.fail_keys = set(fail_keys or ())
        self.unavailable = unavailable

    async def get(self, key: str) -> Optional[bytes]:
        self.gets.append(key)
        if self.unavailable:
            raise StoreUnavailableError("connection refused", details={"key": key})
        return self.data.get(key)

    async def put(self, key: str, value: bytes) -> None:
        self.puts.append(key)
        # Yield so concurrent puts actually interleave.
        await asyncio.sleep(0)
        if self.unavailable or key in self.fail_keys:
            raise StoreUnavailableError("write rejected", details={"key": key})
        self.data[key] = value

    def snapshot(self) -> Dict[str, bytes]:
        return dict(self.data)


class StaticUpstream:
    """UpstreamSource test double returning a fixed article set."""

    def __init__(self, article_set: Optional[ArticleSet] = None, error: Optional[Exception] = None):
        self.article_set = article_set
        self.error = error
        self.calls = 0

    async def fetch_article_set(self) -> ArticleSet:
        self.calls += 1
        if self.error:
            raise self.error
        return self.article_set


def make_article(article_id: int, slug: str, **overrides) -> Dict[str, Any]:
    """Upstream-shaped article dict."""
    article = {
        "id": article_id,
        "slug": slug,
        "title": f"Title {article_id}",
        "description": f"Description {article_id}",
        "body": f"<p>Body of article {article_id}</p>",
        "author_full_name": "Ada Lovelace",
        "cover_img_src": f"https://cdn.example.com/{slug}.jpg",
        "cover_img_alt": f"Cover for {slug}",
        "is_active": True,
        "published_date": "2024-01-01",
        "created_at": "2024-01-01T08:00:00.000000Z",
        "updated_at": "2024-01-02T09:30:00.000000Z",
    }
    article.update(overrides)
    return article


@pytest.fixture
def hello_world_payload() -> Dict[str, Any]:
    """Single-article upstream payload with every optional field null."""
    return {
        "articles": [
            make_article(
                1,
                "hello-world",
                title="Hello",
                description=None,
                body="...",
                author_full_name=None,
                cover_img_src=None,
                cover_img_alt=None,
            )
        ]
    }


@pytest.fixture
def three_article_payload() -> Dict[str, Any]:
    return {
        "articles": [
            make_article(3, "third-post"),
            make_article(1, "first-post"),
            make_article(2, "second_post"),
        ]
    }


@pytest.fixture
def three_article_set(three_article_payload) -> ArticleSet:
    return ArticleSet.model_validate(three_article_payload)


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def failing_upstream() -> StaticUpstream:
    return StaticUpstream(error=UpstreamFetchError("upstream responded with status 503"))
