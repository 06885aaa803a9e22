"""
Unit tests for the article CacheReader.
"""

import pytest

from service_articles.app.cache.keys import SUMMARY_KEY
from service_articles.app.cache.reader import CacheReader
from service_articles.app.results import ReadErrorKind
from conftest import InMemoryKeyValueStore


class TestCacheReader:
    """Test cases for CacheReader."""

    @pytest.mark.asyncio
    async def test_summary_list_before_any_refresh_is_not_found(self, store):
        result = await CacheReader(store).get_summary_list()

        assert not result.ok
        assert result.error is ReadErrorKind.NOT_FOUND
        assert result.payload is None

    @pytest.mark.asyncio
    async def test_summary_list_is_returned_verbatim(self, store):
        store.data[SUMMARY_KEY] = b'[{"id":1,"slug":"a"}]'

        result = await CacheReader(store).get_summary_list()

        assert result.ok
        assert result.payload == b'[{"id":1,"slug":"a"}]'

    @pytest.mark.asyncio
    async def test_article_hit(self, store):
        store.data["article:hello-world"] = b'{"id":1}'

        result = await CacheReader(store).get_article_by_slug("hello-world")

        assert result.ok
        assert result.payload == b'{"id":1}'
        assert store.gets == ["article:hello-world"]

    @pytest.mark.asyncio
    async def test_article_miss_does_not_mutate(self, store):
        store.data["article:other"] = b"{}"
        before = store.snapshot()

        result = await CacheReader(store).get_article_by_slug("nonexistent")

        assert result.error is ReadErrorKind.NOT_FOUND
        assert store.snapshot() == before
        assert store.puts == []

    @pytest.mark.asyncio
    async def test_invalid_slug_skips_store(self, store):
        result = await CacheReader(store).get_article_by_slug("../articles-summary")

        assert result.error is ReadErrorKind.NOT_FOUND
        assert store.gets == []

    @pytest.mark.asyncio
    async def test_store_unavailable_is_distinct_from_not_found(self):
        store = InMemoryKeyValueStore(unavailable=True)
        reader = CacheReader(store)

        summary_result = await reader.get_summary_list()
        article_result = await reader.get_article_by_slug("hello-world")

        assert summary_result.error is ReadErrorKind.STORE_UNAVAILABLE
        assert article_result.error is ReadErrorKind.STORE_UNAVAILABLE
