"""Tests for the in-memory link store."""

import asyncio
from datetime import timedelta

import pytest

from nanolink.database.models import ShortLink, utcnow
from nanolink.errors import CodeInUseError, ValidationError


def make_link(code, url="https://example.com", age=timedelta(0)):
    return ShortLink(short_code=code, original_url=url, created_at=utcnow() - age)


@pytest.mark.asyncio
class TestMemoryShortLinkStore:
    """Test the store contract against the in-memory implementation."""

    async def test_insert_assigns_id(self, store):
        first = await store.insert(make_link("aaaa"))
        second = await store.insert(make_link("bbbb"))

        assert first.id == 1
        assert second.id == 2
        assert first.visits == 0

    async def test_insert_duplicate_code(self, store):
        await store.insert(make_link("dupe", "https://a.example.com"))

        with pytest.raises(CodeInUseError) as exc_info:
            await store.insert(make_link("dupe", "https://b.example.com"))
        assert exc_info.value.code == "dupe"

        link = await store.get_by_code("dupe")
        assert link.original_url == "https://a.example.com"

    async def test_get_missing(self, store):
        assert await store.get_by_code("nope") is None
        assert await store.get_by_original_url("https://nowhere.example.com") is None

    async def test_returned_links_are_copies(self, store):
        await store.insert(make_link("copy"))

        link = await store.get_by_code("copy")
        link.visits = 99

        assert (await store.get_by_code("copy")).visits == 0

    async def test_get_by_original_url(self, store):
        await store.insert(make_link("one1", "https://example.com/x"))

        link = await store.get_by_original_url("https://example.com/x")
        assert link.short_code == "one1"

    async def test_increment_visits(self, store):
        await store.insert(make_link("hits"))

        assert await store.increment_visits("hits")
        assert await store.increment_visits("hits")
        assert not await store.increment_visits("miss")

        assert (await store.get_by_code("hits")).visits == 2

    async def test_concurrent_increments(self, store):
        await store.insert(make_link("busy"))

        await asyncio.gather(*[store.increment_visits("busy") for _ in range(200)])

        assert (await store.get_by_code("busy")).visits == 200

    async def test_list_recent_newest_first(self, store):
        await store.insert(make_link("old1", age=timedelta(hours=2)))
        await store.insert(make_link("new1"))
        await store.insert(make_link("mid1", age=timedelta(hours=1)))

        links = await store.list_recent(2)

        assert [link.short_code for link in links] == ["new1", "mid1"]

    async def test_get_stats(self, store):
        empty = await store.get_stats()
        assert empty.total_urls == 0
        assert empty.total_visits == 0
        assert empty.last_created is None

        await store.insert(make_link("s001", age=timedelta(days=1)))
        newest = await store.insert(make_link("s002"))
        await store.increment_visits("s001")
        await store.increment_visits("s002")
        await store.increment_visits("s002")

        stats = await store.get_stats()
        assert stats.total_urls == 2
        assert stats.total_visits == 3
        assert stats.last_created == newest.created_at

    async def test_code_exists(self, store):
        await store.insert(make_link("here"))

        assert await store.code_exists("here")
        assert not await store.code_exists("gone")

    async def test_delete_older_than(self, store):
        await store.insert(make_link("old1", age=timedelta(days=31)))
        await store.insert(make_link("old2", age=timedelta(days=45)))
        await store.insert(make_link("new1", age=timedelta(days=1)))

        deleted = await store.delete_older_than(timedelta(days=30))

        assert deleted == 2
        assert await store.get_by_code("old1") is None
        assert await store.get_by_code("new1") is not None

    async def test_delete_older_than_requires_positive_age(self, store):
        with pytest.raises(ValidationError):
            await store.delete_older_than(timedelta(0))

    async def test_health_check(self, store):
        assert await store.health_check()
        await store.close()
        assert not await store.health_check()
