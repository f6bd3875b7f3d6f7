"""
Unit tests for services.history module.
Tests statistics, search filters, export and duplication rules.
"""
import datetime as dt

import pytest

from vgen.models import Content, ContentUsage
from vgen.services import history
from vgen.storage.memory import MemoryStore


NOW = dt.datetime(2026, 6, 15, 12, 0, tzinfo=dt.timezone.utc)


def item(**fields) -> Content:
    values = {"user_id": "u1", "type": "resume", "title": "Item", "created_at": NOW, **fields}
    return Content(**values)


class TestPagination:
    def test_first_page(self):
        assert history.pagination(45, 1, 20) == {
            "currentPage": 1,
            "totalPages": 3,
            "totalItems": 45,
            "itemsPerPage": 20,
            "hasNextPage": True,
            "hasPrevPage": False,
        }

    def test_empty(self):
        page = history.pagination(0, 1, 20)
        assert page["totalPages"] == 0
        assert page["hasNextPage"] is False


class TestStats:
    def test_summary(self):
        items = [
            item(usage=ContentUsage(views=3, downloads=1), content={"a": "x" * 10}),
            item(usage=ContentUsage(views=1), content={"a": "x" * 30}),
            item(type="bio", usage=ContentUsage(downloads=2)),
        ]
        stats = history.stats_summary(items, NOW)
        assert stats["overview"]["totalContent"] == 3
        assert stats["overview"]["totalViews"] == 4
        assert stats["overview"]["totalDownloads"] == 3
        assert stats["byType"] == {"resume": 2, "bio": 1}
        resume_row = stats["detailed"][0]
        assert resume_row["type"] == "resume"
        assert resume_row["avgCharacterCount"] == (len('{"a": "' + "x" * 10 + '"}') + len('{"a": "' + "x" * 30 + '"}')) / 2

    def test_summary_empty(self):
        stats = history.stats_summary([], NOW)
        assert stats["overview"]["averageCharacterCount"] == 0
        assert stats["detailed"] == []

    def test_usage_buckets(self):
        items = [
            item(created_at=NOW - dt.timedelta(hours=1), usage=ContentUsage(views=2)),
            item(created_at=NOW - dt.timedelta(days=2)),
            item(created_at=NOW - dt.timedelta(days=10)),
        ]
        usage = history.usage_stats(items, "7days", NOW)
        assert len(usage["data"]) == 7
        assert usage["data"][-1] == {"date": "2026-06-15", "count": 1, "views": 2, "downloads": 0}
        assert usage["data"][-3]["count"] == 1
        assert usage["summary"]["totalCreated"] == 2
        assert usage["summary"]["averagePerDay"] == 0

    def test_unknown_period_defaults_to_thirty_days(self):
        assert history.usage_stats([], "forever", NOW)["days"] == 30


class TestSearchItems:
    def test_query_matches_content_json(self):
        items = [item(title="A", content={"skills": ["Kubernetes"]}), item(title="B")]
        assert [c.title for c in history.search_items(items, query="kubernetes")] == ["A"]

    def test_flags_are_optional(self):
        items = [item(is_favorite=True), item(is_favorite=False)]
        assert len(history.search_items(items)) == 2
        assert len(history.search_items(items, is_favorite=False)) == 1

    def test_date_to_covers_whole_day(self):
        items = [item(created_at=dt.datetime(2026, 6, 10, 23, 30, tzinfo=dt.timezone.utc))]
        assert history.search_items(items, date_to="2026-06-10") == items
        assert history.search_items(items, date_from="2026-06-11") == []

    def test_bad_date(self):
        with pytest.raises(ValueError):
            history.search_items([item()], date_from="june")

    def test_tags_any_match(self):
        items = [item(tags=["Python"]), item(tags=["go"])]
        assert len(history.search_items(items, tags=["python", "rust"])) == 1


class TestExport:
    def test_json_carries_metadata(self):
        exported = history.export_items([item(metadata={"template": "modern"})], "json")
        assert exported[0]["metadata"] == {"template": "modern"}
        assert "updatedAt" in exported[0]

    def test_json_without_metadata(self):
        exported = history.export_items([item(metadata={"template": "modern"})], "json", include_metadata=False)
        assert "metadata" not in exported[0]

    def test_csv_is_flat(self):
        exported = history.export_items([item()], "csv")
        assert set(exported[0]) == {"id", "type", "title", "content", "tags", "createdAt"}


class TestRecommendations:
    @pytest.mark.parametrize(
        "total, types",
        [(0, ["getting_started"]), (3, ["diversify"]), (7, []), (11, ["organize"])],
    )
    def test_by_total(self, total, types):
        assert [r["type"] for r in history.recommendations(total)] == types


@pytest.mark.asyncio
class TestOwnership:
    async def test_update_requires_owner(self):
        store = MemoryStore()
        saved = await store.content.create(item())
        assert await history.update_content(store, saved.id, "u2", {"title": "x"}) is None
        updated = await history.update_content(store, saved.id, "u1", {"title": "x", "tags": None})
        assert updated.title == "x"
        assert updated.version == 2

    async def test_open_content_counts_views_for_public(self):
        store = MemoryStore()
        saved = await store.content.create(item(is_public=True))
        opened = await history.open_content(store, saved.id, "someone-else")
        assert opened.usage.views == 1

    async def test_duplicate_private_item_of_other_user(self):
        store = MemoryStore()
        saved = await store.content.create(item())
        assert await history.duplicate_content(store, saved.id, "u2") is None

    async def test_list_with_search_counts_matches(self):
        store = MemoryStore()
        await store.content.create(item(title="Python resume"))
        await store.content.create(item(title="Go resume", tags=["python"]))
        await store.content.create(item(title="Bio"))
        data = await history.list_history(store, "u1", search="python", limit=1)
        assert data["totalCount"] == 2
        assert len(data["history"]) == 1
        assert data["pagination"]["totalPages"] == 2

    async def test_page_size_capped(self):
        store = MemoryStore()
        data = await history.list_history(store, "u1", limit=500)
        assert data["pagination"]["itemsPerPage"] == history.MAX_PAGE_SIZE
