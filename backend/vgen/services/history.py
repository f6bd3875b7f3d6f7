# vgen/services/history.py
"""
Saved content history: listing, search, statistics, bulk operations,
duplication and export on top of the content store.

Ownership rules:
- Reads allow the owner or anyone when the item is public.
- Writes (update, delete, favorite, duplicate) require the owner.
"""
import json
import math
import datetime as dt
from typing import Optional

from vgen.models import Content, parse_iso, utcnow
from vgen.storage.base import Store

MAX_PAGE_SIZE = 50
MAX_BULK_IDS = 50
PERIOD_DAYS = {"7days": 7, "30days": 30, "90days": 90}
DEFAULT_PERIOD_DAYS = 30

_FETCH_BATCH = 500


async def all_for_user(store: Store, user_id: str, content_type: Optional[str] = None) -> list[Content]:
    """Every item a user owns (newest first), fetched in batches."""
    items: list[Content] = []
    offset = 0
    while True:
        batch = await store.content.list_for_user(user_id, content_type, limit=_FETCH_BATCH, offset=offset)
        items.extend(batch)
        if len(batch) < _FETCH_BATCH:
            return items
        offset += _FETCH_BATCH


def pagination(total: int, page: int, limit: int) -> dict:
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "currentPage": page,
        "totalPages": total_pages,
        "totalItems": total,
        "itemsPerPage": limit,
        "hasNextPage": page < total_pages,
        "hasPrevPage": page > 1,
    }


def matches_term(item: Content, term: str) -> bool:
    """Case-insensitive match on title or any tag."""
    term = term.lower()
    return term in item.title.lower() or any(term in tag.lower() for tag in item.tags)


async def list_history(
    store: Store,
    user_id: str,
    content_type: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
    search: Optional[str] = None,
) -> dict:
    limit = min(limit, MAX_PAGE_SIZE)
    offset = (page - 1) * limit
    if search:
        matching = [c for c in await all_for_user(store, user_id, content_type) if matches_term(c, search)]
        total = len(matching)
        items = matching[offset:offset + limit]
    else:
        total = await store.content.count_for_user(user_id, content_type)
        items = await store.content.list_for_user(user_id, content_type, limit=limit, offset=offset)

    return {
        "history": [c.to_public() for c in items],
        "pagination": pagination(total, page, limit),
        "filters": {"type": content_type, "search": search},
        "totalCount": total,
    }


async def open_content(store: Store, content_id: str, user_id: str) -> Optional[Content]:
    """Fetch an accessible item and record the view. None when missing or private."""
    item = await store.content.get(content_id)
    if item is None or not item.is_accessible(user_id):
        return None
    item.touch()
    return await store.content.save(item)


async def owned_content(store: Store, content_id: str, user_id: str) -> Optional[Content]:
    item = await store.content.get(content_id)
    if item is None or not item.is_owned_by(user_id):
        return None
    return item


async def save_content(
    store: Store,
    user_id: str,
    content_type: str,
    title: str,
    content: dict,
    metadata: Optional[dict] = None,
    tags: Optional[list[str]] = None,
    is_public: bool = False,
) -> Content:
    return await store.content.create(Content(
        user_id=user_id,
        type=content_type,
        title=title,
        content=content,
        metadata=metadata or {},
        tags=tags or [],
        is_public=is_public,
    ))


async def update_content(store: Store, content_id: str, user_id: str, changes: dict) -> Optional[Content]:
    """
    Apply `changes` (snake_case field names) to an owned item.

    The version is bumped when the title or content changes.
    """
    item = await owned_content(store, content_id, user_id)
    if item is None:
        return None
    if changes.get("title") is not None or changes.get("content") is not None:
        item.version += 1
    for field, value in changes.items():
        if value is not None:
            setattr(item, field, value)
    return await store.content.save(item)


async def delete_content(store: Store, content_id: str, user_id: str) -> bool:
    item = await owned_content(store, content_id, user_id)
    if item is None:
        return False
    return await store.content.delete(item.id)


async def toggle_favorite(store: Store, content_id: str, user_id: str) -> Optional[Content]:
    item = await owned_content(store, content_id, user_id)
    if item is None:
        return None
    item.is_favorite = not item.is_favorite
    return await store.content.save(item)


async def count_download(store: Store, item: Content) -> Content:
    item.usage.downloads += 1
    return await store.content.save(item)


def stats_summary(items: list[Content], now: Optional[dt.datetime] = None) -> dict:
    """Totals plus a per-type breakdown (types in first-seen order)."""
    detailed: dict[str, dict] = {}
    for item in items:
        row = detailed.setdefault(item.type, {
            "type": item.type,
            "count": 0,
            "totalViews": 0,
            "totalDownloads": 0,
            "_characters": 0,
        })
        row["count"] += 1
        row["totalViews"] += item.usage.views
        row["totalDownloads"] += item.usage.downloads
        row["_characters"] += item.character_count

    rows = []
    for row in detailed.values():
        characters = row.pop("_characters")
        row["avgCharacterCount"] = characters / row["count"]
        rows.append(row)

    average = sum(r["avgCharacterCount"] for r in rows) / len(rows) if rows else 0
    return {
        "overview": {
            "totalContent": sum(r["count"] for r in rows),
            "totalViews": sum(r["totalViews"] for r in rows),
            "totalDownloads": sum(r["totalDownloads"] for r in rows),
            "averageCharacterCount": round(average),
        },
        "byType": {r["type"]: r["count"] for r in rows},
        "detailed": rows,
        "generatedAt": (now or utcnow()).isoformat(),
    }


def usage_stats(items: list[Content], period: str = "30days", now: Optional[dt.datetime] = None) -> dict:
    """
    Daily creation, view and download totals for the last N days.

    Buckets are UTC calendar dates, oldest first; days with no activity
    appear with zero counts.
    """
    now = now or utcnow()
    days = PERIOD_DAYS.get(period, DEFAULT_PERIOD_DAYS)
    start = now - dt.timedelta(days=days)

    buckets: dict[str, dict] = {}
    for item in items:
        created = item.created_at if item.created_at.tzinfo else item.created_at.replace(tzinfo=dt.timezone.utc)
        if created < start:
            continue
        day = created.astimezone(dt.timezone.utc).date().isoformat()
        bucket = buckets.setdefault(day, {"count": 0, "views": 0, "downloads": 0})
        bucket["count"] += 1
        bucket["views"] += item.usage.views
        bucket["downloads"] += item.usage.downloads

    data = []
    for offset in range(days - 1, -1, -1):
        day = (now - dt.timedelta(days=offset)).date().isoformat()
        bucket = buckets.get(day, {"count": 0, "views": 0, "downloads": 0})
        data.append({"date": day, **bucket})

    total_created = sum(d["count"] for d in data)
    return {
        "period": period,
        "days": days,
        "data": data,
        "summary": {
            "totalCreated": total_created,
            "totalViews": sum(d["views"] for d in data),
            "totalDownloads": sum(d["downloads"] for d in data),
            "averagePerDay": round(total_created / days),
        },
    }


async def bulk_delete(store: Store, user_id: str, content_ids: list[str]) -> list[str]:
    """Delete the owned items among `content_ids`. Returns the deleted ids."""
    deleted = []
    for content_id in content_ids:
        if await delete_content(store, content_id, user_id):
            deleted.append(content_id)
    return deleted


async def bulk_favorite(store: Store, user_id: str, content_ids: list[str], favorite: bool) -> int:
    updated = 0
    for content_id in content_ids:
        item = await owned_content(store, content_id, user_id)
        if item is None:
            continue
        item.is_favorite = favorite
        await store.content.save(item)
        updated += 1
    return updated


def _parse_day(value: str, end_of_day: bool = False) -> dt.datetime:
    moment = parse_iso(value)
    if end_of_day and len(value) <= 10:
        moment += dt.timedelta(days=1) - dt.timedelta(microseconds=1)
    return moment


def search_items(
    items: list[Content],
    query: Optional[str] = None,
    content_type: Optional[str] = None,
    tags: Optional[list[str]] = None,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    is_favorite: Optional[bool] = None,
    is_public: Optional[bool] = None,
) -> list[Content]:
    """
    Filter items for advanced search.

    `query` matches the title, the serialized content or any tag. `tags`
    requires at least one shared tag. Date bounds are inclusive; a bare
    date for `date_to` covers that whole day.

    Raises:
        ValueError: A date bound is not ISO 8601
    """
    lower = _parse_day(date_from) if date_from else None
    upper = _parse_day(date_to, end_of_day=True) if date_to else None
    term = query.lower() if query else None
    wanted_tags = {t.lower() for t in tags or []}

    results = []
    for item in items:
        if content_type and item.type != content_type:
            continue
        if is_favorite is not None and item.is_favorite != is_favorite:
            continue
        if is_public is not None and item.is_public != is_public:
            continue
        if wanted_tags and not wanted_tags & {t.lower() for t in item.tags}:
            continue
        created = item.created_at if item.created_at.tzinfo else item.created_at.replace(tzinfo=dt.timezone.utc)
        if lower and created < lower:
            continue
        if upper and created > upper:
            continue
        if term and not (
            term in item.title.lower()
            or term in json.dumps(item.content).lower()
            or any(term in t.lower() for t in item.tags)
        ):
            continue
        results.append(item)
    return results


async def duplicate_content(
    store: Store,
    content_id: str,
    user_id: str,
    title: Optional[str] = None,
    modifications: Optional[dict] = None,
) -> Optional[Content]:
    """
    Copy an accessible item into the caller's history.

    The copy starts at version 1, is private and links back through
    parent_content. `modifications` is merged over the copied content;
    its "metadata" key is merged over the copied metadata.
    """
    original = await store.content.get(content_id)
    if original is None or not original.is_accessible(user_id):
        return None
    modifications = dict(modifications or {})
    metadata_changes = modifications.get("metadata")

    return await store.content.create(Content(
        user_id=user_id,
        type=original.type,
        title=title or f"{original.title} (Copy)",
        content={**original.content, **modifications},
        metadata={**original.metadata, **(metadata_changes if isinstance(metadata_changes, dict) else {})},
        tags=list(original.tags),
        is_public=False,
        version=1,
        parent_content=original.id,
    ))


def export_items(items: list[Content], fmt: str = "json", include_metadata: bool = True) -> list[dict]:
    """Export records; only the json format carries metadata and updatedAt."""
    exported = []
    for item in items:
        row = item.to_public()
        record = {
            "id": row["id"],
            "type": row["type"],
            "title": row["title"],
            "content": row["content"],
            "tags": row["tags"],
            "createdAt": row["createdAt"],
        }
        if fmt == "json":
            if include_metadata:
                record["metadata"] = row["metadata"]
            record["updatedAt"] = row["updatedAt"]
        exported.append(record)
    return exported


def recommendations(total_content: int) -> list[dict]:
    recs = []
    if total_content == 0:
        recs.append({
            "type": "getting_started",
            "title": "Create your first resume",
            "description": "Start building your professional profile with our AI resume generator",
            "action": "/resume/generate",
            "priority": "high",
        })
    if 0 < total_content < 5:
        recs.append({
            "type": "diversify",
            "title": "Try other tools",
            "description": "Explore our cover letter generator and interview question tool",
            "action": "/tools",
            "priority": "medium",
        })
    if total_content > 10:
        recs.append({
            "type": "organize",
            "title": "Organize your content",
            "description": "Use tags and favorites to better organize your generated content",
            "action": "/history",
            "priority": "low",
        })
    return recs
