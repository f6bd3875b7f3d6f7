# vgen/api/routers/history.py
import datetime as dt
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from vgen.api.deps import get_current_user, get_store, handle_failures, require_admin
from vgen.core.bootstrap import sweep_expired
from vgen.models import User
from vgen.services import history
from vgen.storage.base import Store

router = APIRouter(prefix="/history", tags=["history"])

ContentType = Literal["resume", "cover-letter", "bio", "flashcard", "interview", "analyzer"]
NOT_FOUND_OR_DENIED = "Content not found or access denied"


class ContentIn(BaseModel):
    type: ContentType
    title: str = Field(min_length=1, max_length=200)
    content: dict
    metadata: dict = Field(default_factory=dict)
    tags: List[str] = Field(default_factory=list)
    isPublic: bool = False


class ContentUpdateIn(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[dict] = None
    metadata: Optional[dict] = None
    tags: Optional[List[str]] = None
    isPublic: Optional[bool] = None
    isFavorite: Optional[bool] = None

    def changes(self) -> dict:
        return {
            "title": self.title,
            "content": self.content,
            "metadata": self.metadata,
            "tags": self.tags,
            "is_public": self.isPublic,
            "is_favorite": self.isFavorite,
        }


class BulkIdsIn(BaseModel):
    contentIds: List[str] = Field(min_length=1, max_length=history.MAX_BULK_IDS)


class BulkFavoriteIn(BulkIdsIn):
    favorite: bool


class DuplicateIn(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    modifications: dict = Field(default_factory=dict)


def _now() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


@router.get("")
async def list_history(
    type: Optional[ContentType] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    search: Optional[str] = None,
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """
    Paginated list of the caller's saved content, newest first.

    Args:
        type: Optional content type filter
        page: 1-based page number
        limit: Page size (capped at 50)
        search: Case-insensitive match on title or tags

    Returns:
        dict: history, pagination, filters, totalCount
    """
    with handle_failures("Failed to retrieve history. Please try again."):
        data = await history.list_history(store, user.id, type, page, limit, search)
        return {"success": True, "data": data}


@router.post("", status_code=status.HTTP_201_CREATED)
async def save(body: ContentIn, user: User = Depends(get_current_user), store: Store = Depends(get_store)):
    with handle_failures("Failed to save content. Please try again."):
        item = await history.save_content(
            store, user.id, body.type, body.title, body.content, body.metadata, body.tags, body.isPublic
        )
        return {
            "success": True,
            "message": "Content saved successfully",
            "data": {"content": item.to_public(), "savedAt": _now()},
        }


@router.get("/stats/summary")
async def stats_summary(user: User = Depends(get_current_user), store: Store = Depends(get_store)):
    with handle_failures("Failed to retrieve statistics. Please try again."):
        items = await history.all_for_user(store, user.id)
        return {"success": True, "data": {"stats": history.stats_summary(items), "generatedAt": _now()}}


@router.get("/stats/usage")
async def stats_usage(
    period: Literal["7days", "30days", "90days"] = "30days",
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    with handle_failures("Failed to retrieve usage statistics. Please try again."):
        items = await history.all_for_user(store, user.id)
        return {
            "success": True,
            "data": {"usageStats": history.usage_stats(items, period), "period": period, "generatedAt": _now()},
        }


@router.post("/bulk-delete")
async def bulk_delete(body: BulkIdsIn, user: User = Depends(get_current_user), store: Store = Depends(get_store)):
    """Delete up to 50 owned items; ids the caller does not own are skipped."""
    with handle_failures("Failed to delete content items. Please try again."):
        deleted = await history.bulk_delete(store, user.id, body.contentIds)
        return {
            "success": True,
            "message": f"{len(deleted)} items deleted successfully",
            "data": {"deletedCount": len(deleted), "deletedIds": deleted, "deletedAt": _now()},
        }


@router.post("/bulk-favorite")
async def bulk_favorite(body: BulkFavoriteIn, user: User = Depends(get_current_user), store: Store = Depends(get_store)):
    with handle_failures("Failed to update favorite status. Please try again."):
        updated = await history.bulk_favorite(store, user.id, body.contentIds, body.favorite)
        verb = "added to" if body.favorite else "removed from"
        return {
            "success": True,
            "message": f"{updated} items {verb} favorites",
            "data": {"updatedCount": updated, "favorite": body.favorite, "updatedAt": _now()},
        }


@router.get("/search/advanced")
async def search_advanced(
    query: Optional[str] = None,
    type: Optional[ContentType] = None,
    tags: Optional[str] = None,
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    is_favorite: Optional[bool] = Query(None, alias="isFavorite"),
    is_public: Optional[bool] = Query(None, alias="isPublic"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """
    Filter the caller's content by text, type, tags, creation date and flags.

    `tags` is comma separated; any shared tag matches. Dates are ISO 8601.

    Raises:
        HTTPException (400): A date is not ISO 8601
    """
    limit = min(limit, history.MAX_PAGE_SIZE)
    tag_list = [t.strip() for t in tags.split(",") if t.strip()] if tags else []
    filters = {
        "query": query,
        "type": type,
        "tags": tag_list,
        "dateFrom": date_from,
        "dateTo": date_to,
        "isFavorite": is_favorite,
        "isPublic": is_public,
        "page": page,
        "limit": limit,
    }
    with handle_failures("Failed to search content. Please try again."):
        items = await history.all_for_user(store, user.id)
        try:
            matches = history.search_items(items, query, type, tag_list, date_from, date_to, is_favorite, is_public)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid date filter. Use ISO 8601 dates.")
        offset = (page - 1) * limit
        return {
            "success": True,
            "data": {
                "results": [c.to_public() for c in matches[offset:offset + limit]],
                "pagination": history.pagination(len(matches), page, limit),
                "searchQuery": query,
                "filters": filters,
                "totalResults": len(matches),
            },
        }


@router.get("/export/data")
async def export_data(
    format: Literal["json", "csv"] = "json",
    type: Optional[ContentType] = None,
    include_metadata: bool = Query(True, alias="includeMetadata"),
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    with handle_failures("Failed to export content. Please try again."):
        items = await history.all_for_user(store, user.id, type)
        exported = history.export_items(items, format, include_metadata)
        return {
            "success": True,
            "message": "Content exported successfully",
            "data": {"exportData": exported, "format": format, "exportedAt": _now(), "totalItems": len(exported)},
        }


@router.get("/recommendations")
async def recommendations(user: User = Depends(get_current_user), store: Store = Depends(get_store)):
    with handle_failures("Failed to retrieve recommendations. Please try again."):
        total = await store.content.count_for_user(user.id)
        return {
            "success": True,
            "data": {"recommendations": history.recommendations(total), "totalContent": total, "generatedAt": _now()},
        }


@router.delete("/maintenance/expired")
async def purge_expired(admin: User = Depends(require_admin), store: Store = Depends(get_store)):
    """Admin only: delete expired content and sessions now instead of waiting for the next startup."""
    with handle_failures("Failed to remove expired content. Please try again."):
        removed = await sweep_expired(store)
        return {
            "success": True,
            "message": "Expired content removed",
            "data": {"deletedContent": removed["content"], "deletedSessions": removed["sessions"], "sweptAt": _now()},
        }


@router.get("/{content_id}")
async def get_content(content_id: str, user: User = Depends(get_current_user), store: Store = Depends(get_store)):
    """
    One saved item; counts a view and refreshes lastAccessed.

    Raises:
        HTTPException (404): Missing, or private and owned by someone else
    """
    with handle_failures("Failed to retrieve content. Please try again."):
        item = await history.open_content(store, content_id, user.id)
        if item is None:
            raise HTTPException(status_code=404, detail="Content not found")
        return {"success": True, "data": {"content": item.to_public(), "lastAccessed": _now()}}


@router.put("/{content_id}")
async def update(
    content_id: str,
    body: ContentUpdateIn,
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    with handle_failures("Failed to update content. Please try again."):
        item = await history.update_content(store, content_id, user.id, body.changes())
        if item is None:
            raise HTTPException(status_code=404, detail=NOT_FOUND_OR_DENIED)
        return {
            "success": True,
            "message": "Content updated successfully",
            "data": {"content": item.to_public(), "updatedAt": _now()},
        }


@router.delete("/{content_id}")
async def delete(content_id: str, user: User = Depends(get_current_user), store: Store = Depends(get_store)):
    with handle_failures("Failed to delete content. Please try again."):
        if not await history.delete_content(store, content_id, user.id):
            raise HTTPException(status_code=404, detail=NOT_FOUND_OR_DENIED)
        return {
            "success": True,
            "message": "Content deleted successfully",
            "data": {"deletedId": content_id, "deletedAt": _now()},
        }


@router.post("/{content_id}/favorite")
async def favorite(content_id: str, user: User = Depends(get_current_user), store: Store = Depends(get_store)):
    with handle_failures("Failed to update favorite status. Please try again."):
        item = await history.toggle_favorite(store, content_id, user.id)
        if item is None:
            raise HTTPException(status_code=404, detail=NOT_FOUND_OR_DENIED)
        verb = "added to" if item.is_favorite else "removed from"
        return {
            "success": True,
            "message": f"Content {verb} favorites",
            "data": {"content": item.to_public(), "favoritedAt": _now()},
        }


@router.post("/{content_id}/duplicate", status_code=status.HTTP_201_CREATED)
async def duplicate(
    content_id: str,
    body: DuplicateIn | None = None,
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """
    Copy an accessible item into the caller's history as a new private item.

    Returns:
        dict: originalId, duplicatedContent (version 1, parentContent set), duplicatedAt
    """
    body = body or DuplicateIn()
    with handle_failures("Failed to duplicate content. Please try again."):
        copy = await history.duplicate_content(store, content_id, user.id, body.title, body.modifications)
        if copy is None:
            raise HTTPException(status_code=404, detail=NOT_FOUND_OR_DENIED)
        return {
            "success": True,
            "message": "Content duplicated successfully",
            "data": {"originalId": content_id, "duplicatedContent": copy.to_public(), "duplicatedAt": _now()},
        }
