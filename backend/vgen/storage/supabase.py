# vgen/storage/supabase.py
"""
Supabase storage backend.

Talks to the PostgREST API that Supabase exposes under /rest/v1 using httpx.
Tables and columns match supabase/schema.sql.
"""
import uuid
import logging
import datetime as dt
from typing import Any, Optional

import httpx

from vgen.core.errors import StorageError
from vgen.models import Content, User, UserSession, utcnow
from vgen.storage.base import ContentStore, SessionStore, Store, UserStore

logger = logging.getLogger("uvicorn.error")

TABLE_USERS = "users"
TABLE_CONTENT = "content"
TABLE_SESSIONS = "user_sessions"


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(str(value))
        return True
    except ValueError:
        return False


class SupabaseRest:
    """
    Minimal PostgREST client.

    Args:
        url: Project URL (https://<ref>.supabase.co)
        key: Service role key (preferred) or anon key
        client: Optional pre-built httpx.AsyncClient (tests pass a MockTransport)
    """

    def __init__(self, url: str, key: str, timeout: float = 10.0, client: httpx.AsyncClient | None = None):
        self.base_url = url.rstrip("/") + "/rest/v1"
        self.headers = {
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
        }
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def request(
        self,
        method: str,
        table: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> httpx.Response:
        headers = dict(self.headers)
        if prefer:
            headers["Prefer"] = prefer
        try:
            resp = await self._client.request(
                method, f"{self.base_url}/{table}", params=params, json=json, headers=headers
            )
        except httpx.HTTPError as e:
            raise StorageError(f"Supabase request failed: {e}") from e
        if resp.is_error:
            try:
                message = resp.json().get("message") or resp.text
            except ValueError:
                message = resp.text
            raise StorageError(f"Supabase {method} {table} failed: {message}", resp.status_code)
        return resp

    async def select(self, table: str, **params) -> list[dict]:
        params.setdefault("select", "*")
        resp = await self.request("GET", table, params=params)
        return resp.json()

    async def insert(self, table: str, row: dict) -> dict:
        resp = await self.request("POST", table, json=row, prefer="return=representation")
        return resp.json()[0]

    async def update(self, table: str, row: dict, **filters) -> list[dict]:
        resp = await self.request("PATCH", table, params=filters, json=row, prefer="return=representation")
        return resp.json()

    async def delete(self, table: str, **filters) -> list[dict]:
        resp = await self.request("DELETE", table, params=filters, prefer="return=representation")
        return resp.json()

    async def count(self, table: str, **filters) -> int:
        params = {"select": "id", "limit": 1, **filters}
        resp = await self.request("GET", table, params=params, prefer="count=exact")
        # Content-Range: "0-0/42" or "*/0"
        content_range = resp.headers.get("content-range", "")
        total = content_range.rsplit("/", 1)[-1]
        return int(total) if total.isdigit() else len(resp.json())

    async def aclose(self) -> None:
        await self._client.aclose()


class SupabaseUserStore(UserStore):
    def __init__(self, rest: SupabaseRest):
        self.rest = rest

    async def get_by_id(self, user_id: str) -> Optional[User]:
        if not _is_uuid(user_id):
            return None
        rows = await self.rest.select(TABLE_USERS, id=f"eq.{user_id}")
        return User.model_validate(rows[0]) if rows else None

    async def get_by_email(self, email: str) -> Optional[User]:
        rows = await self.rest.select(TABLE_USERS, email=f"eq.{email.lower()}")
        return User.model_validate(rows[0]) if rows else None

    async def find_by_reset_token(self, token_hash: str) -> list[User]:
        rows = await self.rest.select(TABLE_USERS, password_reset_token=f"eq.{token_hash}")
        return [User.model_validate(r) for r in rows]

    async def create(self, user: User) -> User:
        user.email = user.email.lower()
        return User.model_validate(await self.rest.insert(TABLE_USERS, user.to_row()))

    async def save(self, user: User) -> User:
        user.updated_at = utcnow()
        row = user.to_row()
        row.pop("id")
        row.pop("created_at")
        rows = await self.rest.update(TABLE_USERS, row, id=f"eq.{user.id}")
        if not rows:
            raise StorageError(f"User {user.id} does not exist", 404)
        return User.model_validate(rows[0])

    async def has_admin(self) -> bool:
        rows = await self.rest.select(TABLE_USERS, select="id", role="eq.admin", limit=1)
        return bool(rows)


class SupabaseContentStore(ContentStore):
    def __init__(self, rest: SupabaseRest):
        self.rest = rest

    async def get(self, content_id: str) -> Optional[Content]:
        if not _is_uuid(content_id):
            return None
        rows = await self.rest.select(TABLE_CONTENT, id=f"eq.{content_id}")
        return Content.model_validate(rows[0]) if rows else None

    async def create(self, content: Content) -> Content:
        return Content.model_validate(await self.rest.insert(TABLE_CONTENT, content.to_row()))

    async def save(self, content: Content) -> Content:
        content.updated_at = utcnow()
        row = content.to_row()
        row.pop("id")
        row.pop("created_at")
        rows = await self.rest.update(TABLE_CONTENT, row, id=f"eq.{content.id}")
        if not rows:
            raise StorageError(f"Content {content.id} does not exist", 404)
        return Content.model_validate(rows[0])

    async def delete(self, content_id: str) -> bool:
        if not _is_uuid(content_id):
            return False
        rows = await self.rest.delete(TABLE_CONTENT, id=f"eq.{content_id}")
        return bool(rows)

    @staticmethod
    def _filters(user_id: str, content_type: Optional[str]) -> dict:
        filters = {"user_id": f"eq.{user_id}"}
        if content_type:
            filters["type"] = f"eq.{content_type}"
        return filters

    async def list_for_user(self, user_id, content_type=None, limit=20, offset=0):
        rows = await self.rest.select(
            TABLE_CONTENT,
            order="created_at.desc",
            limit=limit,
            offset=offset,
            **self._filters(user_id, content_type),
        )
        return [Content.model_validate(r) for r in rows]

    async def count_for_user(self, user_id, content_type=None):
        return await self.rest.count(TABLE_CONTENT, **self._filters(user_id, content_type))

    async def find_expired(self, now: dt.datetime):
        rows = await self.rest.select(TABLE_CONTENT, expires_at=f"lt.{now.isoformat()}")
        return [Content.model_validate(r) for r in rows]

    async def delete_expired(self, now: dt.datetime) -> int:
        rows = await self.rest.delete(TABLE_CONTENT, expires_at=f"lt.{now.isoformat()}")
        return len(rows)


class SupabaseSessionStore(SessionStore):
    def __init__(self, rest: SupabaseRest):
        self.rest = rest

    async def create(self, session: UserSession) -> UserSession:
        return UserSession.model_validate(await self.rest.insert(TABLE_SESSIONS, session.to_row()))

    async def delete_by_token(self, token_hash: str) -> bool:
        rows = await self.rest.delete(TABLE_SESSIONS, session_token=f"eq.{token_hash}")
        return bool(rows)

    async def purge_expired(self, now: dt.datetime) -> int:
        rows = await self.rest.delete(TABLE_SESSIONS, expires_at=f"lt.{now.isoformat()}")
        return len(rows)


class SupabaseStore(Store):
    """Hosted Postgres (Supabase) backend."""

    def __init__(self, rest: SupabaseRest):
        self.rest = rest
        self.users = SupabaseUserStore(rest)
        self.content = SupabaseContentStore(rest)
        self.sessions = SupabaseSessionStore(rest)

    @property
    def name(self) -> str:
        return "supabase"

    async def ping(self) -> bool:
        try:
            await self.rest.select(TABLE_USERS, select="id", limit=1)
            return True
        except StorageError as e:
            logger.warning("[storage] Supabase probe failed: %s", e)
            return False

    async def close(self) -> None:
        await self.rest.aclose()
