# vgen/storage/memory.py
"""
In-memory storage backend.

Rows live in dicts owned by the MemoryStore instance, so each application
(and each test) gets an isolated data set. Records are stored as rows and
rebuilt on read, which keeps unsaved mutations out of the store just like a
real database would.
"""
import datetime as dt
from typing import Optional

from vgen.core.errors import StorageError
from vgen.models import Content, User, UserSession, utcnow
from vgen.storage.base import ContentStore, SessionStore, Store, UserStore


def _aware(value: dt.datetime) -> dt.datetime:
    return value if value.tzinfo else value.replace(tzinfo=dt.timezone.utc)


class MemoryUserStore(UserStore):
    def __init__(self):
        self._rows: dict[str, dict] = {}

    async def get_by_id(self, user_id: str) -> Optional[User]:
        row = self._rows.get(str(user_id))
        return User.model_validate(row) if row else None

    async def get_by_email(self, email: str) -> Optional[User]:
        email = email.lower()
        for row in self._rows.values():
            if row["email"] == email:
                return User.model_validate(row)
        return None

    async def find_by_reset_token(self, token_hash: str) -> list[User]:
        return [
            User.model_validate(row)
            for row in self._rows.values()
            if row.get("password_reset_token") == token_hash
        ]

    async def create(self, user: User) -> User:
        user.email = user.email.lower()
        if await self.get_by_email(user.email):
            raise StorageError("duplicate key value violates unique constraint \"users_email_key\"", 409)
        self._rows[user.id] = user.to_row()
        return User.model_validate(self._rows[user.id])

    async def save(self, user: User) -> User:
        if user.id not in self._rows:
            raise StorageError(f"User {user.id} does not exist", 404)
        user.updated_at = utcnow()
        self._rows[user.id] = user.to_row()
        return User.model_validate(self._rows[user.id])

    async def has_admin(self) -> bool:
        return any(row.get("role") == "admin" for row in self._rows.values())


class MemoryContentStore(ContentStore):
    def __init__(self):
        self._rows: dict[str, dict] = {}

    async def get(self, content_id: str) -> Optional[Content]:
        row = self._rows.get(str(content_id))
        return Content.model_validate(row) if row else None

    async def create(self, content: Content) -> Content:
        self._rows[content.id] = content.to_row()
        return Content.model_validate(self._rows[content.id])

    async def save(self, content: Content) -> Content:
        if content.id not in self._rows:
            raise StorageError(f"Content {content.id} does not exist", 404)
        content.updated_at = utcnow()
        self._rows[content.id] = content.to_row()
        return Content.model_validate(self._rows[content.id])

    async def delete(self, content_id: str) -> bool:
        return self._rows.pop(str(content_id), None) is not None

    def _for_user(self, user_id: str, content_type: Optional[str]) -> list[Content]:
        items = [
            Content.model_validate(row)
            for row in self._rows.values()
            if str(row["user_id"]) == str(user_id) and (not content_type or row["type"] == content_type)
        ]
        items.sort(key=lambda c: _aware(c.created_at), reverse=True)
        return items

    async def list_for_user(self, user_id, content_type=None, limit=20, offset=0):
        return self._for_user(user_id, content_type)[offset:offset + limit]

    async def count_for_user(self, user_id, content_type=None):
        return len(self._for_user(user_id, content_type))

    async def find_expired(self, now):
        items = [Content.model_validate(row) for row in self._rows.values()]
        return [c for c in items if c.is_expired(now)]


class MemorySessionStore(SessionStore):
    def __init__(self):
        self._rows: dict[str, dict] = {}

    async def create(self, session: UserSession) -> UserSession:
        self._rows[session.id] = session.to_row()
        return session

    async def delete_by_token(self, token_hash: str) -> bool:
        ids = [k for k, row in self._rows.items() if row["session_token"] == token_hash]
        for k in ids:
            del self._rows[k]
        return bool(ids)

    async def purge_expired(self, now: dt.datetime) -> int:
        ids = [
            k for k, row in self._rows.items()
            if _aware(UserSession.model_validate(row).expires_at) < now
        ]
        for k in ids:
            del self._rows[k]
        return len(ids)

    def count(self) -> int:
        return len(self._rows)


class MemoryStore(Store):
    """Process-local fallback used when no hosted database is configured."""

    def __init__(self):
        self.users = MemoryUserStore()
        self.content = MemoryContentStore()
        self.sessions = MemorySessionStore()

    @property
    def name(self) -> str:
        return "memory"

    async def ping(self) -> bool:
        return True
