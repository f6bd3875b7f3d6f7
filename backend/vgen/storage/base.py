# vgen/storage/base.py
"""
Abstract storage interface.

Defines the contract both backends (Supabase REST and in-memory) implement,
so routes and services never know which one is active.
"""
import datetime as dt
from abc import ABC, abstractmethod
from typing import Optional

from vgen.models import Content, User, UserSession


class UserStore(ABC):
    """User account persistence."""

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Look up a user by email (case-insensitive)."""
        pass

    @abstractmethod
    async def find_by_reset_token(self, token_hash: str) -> list[User]:
        """All users whose stored password_reset_token equals `token_hash`."""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """
        Insert a new user.

        Raises:
            StorageError: If the email is already taken or the backend fails
        """
        pass

    @abstractmethod
    async def save(self, user: User) -> User:
        """Persist all mutable fields of an existing user and bump updated_at."""
        pass

    @abstractmethod
    async def has_admin(self) -> bool:
        pass


class ContentStore(ABC):
    """Saved content persistence."""

    @abstractmethod
    async def get(self, content_id: str) -> Optional[Content]:
        pass

    @abstractmethod
    async def create(self, content: Content) -> Content:
        pass

    @abstractmethod
    async def save(self, content: Content) -> Content:
        pass

    @abstractmethod
    async def delete(self, content_id: str) -> bool:
        """Delete by id. Returns False if nothing was deleted."""
        pass

    @abstractmethod
    async def list_for_user(
        self,
        user_id: str,
        content_type: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Content]:
        """A user's content, newest first."""
        pass

    @abstractmethod
    async def count_for_user(self, user_id: str, content_type: Optional[str] = None) -> int:
        pass

    @abstractmethod
    async def find_expired(self, now: dt.datetime) -> list[Content]:
        pass

    async def delete_expired(self, now: dt.datetime) -> int:
        """Delete every expired item. Returns the number deleted."""
        deleted = 0
        for item in await self.find_expired(now):
            if await self.delete(item.id):
                deleted += 1
        return deleted


class SessionStore(ABC):
    """Login sessions (hashed JWTs)."""

    @abstractmethod
    async def create(self, session: UserSession) -> UserSession:
        pass

    @abstractmethod
    async def delete_by_token(self, token_hash: str) -> bool:
        pass

    @abstractmethod
    async def purge_expired(self, now: dt.datetime) -> int:
        pass


class Store(ABC):
    """
    Bundle of the three stores plus lifecycle hooks.

    Exactly one Store is resolved at startup and kept on app.state.store.
    """

    users: UserStore
    content: ContentStore
    sessions: SessionStore

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name ("supabase" or "memory")."""
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Connectivity probe. True if the backend answered."""
        pass

    async def close(self) -> None:
        """Release backend resources."""
        return None
