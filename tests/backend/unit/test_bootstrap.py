"""
Unit tests for core.bootstrap module.
"""
import datetime as dt

import pytest

from vgen.core.bootstrap import ensure_default_admin, sweep_expired
from vgen.core.security import verify_password
from vgen.models import Content, User, UserSession, utcnow
from vgen.storage.memory import MemoryStore


pytestmark = pytest.mark.asyncio


async def test_sweep_expired():
    store = MemoryStore()
    past = utcnow() - dt.timedelta(hours=1)
    await store.content.create(Content(user_id="u", type="bio", title="old", expires_at=past))
    await store.content.create(Content(user_id="u", type="bio", title="fresh"))
    await store.sessions.create(UserSession(user_id="u", session_token="h", expires_at=past))

    assert await sweep_expired(store) == {"content": 1, "sessions": 1}
    assert await sweep_expired(store) == {"content": 0, "sessions": 0}


async def test_admin_skipped_without_password(monkeypatch):
    monkeypatch.delenv("ADMIN_PASSWORD", raising=False)
    store = MemoryStore()
    assert await ensure_default_admin(store) is None
    assert await store.users.has_admin() is False


async def test_admin_created(monkeypatch):
    monkeypatch.setenv("ADMIN_PASSWORD", "s3cret-admin")
    monkeypatch.setenv("ADMIN_EMAIL", "Root@Example.com")
    store = MemoryStore()

    admin = await ensure_default_admin(store)

    assert admin.email == "root@example.com"
    assert admin.role == "admin"
    assert verify_password("s3cret-admin", admin.password_hash)
    assert await ensure_default_admin(store) is None


async def test_existing_account_promoted(monkeypatch):
    monkeypatch.setenv("ADMIN_PASSWORD", "s3cret-admin")
    monkeypatch.setenv("ADMIN_EMAIL", "ada@example.com")
    store = MemoryStore()
    user = await store.users.create(User(email="ada@example.com", first_name="Ada"))

    admin = await ensure_default_admin(store)

    assert admin.id == user.id
    assert admin.first_name == "Ada"
    assert (await store.users.get_by_id(user.id)).role == "admin"
