# vgen/storage/factory.py
"""
Storage backend factory.

Resolves the Store once during application startup, based on STORAGE_BACKEND:
  - memory:   in-process MemoryStore
  - supabase: SupabaseStore, startup fails if the probe fails
  - auto:     SupabaseStore when configured and reachable, MemoryStore otherwise
"""
import logging

import httpx

from vgen.config import Settings
from vgen.storage.base import Store
from vgen.storage.memory import MemoryStore
from vgen.storage.supabase import SupabaseRest, SupabaseStore

logger = logging.getLogger("uvicorn.error")

BACKENDS = ("auto", "supabase", "memory")


def build_supabase_store(settings: Settings, client: httpx.AsyncClient | None = None) -> SupabaseStore:
    rest = SupabaseRest(
        settings.supabase_url,
        settings.supabase_key,
        timeout=settings.supabase_timeout_seconds,
        client=client,
    )
    return SupabaseStore(rest)


async def init_store(settings: Settings, client: httpx.AsyncClient | None = None) -> Store:
    """
    Pick and probe the storage backend.

    Args:
        settings: Application settings
        client: Optional httpx client for the Supabase backend (tests)

    Returns:
        Store: The backend every request will use

    Raises:
        RuntimeError: Unknown backend name, or STORAGE_BACKEND=supabase and
            the database cannot be reached
    """
    backend = settings.storage_backend
    if backend not in BACKENDS:
        raise RuntimeError(f"Unknown STORAGE_BACKEND {backend!r}; expected one of {', '.join(BACKENDS)}")

    if backend == "memory":
        logger.info("[storage] Using in-memory store (STORAGE_BACKEND=memory)")
        return MemoryStore()

    if backend == "auto" and not settings.supabase_configured:
        logger.warning("[storage] Supabase not configured -> using in-memory store")
        return MemoryStore()

    store = build_supabase_store(settings, client)
    if await store.ping():
        logger.info("[storage] Connected to Supabase at %s", settings.supabase_url)
        return store

    await store.close()
    if backend == "supabase":
        raise RuntimeError(f"Supabase at {settings.supabase_url} is not reachable")
    logger.warning("[storage] Supabase probe failed -> falling back to in-memory store")
    return MemoryStore()
