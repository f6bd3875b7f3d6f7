# vgen/storage/__init__.py
"""
Persistence layer.

- base: UserStore / ContentStore / SessionStore interfaces bundled in Store
- supabase: hosted Postgres over the PostgREST API
- memory: in-process fallback
- factory: init_store(), run once at startup
"""
from .base import Store, UserStore, ContentStore, SessionStore
from .memory import MemoryStore
from .supabase import SupabaseStore
from .factory import init_store
