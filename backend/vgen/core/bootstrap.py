# vgen/core/bootstrap.py
"""
Bootstrap module for application initialization.
Runs once per startup after the storage backend is resolved: removes expired
content and sessions, then creates the default admin user if needed.
"""
import os
import logging

from vgen.core.security import hash_password
from vgen.models import User, utcnow
from vgen.storage.base import Store

logger = logging.getLogger("uvicorn.error")


async def sweep_expired(store: Store) -> dict:
    """
    Delete content past its expiresAt and sessions past their expiry.

    Returns:
        dict: {"content": <deleted>, "sessions": <deleted>}
    """
    now = utcnow()
    content = await store.content.delete_expired(now)
    sessions = await store.sessions.purge_expired(now)
    if content or sessions:
        logger.info("[bootstrap] Expired cleanup -> content=%d sessions=%d", content, sessions)
    return {"content": content, "sessions": sessions}


async def ensure_default_admin(store: Store) -> User | None:
    """
    If no admin exists, create one from environment variables.
    Only takes effect under the following conditions:
      - Currently no user with role="admin"
      - And ADMIN_PASSWORD is set (to avoid using default weak password)
    Environment variables:
      ADMIN_EMAIL    (default: "admin@example.com")
      ADMIN_PASSWORD (required, otherwise won't create)
    """
    if await store.users.has_admin():
        return None

    admin_password = os.getenv("ADMIN_PASSWORD")
    if not admin_password:
        logger.warning("[bootstrap] No admin present, but ADMIN_PASSWORD not set -> skip creating default admin.")
        return None

    admin_email = os.getenv("ADMIN_EMAIL", "admin@example.com").lower()
    existing = await store.users.get_by_email(admin_email)
    if existing:
        # Promote the registered account instead of failing on the unique email
        existing.role = "admin"
        user = await store.users.save(existing)
    else:
        user = await store.users.create(User(
            email=admin_email,
            password_hash=hash_password(admin_password),
            first_name="Admin",
            last_name="User",
            role="admin",
        ))
    logger.warning("[bootstrap] Default admin ready -> email=%s id=%s", user.email, user.id)
    return user
