# vgen/api/deps.py
import logging
from contextlib import contextmanager

import jwt
from fastapi import Depends, Header, HTTPException, Request, status

from vgen.core.security import decode_access_token
from vgen.models import User
from vgen.services.ai_client import GeminiClient
from vgen.storage.base import Store

logger = logging.getLogger("uvicorn.error")

USAGE_LIMIT_MESSAGE = "Usage limit exceeded. Please upgrade your plan or try again next month."
RATE_LIMIT_MESSAGE = "Too many authentication attempts. Please try again later."
API_RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."


def get_store(request: Request) -> Store:
    """The storage backend resolved at startup (app.state.store)."""
    return request.app.state.store


def get_ai(request: Request) -> GeminiClient:
    """The completion client created with the app (app.state.ai)."""
    return request.app.state.ai


def token_from_request(request: Request, authorization: str | None) -> str | None:
    # 1) Prioritize Authorization: Bearer xxx
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
        if token:
            return token
    # 2) Secondly HttpOnly Cookie: accessToken
    return request.cookies.get("accessToken")


async def get_current_user(
    request: Request,
    authorization: str | None = Header(default=None),
    store: Store = Depends(get_store),
) -> User:
    """
    FastAPI dependency to get the current authenticated user.

    This dependency extracts and validates the JWT token from either:
    1. Authorization header (Bearer token) - preferred method
    2. HttpOnly cookie (accessToken) - fallback method

    Args:
        request: FastAPI Request object (for accessing cookies)
        authorization: Optional Authorization header value
        store: Storage backend

    Returns:
        User: The authenticated, active user

    Raises:
        HTTPException (401): No token, invalid or expired token, unknown
            user, or deactivated account

    Usage:
        @router.get("/protected")
        async def protected_route(user: User = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    token = token_from_request(request, authorization)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Access denied. No token provided.")

    try:
        payload = decode_access_token(token)
        user_id = payload.get("sub")
    except jwt.PyJWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token is not valid.")
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token is not valid.")

    user = await store.users.get_by_id(str(user_id))
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token is not valid. User not found.")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account has been deactivated.")
    return user


async def optional_user(
    request: Request,
    authorization: str | None = Header(default=None),
    store: Store = Depends(get_store),
) -> User | None:
    """Like get_current_user, but anonymous or invalid credentials give None."""
    try:
        return await get_current_user(request, authorization, store)
    except HTTPException:
        return None


def require_role(*roles: str):
    """
    Dependency factory: the current user must hold one of `roles`.

    Raises:
        HTTPException (403): Role not allowed
        HTTPException (401): Not authenticated (from get_current_user)
    """
    async def _check(current: User = Depends(get_current_user)) -> User:
        if current.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied. Insufficient permissions.")
        return current

    return _check


require_admin = require_role("admin")


def client_ip(request: Request) -> str:
    """
    Socket peer address. X-Forwarded-For is honoured only when the app is
    configured with TRUST_PROXY (clients can set the header freely).
    """
    if request.app.state.settings.trust_proxy:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _enforce(limiter, request: Request, message: str, scope: str) -> None:
    key = client_ip(request)
    if not limiter.hit(key):
        logger.warning("[%s] Rate limit exceeded for %s", scope, key)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=message,
            headers={"Retry-After": str(limiter.retry_after(key))},
        )


async def api_rate_limit(request: Request) -> None:
    """App-wide fixed-window limit per client IP (app.state.api_limiter)."""
    _enforce(request.app.state.api_limiter, request, API_RATE_LIMIT_MESSAGE, "api")


async def auth_rate_limit(request: Request) -> None:
    """Fixed-window limit on auth attempts per client IP (app.state.auth_limiter)."""
    _enforce(request.app.state.auth_limiter, request, RATE_LIMIT_MESSAGE, "auth")


async def check_usage_limit(
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> User:
    """
    Gate for quota-consuming generations.

    Starts a new monthly window when due (and persists it), then rejects
    the request once usageCount reaches monthlyLimit. Routes call
    record_usage() after a successful generation.
    """
    if user.refresh_usage_window():
        user = await store.users.save(user)
    if not user.can_make_request():
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={"error": USAGE_LIMIT_MESSAGE, "upgradeRequired": True},
        )
    return user


async def record_usage(store: Store, user: User) -> User:
    user.record_usage()
    return await store.users.save(user)


@contextmanager
def handle_failures(message: str):
    """
    Turn unexpected exceptions inside a route into a 500 with `message`.

    HTTPExceptions pass through untouched; everything else is logged with
    its traceback.
    """
    try:
        yield
    except HTTPException:
        raise
    except Exception:
        logger.exception("[api] %s", message)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)
