# vgen/main.py
import time
import logging
import datetime as dt
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from vgen.config import Settings, settings as default_settings
from vgen.core.bootstrap import ensure_default_admin, sweep_expired
from vgen.core.rate_limit import FixedWindowRateLimiter
from vgen.services.ai_client import GeminiClient
from vgen.storage import Store, init_store

from vgen.api.deps import api_rate_limit
from vgen.api.routers import analyzer, auth, bio, cover_letter, flashcard, history, interview, resume, service

logger = logging.getLogger("uvicorn.error")

API_PREFIX = "/api"


def error_response(status_code: int, detail, headers: dict | None = None) -> JSONResponse:
    """Failure envelope: a string detail becomes "error", a dict detail is merged in."""
    if isinstance(detail, dict):
        body = {"success": False, **detail}
    else:
        body = {"success": False, "error": str(detail)}
    return JSONResponse(status_code=status_code, content=body, headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail
    if exc.status_code == 404 and detail == "Not Found":
        detail = "Route not found"
    return error_response(exc.status_code, detail, getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        details.append({
            "type": err.get("type"),
            "msg": err.get("msg"),
            "path": ".".join(loc[1:]),
            "location": loc[0] if loc else None,
        })
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Validation failed", "details": details},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: check required settings, resolve the storage backend (awaited
    probe), sweep expired rows and bootstrap the admin. Shutdown: close the store.
    """
    cfg: Settings = app.state.settings
    missing = cfg.missing_required()
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")

    if getattr(app.state, "store", None) is None:
        app.state.store = await init_store(cfg)
    store: Store = app.state.store
    logger.info("[startup] Storage backend: %s", store.name)

    await sweep_expired(store)
    await ensure_default_admin(store)
    try:
        yield
    finally:
        await store.close()


def create_app(settings: Settings | None = None, store: Store | None = None, ai: GeminiClient | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration (module-level settings by default)
        store: Storage backend; resolved during startup when omitted
        ai: Completion client; a GeminiClient built from settings when omitted

    Returns:
        FastAPI: App with every router mounted under /api
    """
    cfg = settings or default_settings
    app = FastAPI(title=cfg.APP_NAME, lifespan=lifespan, dependencies=[Depends(api_rate_limit)])

    app.state.settings = cfg
    app.state.started_at = time.monotonic()
    app.state.store = store
    app.state.ai = ai or GeminiClient(cfg)
    app.state.api_limiter = FixedWindowRateLimiter(cfg.api_rate_limit_max, cfg.api_rate_limit_window_seconds, namespace="api")
    app.state.auth_limiter = FixedWindowRateLimiter(cfg.auth_rate_limit_max, cfg.auth_rate_limit_window_seconds)

    # CORS (with Cookie)
    origins = list(dict.fromkeys([*cfg.CORS_ORIGINS, cfg.frontend_url]))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # REST
    for module in (auth, resume, cover_letter, bio, flashcard, analyzer, interview, service, history):
        app.include_router(module.router, prefix=API_PREFIX)

    @app.get("/health")
    async def health(request: Request):
        current = request.app.state.store
        return {
            "status": "OK",
            "timestamp": dt.datetime.now(dt.timezone.utc).isoformat(),
            "uptime": time.monotonic() - request.app.state.started_at,
            "storage": current.name if current is not None else None,
        }

    return app


app = create_app()
