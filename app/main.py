"""
FastAPI Application Entry Point

Delights by Jummy - restaurant ordering website backend.
Serves the static storefront and admin panel plus the JSON API in
app.routes. The same application runs as a long-running server
(development, JSON files) and behind a serverless function prefix
(hosted, database).

Run:
    uvicorn app.main:app --port 3000
    python -m app.main
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import Match
from starlette.types import ASGIApp, Receive, Scope, Send

from app.core.config import Settings, get_settings, setup_logging
from app.core.errors import AppError, BackendUnavailable, NotFoundError
from app.routes import router
from app.services.auth import AdminAuthority, get_session_store
from app.services.storage import get_record_store

logger = logging.getLogger(__name__)

ADMIN_ALIASES = ("/admin", "/isadmin", "/isadmin.html")
NO_STORE_FILES = {"admin.html", "admin.js"}


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    settings: Settings = app.state.settings
    store = app.state.store
    authority: AdminAuthority = app.state.authority

    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Storage: {store.backend_name}")
    logger.info(f"   Sessions: {authority.sessions.backend_name}")
    logger.info("=" * 60)

    try:
        await store.init()
        logger.info("✅ Record store ready")
    except BackendUnavailable as e:
        logger.error(f"❌ Record store unavailable: {e.message}")

    if authority.bypass:
        logger.warning("⚠️ ADMIN BYPASS ACTIVE: every admin request is authorized")

    if settings.use_real_services:
        missing = settings.validate_production_config()
        if missing:
            logger.warning(f"⚠️ Missing production config: {missing}")

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    await store.close()
    logger.info("✅ Cleanup complete")


# =============================================================================
# MIDDLEWARE
# =============================================================================

class FunctionPrefixMiddleware:
    """
    Map serverless function paths onto the API.

    ``/.netlify/functions/api/menu`` and ``/.netlify/functions/api/api/menu``
    both become ``/api/menu``.
    """

    def __init__(self, app: ASGIApp, prefix: str):
        self.app = app
        self.prefix = prefix.rstrip("/")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and self.prefix:
            path = scope["path"]
            if path == self.prefix or path.startswith(self.prefix + "/"):
                route = path[len(self.prefix):] or "/"
                if route != "/api" and not route.startswith("/api/"):
                    route = "/api" + route
                scope = dict(scope, path=route, raw_path=route.encode("utf-8"))
        await self.app(scope, receive, send)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return error_response(exc.status_code, exc.message)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report the first invalid field as a 400."""
    errors = exc.errors()
    if not errors:
        return error_response(400, "Invalid request")
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if first.get("type") == "missing":
        message = f"Missing field: {field}"
    elif first.get("type") == "json_invalid":
        message = "Malformed JSON body"
    else:
        message = f"Invalid field '{field}': {first.get('msg')}"
    return error_response(400, message)


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    message = "Not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message},
        headers=getattr(exc, "headers", None),
    )


def make_unhandled_error_handler(debug: bool):
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all exception handler."""
        logger.exception(f"Unhandled exception: {exc}")
        return error_response(500, str(exc) if debug else "Server error")

    return unhandled_error_handler


# =============================================================================
# STATIC SITE
# =============================================================================

def register_site_routes(app: FastAPI, static_directory: str) -> None:
    """Admin shortcuts, OPTIONS fallback, unknown API paths and SPA fallback."""
    static_root = Path(static_directory).resolve()

    async def admin_redirect() -> RedirectResponse:
        return RedirectResponse("/admin.html", status_code=302)

    for alias in ADMIN_ALIASES:
        app.add_api_route(alias, admin_redirect, methods=["GET"], include_in_schema=False)

    @app.options("/{full_path:path}", include_in_schema=False)
    async def preflight(full_path: str) -> dict:
        return {"ok": True}

    @app.api_route(
        "/api/{full_path:path}",
        methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        include_in_schema=False,
    )
    async def unknown_api_route(request: Request, full_path: str):
        # Known path, wrong method
        allowed = set()
        for route in router.routes:
            match, _ = route.matches(request.scope)
            if match is Match.PARTIAL:
                allowed.update(route.methods or ())
        if allowed:
            raise StarletteHTTPException(
                status_code=405, headers={"Allow": ", ".join(sorted(allowed))}
            )
        raise NotFoundError()

    @app.get("/{full_path:path}", include_in_schema=False)
    async def site(full_path: str) -> FileResponse:
        if full_path:
            candidate = (static_root / full_path).resolve()
            if candidate.is_file() and static_root in candidate.parents:
                headers = {"Cache-Control": "no-store"} if candidate.name in NO_STORE_FILES else None
                return FileResponse(candidate, headers=headers)

        index = static_root / "index.html"
        if not index.is_file():
            raise NotFoundError()
        return FileResponse(index)


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    The record store and admin authority are created once here and
    shared by every request through app.state.
    """
    settings = settings or get_settings()
    setup_logging(settings=settings)

    app = FastAPI(
        title=settings.app_name,
        description="Restaurant menu, checkout and admin API.",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url=None,
    )

    app.state.settings = settings
    app.state.store = get_record_store(settings)
    app.state.authority = AdminAuthority(settings, get_session_store(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Admin-Token"],
    )
    app.add_middleware(FunctionPrefixMiddleware, prefix=settings.function_path_prefix)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, make_unhandled_error_handler(settings.debug))

    app.include_router(router)
    register_site_routes(app, settings.static_directory)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    config = get_settings()
    uvicorn.run(app, host=config.api_host, port=config.api_port)
