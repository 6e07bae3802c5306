"""
GymCMS Backend — FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers and routers; the
       lifespan opens the Database handle, initializes the schema and
       closes the handle on shutdown.
Who:   uvicorn (gymcms.main:app) and the test suite (create_app(database=...)).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware: RateLimit → RequestID → Logging → CORS │
    │                                                     │
    │  Routers:  auth  pages  blog  trainers  classes     │
    │            membership  testimonials  gallery        │
    │            media  contact  settings  health         │
    │                                                     │
    │  Exception handlers:                                │
    │    GymCMSError → its status_code                    │
    │    RequestValidationError → 400                     │
    │    anything else → 500                              │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config check → Database.open() → SchemaManager
    Shutdown: Database.close() (only for a handle the app opened itself)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from gymcms import __version__
from gymcms.config import settings
from gymcms.database import Database
from gymcms.exceptions import GymCMSError, RateLimitExceededError, error_payload
from gymcms.middleware.logging import RequestLoggingMiddleware
from gymcms.middleware.rate_limit import RateLimitMiddleware
from gymcms.middleware.request_id import RequestIDMiddleware, request_id_var
from gymcms.routes import (
    auth,
    blog,
    contact,
    gallery,
    health,
    media,
    membership,
    pages,
    settings as settings_routes,
    testimonials,
    trainers,
)
from gymcms.services.schema_manager import SchemaManager
from gymcms.services.storage_service import StorageService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """Configure the root logger once, at startup, before anything else logs."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries that log every operation
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("GymCMS Backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Insecure defaults are reported, not fatal: local setups rely on them
        logger.error("Configuration error: %s", str(e))

    db: Database = app.state.db
    owns_database = not db.is_open
    await db.open()
    if settings.auto_create_schema:
        await SchemaManager(db).initialize()

    logger.info("Storage directory: %s", app.state.storage.storage_root)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("GymCMS Backend shutting down...")
    if owns_database:
        await db.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to `{"error", "code", "request_id"}` bodies.

    Handler hierarchy:
        GymCMSError             → exc.status_code (400/401/403/404/429/500/504)
        RequestValidationError  → 400 (malformed JSON or wrong field types)
        Exception (fallback)    → 500

    Server-side failures log their context; the client only gets the message.
    """

    @app.exception_handler(GymCMSError)
    async def handle_app_error(request: Request, exc: GymCMSError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)

        headers = {}
        if isinstance(exc, RateLimitExceededError):
            headers["Retry-After"] = str(exc.retry_after)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_payload(exc, rid),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        logger.warning("[%s] Request validation failed: %s %s", rid, location, message)
        return JSONResponse(
            status_code=400,
            content={
                "error": f"{location}: {message}" if location else message,
                "code": "validation_error",
                "details": {"field": location} if location else None,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "An unexpected error occurred",
                "code": "server_error",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    database: Optional[Database] = None,
    storage: Optional[StorageService] = None,
) -> FastAPI:
    """
    Assemble the application.

    Args:
        database: An existing store handle (tests pass an opened in-memory
                  one). By default a handle for settings.database_url is
                  created and opened by the lifespan.
        storage:  Upload storage; defaults to settings.storage_root.
    """
    app = FastAPI(
        title="GymCMS API",
        description="Content management backend for the PowerHouse Gym website.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.db = database or Database()
    app.state.storage = storage or StorageService()

    # ── Register Middleware ───────────────────────────────────────────────
    # Executed in reverse order of addition: RateLimit runs first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(pages.router)
    app.include_router(blog.router)
    app.include_router(trainers.trainers_router)
    app.include_router(trainers.classes_router)
    app.include_router(membership.router)
    app.include_router(testimonials.router)
    app.include_router(gallery.router)
    app.include_router(media.router)
    app.include_router(contact.router)
    app.include_router(settings_routes.router)
    app.include_router(health.router)

    return app


# uvicorn gymcms.main:app
app = create_app()
