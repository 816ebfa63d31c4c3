"""
ChoreoNotes Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   `create_app()` wires middleware, exception handlers, routers and the
       `Database` handle; `lifespan` handles startup checks and shutdown.
Who:   uvicorn (`uvicorn choreonotes.main:app`) and the test suite, which
       passes its own SQLite-backed `Database`.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                       FastAPI App                        │
    │                                                          │
    │  Middleware:  Rate Limit → Request ID → Logging → GZip   │
    │               → CORS                                     │
    │                                                          │
    │  Routes:      /api/auth   /api/moves   /api/routines     │
    │               /health                                    │
    │                                                          │
    │  Exception handlers:                                     │
    │    Validation→400  Unauthorized→401  Forbidden→403       │
    │    NotFound→404    Conflict→409      Database→500        │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure logging
    2. Validate configuration (logged, non-fatal)
    3. Create the Database handle unless one was injected
    4. Probe connectivity with retries (logged, non-fatal)

    Shutdown:
    1. Dispose the engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    stop_after_attempt,
    wait_exponential_jitter,
)

from choreonotes import __version__
from choreonotes.config import settings
from choreonotes.database import Database
from choreonotes.exceptions import (
    ChoreoNotesError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from choreonotes.middleware.logging import RequestLoggingMiddleware
from choreonotes.middleware.rate_limit import RateLimitMiddleware
from choreonotes.middleware.request_id import RequestIDMiddleware, request_id_var
from choreonotes.routes import auth, health, moves, routines

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging once for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] choreonotes.services.moves: Move 3 created ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Chatty at INFO for every statement / connection
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Startup Probe
# ══════════════════════════════════════════════════════════════════════════

async def wait_for_database(database: Database) -> bool:
    """
    Ping the database with exponential backoff.

    Returns True once a `SELECT 1` succeeds, False after
    `settings.db_connect_attempts` failures. The server starts either way;
    /health keeps reporting the database state.
    """
    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(settings.db_connect_attempts),
            wait=wait_exponential_jitter(initial=0.5, max=settings.db_connect_max_wait),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                await database.ping()
    except Exception as e:
        logger.error("Database connection failed: %s", str(e))
        logger.error(
            "Check that PostgreSQL is running, DATABASE_URL is correct "
            "and migrations are applied (alembic upgrade head)."
        )
        return False

    logger.info("Database connected (%s)", database.url.render_as_string(hide_password=True))
    return True


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("ChoreoNotes Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    if app.state.database is None:
        app.state.database = Database.from_settings()
    await wait_for_database(app.state.database)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("ChoreoNotes Backend shutting down...")
    await app.state.database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_body(error: str, message: str, details: Any = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": error, "message": message}
    if details:
        body["details"] = details
    body["request_id"] = request_id_var.get("")
    return body


def field_errors(exc: RequestValidationError) -> List[Dict[str, str]]:
    """
    Flatten pydantic errors into [{"field": "video_url", "message": "..."}].

    The location prefix (body / query / path) is dropped; nested locations are
    joined with dots.
    """
    items = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in {"body", "query", "path", "header"}:
            loc = loc[1:]
        message = err.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        items.append({"field": ".".join(loc) or "body", "message": message})
    return items


def is_unique_violation(exc: IntegrityError) -> bool:
    # asyncpg exposes SQLSTATE 23505; SQLite only says so in the message
    if getattr(exc.orig, "sqlstate", None) == "23505":
        return True
    return "UNIQUE" in str(exc.orig).upper()


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to HTTP responses with one body shape:
    {"error", "message", "details"?, "request_id"}.

        RequestValidationError                   → 400
        UnauthorizedError                        → 401 (+ WWW-Authenticate)
        ForbiddenError                           → 403
        NotFoundError / unknown route            → 404
        ConflictError                            → 409
        IntegrityError                           → 409 unique, 400 otherwise
        anything else                            → 500 (details logged only)
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        details = field_errors(exc)
        logger.info("Request validation failed on %s: %s", request.url.path, details)
        return JSONResponse(
            status_code=400,
            content=error_body("validation_error", "Validation failed", details),
        )

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        return JSONResponse(
            status_code=401,
            content=error_body("unauthorized", exc.message),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError):
        return JSONResponse(status_code=403, content=error_body("forbidden", exc.message))

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=error_body("not_found", exc.message))

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return JSONResponse(status_code=409, content=error_body("conflict", exc.message))

    @app.exception_handler(IntegrityError)
    async def handle_integrity_error(request: Request, exc: IntegrityError):
        logger.warning("Integrity error on %s: %s", request.url.path, exc.orig)
        if is_unique_violation(exc):
            return JSONResponse(
                status_code=409,
                content=error_body("conflict", "Resource already exists"),
            )
        return JSONResponse(
            status_code=400,
            content=error_body("validation_error", "Invalid reference or constraint violation"),
        )

    @app.exception_handler(ChoreoNotesError)
    async def handle_app_error(request: Request, exc: ChoreoNotesError):
        logger.error("Unhandled application error: %s | Context: %s", exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=error_body("server_error", "An internal error occurred. Please try again later."),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(status_code=404, content=error_body("not_found", "Route not found"))
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body("http_error", str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("Unexpected error: %s", str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Build the application.

    Args:
        database: storage handle to serve requests with. When omitted, the
            lifespan builds one from settings at startup, so importing this
            module never creates an engine.
    """
    app = FastAPI(
        title="ChoreoNotes API",
        description=(
            "Personal library of dance moves and ordered routines. "
            "Every user sees and edits only their own data."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.database = database

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

    app.include_router(auth.router)
    app.include_router(moves.router)
    app.include_router(routines.router)
    app.include_router(health.router)

    return app


app = create_app()
