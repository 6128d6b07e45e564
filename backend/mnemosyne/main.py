"""
Mnemosyne Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (`uvicorn mnemosyne.main:app`) and the test suite, which
       builds a fresh app per test.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware: RateLimit → RequestID → AccessLog → GZip → CORS
    │                                                          │
    │  Routers (/api): auth · quotes · collections · follows   │
    │                  activity · categories · users           │
    │  Router:         /health                                 │
    │                                                          │
    │  Exception handlers → {success: false, error, details?}  │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → configuration check → optional table creation
    Shutdown: dispose the database engine
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
from starlette.exceptions import HTTPException as StarletteHTTPException

from mnemosyne import __version__
from mnemosyne.config import settings
from mnemosyne.database import create_tables, dispose_engine
from mnemosyne.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DatabaseError,
    MnemosyneError,
    NotFoundError,
    RateLimitExceededError,
    ValidationError,
)
from mnemosyne.middleware.logging import RequestLoggingMiddleware
from mnemosyne.middleware.rate_limit import RateLimitMiddleware
from mnemosyne.middleware.request_id import RequestIDMiddleware, request_id_var
from mnemosyne.routes import (
    activity,
    auth,
    categories,
    collections,
    follows,
    health,
    quotes,
    users,
)

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] mnemosyne.services.like_service: Quote ... liked by ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Libraries that log every operation at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    if settings.log_level != "DEBUG":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Mnemosyne Backend %s starting up (%s)...", __version__, settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: health checks and the error log surface the problem
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    if settings.auto_create_tables:
        await create_tables()
        logger.info("Database tables ensured from ORM metadata")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Mnemosyne Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_body(error: str, details: Optional[List[Dict[str, str]]] = None) -> Dict[str, Any]:
    """The failure envelope shared by every handler."""
    body: Dict[str, Any] = {"success": False, "error": error}
    if details:
        body["details"] = details
    rid = request_id_var.get("")
    if rid:
        body["requestId"] = rid
    return body


def validation_details(exc: RequestValidationError) -> List[Dict[str, str]]:
    """
    Flatten pydantic errors into `{field, message}` pairs.

    The location prefix (body/query/path) is dropped, so a bad quote text is
    reported as field "text" rather than "body.text".
    """
    details = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in {"body", "query", "path", "header", "cookie"}:
            loc = loc[1:]
        message = err.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        details.append({"field": ".".join(loc) or "body", "message": message})
    return details


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the failure envelope.

        ValidationError / RequestValidationError → 400
        ConflictError                            → 400
        AuthenticationError                      → 401
        AuthorizationError / NotFoundError       → 404
        RateLimitExceededError                   → 429
        DatabaseError / MnemosyneError / other   → 500

    Internal details (SQL, stack traces, context) are logged, never returned.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        details = validation_details(exc)
        logger.warning("[%s] Validation failed: %s", request_id_var.get(""), details)
        return JSONResponse(status_code=400, content=error_body("Validation failed", details))

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(status_code=400, content=error_body(exc.message, exc.details))

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return JSONResponse(status_code=400, content=error_body(exc.message))

    @app.exception_handler(AuthenticationError)
    async def handle_authentication(request: Request, exc: AuthenticationError):
        return JSONResponse(status_code=401, content=error_body(exc.message))

    @app.exception_handler(AuthorizationError)
    async def handle_authorization(request: Request, exc: AuthorizationError):
        # Hidden resources look exactly like missing ones
        logger.info("[%s] Authorization denied: %s", request_id_var.get(""), exc.context)
        return JSONResponse(status_code=404, content=error_body(exc.message))

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=error_body(exc.message))

    @app.exception_handler(RateLimitExceededError)
    async def handle_rate_limit(request: Request, exc: RateLimitExceededError):
        return JSONResponse(
            status_code=429,
            content=error_body(exc.message),
            headers={"Retry-After": str(exc.retry_after)},
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return JSONResponse(status_code=500, content=error_body(exc.message))

    @app.exception_handler(MnemosyneError)
    async def handle_app_error(request: Request, exc: MnemosyneError):
        logger.error("[%s] Unhandled application error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(status_code=500, content=error_body(exc.message))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            message = f"Route {request.url.path} not found"
        else:
            message = str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        message = str(exc) if settings.environment == "development" else "Internal server error"
        return JSONResponse(status_code=500, content=error_body(message))


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Assemble middleware, exception handlers and routers.

    A fresh instance per call keeps tests isolated (own rate limiter state,
    own dependency overrides).
    """
    app = FastAPI(
        title="Mnemosyne API",
        description=(
            "Quote-sharing service: browse and search quotes, like them, organise "
            "them into collections, follow other readers and follow their activity."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Middleware ────────────────────────────────────────────────────────
    # Last added runs first: RateLimit → RequestID → AccessLog → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,  # refresh token cookie
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    # ── Routes ────────────────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(quotes.router)
    app.include_router(collections.router)
    app.include_router(follows.router)
    app.include_router(activity.router)
    app.include_router(categories.router)
    app.include_router(users.router)
    app.include_router(health.router)

    return app


app = create_app()
