"""
Hospeda Backend — FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   `create_app()` registers middleware, exception handlers and routers;
       `lifespan` handles startup checks and engine disposal.
Who:   uvicorn (`uvicorn hospeda.main:app`) and the test suite.

Application Architecture:
    ┌────────────────────────────────────────────────────────────┐
    │                        FastAPI App                         │
    │                                                            │
    │  Middleware (outermost first):                             │
    │  CORS → Request ID → Logging → Rate Limit → Timeout → Actor │
    │                                                            │
    │  Routers (/api/v1):                                        │
    │  users · tags · destinations · accommodations · events     │
    │  posts · clients · subscriptions · invoices   + /health    │
    │                                                            │
    │  Exception Handlers:                                       │
    │  ServiceError → 400/401/403/404/500 by code                │
    │  RequestValidationError → 400 · HTTPException → its status │
    │  anything else → 500 INTERNAL_ERROR                        │
    └────────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → configuration check → database reachability (retried)
    Shutdown: dispose the engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from hospeda import __version__
from hospeda.config import settings
from hospeda.database import dispose_engine, wait_for_database
from hospeda.exceptions import ServiceError, ServiceErrorCode
from hospeda.middleware.actor import ActorMiddleware
from hospeda.middleware.logging import RequestLoggingMiddleware
from hospeda.middleware.rate_limit import RateLimitMiddleware
from hospeda.middleware.request_id import RequestIDMiddleware, request_id_var
from hospeda.middleware.timeout import TimeoutMiddleware
from hospeda.responses import error_response
from hospeda.routes import billing, catalog, health, tags, users
from hospeda.schemas.validation import describe_errors, join_violations

logger = logging.getLogger(__name__)

# Status codes a framework HTTPException may carry, mapped onto the service codes
_HTTP_STATUS_CODES = {
    400: ServiceErrorCode.VALIDATION_ERROR,
    401: ServiceErrorCode.UNAUTHORIZED,
    403: ServiceErrorCode.FORBIDDEN,
    404: ServiceErrorCode.NOT_FOUND,
    405: ServiceErrorCode.VALIDATION_ERROR,
    422: ServiceErrorCode.VALIDATION_ERROR,
}


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging once for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] hospeda.services.base: destination.create completed ...
    Third-party loggers that log every statement or connection are lowered
    to WARNING.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    for noisy in ("uvicorn.access", "sqlalchemy.engine", "httpcore", "httpx", "asyncio"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("Hospeda Backend %s starting (%s)", __version__, settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    # The server still starts so /health can report the outage
    try:
        await wait_for_database()
    except (SQLAlchemyError, OSError) as e:
        logger.error("Database unreachable after %d attempts: %s", settings.db_connect_retries, str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Hospeda Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the error envelope.

        ServiceError            → status from its code (400/401/403/404/500)
        RequestValidationError  → 400 VALIDATION_ERROR (malformed JSON, bad query types)
        StarletteHTTPException  → its status; code from _HTTP_STATUS_CODES
        Exception (fallback)    → 500 INTERNAL_ERROR, generic message

    Internal details (stack traces, SQL, context dicts) are logged, never
    returned.
    """

    @app.exception_handler(ServiceError)
    async def handle_service_error(request: Request, exc: ServiceError):
        rid = request_id_var.get("")
        level = logging.ERROR if exc.code == ServiceErrorCode.INTERNAL_ERROR else logging.INFO
        logger.log(level, "[%s] %s %s: %s", rid, request.url.path, exc.code.value, exc.message)
        return error_response(exc.code, exc.message, status_code=exc.code.http_status)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        message = join_violations(describe_errors(exc.errors()))
        logger.info("[%s] Request validation failed: %s", rid, message)
        return error_response(ServiceErrorCode.VALIDATION_ERROR, message, status_code=400)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        code = _HTTP_STATUS_CODES.get(exc.status_code, ServiceErrorCode.INTERNAL_ERROR)
        message = exc.detail if isinstance(exc.detail, str) else code.value
        return error_response(code, message, status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return error_response(
            ServiceErrorCode.INTERNAL_ERROR,
            "An unexpected error occurred. Please try again or contact support.",
            status_code=500,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Hospeda API",
        description=(
            "Permission-checked CRUD API for the Hospeda tourism platform: "
            "destinations, accommodations, events, posts, tags, users and billing."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Executed in reverse order of addition: the last one added is outermost.
    # CORS goes last so early 401/429/504 answers still carry its headers.
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(ActorMiddleware)
    app.add_middleware(TimeoutMiddleware)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(users.router)
    for router in tags.routers + catalog.routers + billing.routers:
        app.include_router(router)

    return app


app = create_app()
