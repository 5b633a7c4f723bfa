"""
Blog API - FastAPI Application Factory
========================================

What:  Creates and configures the FastAPI application instance.
How:   create_app(settings, repository=None, verifier=None) builds every
       collaborator explicitly (store → service → routers, verifier → gate)
       and returns a configured FastAPI app. Tests pass their own repository
       and verifier; production builds them from settings.
Who:   uvicorn imports `blog_api.main:app`.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌────────┐ ┌──────────┐ ┌─────────┐ ┌───────────┐  │
    │  │  CORS  │→│  Req ID  │→│ Logging │→│   Auth    │  │
    │  └────────┘ └──────────┘ └─────────┘ └───────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────────────────────┐ ┌─────────────────┐ │
    │  │ /blog/posts /post /edit    │ │ GET /health     │ │
    │  │ /delete                    │ │                 │ │
    │  └────────────────────────────┘ └─────────────────┘ │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Invalid ID→400 │ NotFound→404 │ Database→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config check → create `posts` table (SQL store only)
    Shutdown: close the JWKS HTTP client → dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from blog_api import __version__
from blog_api.config import Settings, settings as default_settings
from blog_api.database import build_session_factory, create_engine_from_settings, create_tables
from blog_api.exceptions import (
    AuthenticationError,
    BlogError,
    DatabaseError,
    InvalidIdentifierError,
    NotFoundError,
    ValidationError,
)
from blog_api.middleware.authentication import AuthenticationMiddleware
from blog_api.middleware.logging import RequestLoggingMiddleware
from blog_api.middleware.request_id import RequestIDMiddleware, request_id_var
from blog_api.repositories import MemoryPostRepository, PostRepository, SqlPostRepository
from blog_api.routes import health, posts
from blog_api.services.auth_service import TokenVerifier
from blog_api.services.post_service import PostService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure the root logger for the whole application.

    Format: 2024-01-15T12:00:00 [INFO] blog_api.services.post_service: Post created: ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-operation chatter from these libraries drowns out our own lines
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    repository: PostRepository = app.state.post_repository

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings)
    logger.info("Blog API %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Reads still work; the auth gate rejects every write until fixed
        logger.error("Configuration error: %s", str(e))

    if isinstance(repository, SqlPostRepository) and repository.engine is not None:
        await create_tables(repository.engine)
        logger.info("Post store: database (%s)", repository.engine.url.render_as_string(hide_password=True))
    else:
        logger.info("Post store: %s", type(repository).__name__)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Blog API shutting down...")
    for resource in reversed(app.state.owned_resources):
        await resource.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    """
    Request ID for error bodies.

    The catch-all handler runs in ServerErrorMiddleware, outside
    RequestIDMiddleware, so request.state is read before the ContextVar.
    """
    return getattr(request.state, "request_id", "") or request_id_var.get("")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to JSON error responses.

    Handler hierarchy (most specific class wins):
        InvalidIdentifierError → 400 bad_request
        ValidationError        → 400 validation_error
        NotFoundError          → 404 not_found
        AuthenticationError    → 401 unauthorized
        DatabaseError          → 500 server_error (generic message)
        BlogError (base)       → 500 internal_server_error
        Exception (fallback)   → 500 internal_server_error

    Context dicts and stack traces are logged, never returned.
    """

    @app.exception_handler(InvalidIdentifierError)
    async def handle_invalid_identifier(request: Request, exc: InvalidIdentifierError):
        rid = _request_id(request)
        logger.info("[%s] Invalid identifier for %s: %s", rid, exc.field, exc.context.get("value"))
        return JSONResponse(
            status_code=400,
            content={
                "error": "bad_request",
                "message": exc.message,
                "details": {"field": exc.field},
                "request_id": rid,
            },
        )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = _request_id(request)
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": _request_id(request),
            },
        )

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        rid = _request_id(request)
        logger.warning("[%s] Authentication error: %s", rid, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": "unauthorized",
                "message": exc.message,
                "request_id": rid,
            },
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = _request_id(request)
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(BlogError)
    async def handle_blog_error(request: Request, exc: BlogError):
        rid = _request_id(request)
        logger.error("[%s] Unhandled application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = _request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def build_repository(settings: Settings) -> PostRepository:
    """Construct the post store selected by settings.post_store."""
    if settings.post_store == "memory":
        return MemoryPostRepository()

    engine = create_engine_from_settings(settings)
    return SqlPostRepository(build_session_factory(engine), engine=engine)


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[PostRepository] = None,
    verifier: Optional[TokenVerifier] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration; the module-level settings object when omitted
        repository: Post store; built from settings when omitted
        verifier: Bearer token verifier; built from settings when omitted

    Collaborators built here are closed on shutdown; injected ones are left
    to the caller.
    """
    settings = settings or default_settings
    owned_resources = []

    if repository is None:
        repository = build_repository(settings)
        owned_resources.append(repository)
    if verifier is None:
        verifier = TokenVerifier.from_settings(settings)
        owned_resources.append(verifier)

    post_service = PostService(repository)

    app = FastAPI(
        title="Blog API",
        description="Blog post CRUD backend with bearer-token protected writes.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.post_repository = repository
    app.state.post_service = post_service
    app.state.token_verifier = verifier
    app.state.owned_resources = owned_resources

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: CORS → GZip → RequestID → Logging → Auth → routes
    app.add_middleware(AuthenticationMiddleware, verifier=verifier)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(posts.create_router(post_service))
    app.include_router(health.create_router(repository))

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "blog_api.main:app",
        host=default_settings.backend_host,
        port=default_settings.backend_port,
        log_level=default_settings.log_level.lower(),
    )
