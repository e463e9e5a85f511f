"""FastAPI application entry point."""
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from api.routers import auth, bookmarks, health
from core.config import Settings, get_settings
from core.logging_config import setup_logging
from db.session import create_engine, create_session_factory
from models.base import Base

logger = logging.getLogger(__name__)

REQUEST_PARTS = ("body", "path", "query", "header", "cookie")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan - startup and shutdown."""
    # Startup: create tables when running without migrations
    if app.state.settings.auto_create_tables:
        async with app.state.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    yield

    # Shutdown: release pooled connections
    await app.state.engine.dispose()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request and add security headers to response."""
        response = await call_next(request)
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        # Prevent clickjacking - API shouldn't be framed
        response.headers["X-Frame-Options"] = "DENY"
        return response


def format_validation_errors(exc: RequestValidationError) -> str:
    """Flatten pydantic errors into 'field: message; ...'."""
    messages = []
    for err in exc.errors():
        # Drop the request-part prefix: ("body", "bookmark_ids", 0) -> bookmark_ids.0
        field = ".".join(
            str(part) for part in err.get("loc", ()) if part not in REQUEST_PARTS
        )
        messages.append(f"{field or 'request'}: {err.get('msg', 'invalid')}")
    return "; ".join(messages) if messages else "Validation error"


async def http_exception_handler(
    _request: Request, exc: StarletteHTTPException,
) -> JSONResponse:
    """Render HTTP errors as {"error": message}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=exc.headers,
    )


async def validation_exception_handler(
    _request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Malformed or missing input is a 400, not FastAPI's default 422."""
    return JSONResponse(
        status_code=400,
        content={"error": format_validation_errors(exc)},
    )


async def storage_exception_handler(
    request: Request, _exc: SQLAlchemyError,
) -> JSONResponse:
    """Database failures become a generic 500; details only go to the log."""
    logger.exception("Storage error handling %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Storage unavailable"})


async def unhandled_exception_handler(
    request: Request, _exc: Exception,
) -> JSONResponse:
    """Last resort for anything not mapped above."""
    logger.exception("Unhandled error handling %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application.

    The engine and session factory are created here and owned by the app
    (app.state), so each app instance - including every test app - has its
    own isolated database handle.
    """
    app_settings = settings or get_settings()
    setup_logging(app_settings.log_level)

    app = FastAPI(
        title="Pinmarks API",
        description="A personal bookmark manager with manual ordering and pinning.",
        version="0.1.0",
        lifespan=lifespan,
    )

    engine = create_engine(app_settings)
    app.state.settings = app_settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, storage_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Security headers middleware (runs after CORS, adds headers to responses)
    app.add_middleware(SecurityHeadersMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(auth.router, prefix=app_settings.api_prefix)
    app.include_router(bookmarks.router, prefix=app_settings.api_prefix)

    return app


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    app_settings = get_settings()
    app = create_app(app_settings)
    logger.info("Server starting on port %s", app_settings.port)
    uvicorn.run(app, host=app_settings.host, port=app_settings.port)
