"""FastAPI application entry point."""
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from api.routers import (
    admin,
    auth,
    categories,
    cost_items,
    health,
    projects,
    subprojects,
    tasks,
    users,
)
from core.config import Settings, get_settings
from core.redis import RedisClient
from core.result_cache import InMemoryResultCache, RedisResultCache, ResultCache
from services.exceptions import ServiceError

logger = logging.getLogger(__name__)


def build_result_cache(settings: Settings, redis_client: RedisClient | None) -> ResultCache:
    """Construct the configured result cache backend."""
    if settings.result_cache_backend == "redis" and redis_client is not None:
        return RedisResultCache(redis_client, ttl_seconds=settings.result_cache_ttl_seconds)
    return InMemoryResultCache(
        ttl_seconds=settings.result_cache_ttl_seconds,
        max_entries=settings.result_cache_max_entries,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan - startup and shutdown."""
    app_settings = get_settings()
    logging.basicConfig(level=app_settings.log_level.upper())

    # Startup: Connect to Redis only when it backs the result cache
    redis_client = None
    if app_settings.result_cache_backend == "redis":
        redis_client = RedisClient(
            url=app_settings.redis_url,
            pool_size=app_settings.redis_pool_size,
        )
        await redis_client.connect()

    app.state.result_cache = build_result_cache(app_settings, redis_client)
    logger.info("result_cache_ready backend=%s", type(app.state.result_cache).__name__)

    yield

    # Shutdown
    if redis_client is not None:
        await redis_client.close()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request and add security headers to response."""
        response = await call_next(request)
        # HSTS: enforce HTTPS for 1 year, including subdomains
        response.headers["Strict-Transport-Security"] = (
            "max-age=31536000; includeSubDomains"
        )
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        # Prevent clickjacking - API shouldn't be framed
        response.headers["X-Frame-Options"] = "DENY"
        return response


app_settings = get_settings()

app = FastAPI(
    title="Site Dashboard API",
    description="Construction project tracking: projects, tasks, and cost entries.",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(ServiceError)
async def service_error_handler(_request: Request, exc: ServiceError) -> JSONResponse:
    """Render domain errors with their stable error code."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": {"error": exc.error, "message": exc.message}},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    _request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Malformed or missing required input is a 400 invalid_input."""
    return JSONResponse(
        status_code=400,
        content={
            "detail": {
                "error": "invalid_input",
                "message": "Missing or invalid fields",
                "fields": jsonable_encoder(exc.errors()),
            },
        },
    )


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Log storage failures server-side; return a generic 500."""
    logger.error(
        "storage_failure method=%s path=%s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": {"error": "storage_failure", "message": "Internal Server Error"}},
    )


# Security headers middleware (runs after CORS, adds headers to responses)
app.add_middleware(SecurityHeadersMiddleware)

# Credentials are required for the session cookie
app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(tasks.router)
app.include_router(cost_items.router)
app.include_router(projects.router)
app.include_router(subprojects.router)
app.include_router(categories.router)
app.include_router(admin.router)
