"""LearnEase progress API.

Wires the course catalogue and the enrollment/progress services onto
``app.state`` during startup. Both Redis and Cassandra are allowed to be
missing: without Redis courses are read uncached, without Cassandra the
API stays up and the service dependencies answer 503.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import redis.asyncio as redis
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from redis.exceptions import RedisError
from starlette.exceptions import HTTPException as StarletteHTTPException

from learnease.config import Settings, get_settings
from learnease.core.context import get_request_id
from learnease.core.database import init_async_cassandra, shutdown_async_cassandra
from learnease.core.logging import configure_structlog, get_logger
from learnease.core.middleware import RequestContextMiddleware
from learnease.core.redis import init_redis, shutdown_redis
from learnease.courses.router import router as courses_router
from learnease.courses.seed import seed_demo
from learnease.courses.service import CourseService
from learnease.health import router as health_router
from learnease.progress.router import enrollments_router
from learnease.progress.router import router as progress_router
from learnease.progress.service import ProgressService
from learnease.progress.store import EnrollmentStore


settings = get_settings()
configure_structlog(settings, log_dir=Path(settings.log_dir))

logger = get_logger(__name__)


async def _connect_course_cache(settings: Settings) -> redis.Redis | None:
    if not settings.course_cache_enabled:
        logger.info("course_cache_disabled")
        return None
    try:
        return await init_redis()
    except (RedisError, ValueError) as e:
        logger.warning("course_cache_skipped", error=str(e))
        return None


async def _wire_services(
    app: FastAPI, settings: Settings, cache: redis.Redis | None
) -> None:
    """Open Cassandra and attach the course and progress services."""
    session = await init_async_cassandra()

    course_service = CourseService(
        session=session,
        keyspace=settings.cassandra_keyspace,
        redis=cache,
        cache_ttl=settings.course_cache_ttl_seconds,
    )
    store = EnrollmentStore(session=session, keyspace=settings.cassandra_keyspace)

    app.state.course_service = course_service
    app.state.enrollment_store = store
    app.state.progress_service = ProgressService(store=store, course_service=course_service)
    logger.info("services_wired", course_cache=cache is not None)

    if settings.seed_demo_on_startup:
        counts = await seed_demo(course_service, store)
        logger.info("demo_seeded_on_startup", **counts)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    logger.info(
        "starting_application",
        version=settings.app_version,
        environment=settings.environment,
    )

    cache = await _connect_course_cache(settings)
    try:
        await _wire_services(app, settings, cache)
    except Exception as e:
        logger.warning("services_unavailable", error=str(e), error_type=type(e).__name__)

    yield

    logger.info("shutting_down_application")
    await shutdown_redis()
    await shutdown_async_cassandra()


def _error_body(request: Request, status_code: int, message: str) -> dict[str, Any]:
    request_id = getattr(request.state, "request_id", None) or get_request_id()
    return {
        "error": True,
        "message": message,
        "status_code": status_code,
        "request_id": request_id,
    }


def _register_exception_handlers(app: FastAPI) -> None:
    """Uniform JSON error envelope; 5xx responses never carry internal details."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> ORJSONResponse:
        logger.warning(
            "http_exception",
            status_code=exc.status_code,
            detail=str(exc.detail),
            path=request.url.path,
        )
        message = (
            str(exc.detail)
            if exc.status_code != status.HTTP_500_INTERNAL_SERVER_ERROR
            else "Internal server error"
        )
        return ORJSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, exc.status_code, message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        errors = exc.errors()
        logger.warning("validation_error", error_count=len(errors), path=request.url.path)

        content = _error_body(
            request, status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation error"
        )
        content["details"] = [
            {
                "field": ".".join(str(loc) for loc in err.get("loc", [])),
                "message": err.get("msg", "Invalid value"),
            }
            for err in errors
        ]
        return ORJSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=content
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> ORJSONResponse:
        logger.exception(
            "unhandled_exception",
            error_type=type(exc).__name__,
            path=request.url.path,
            method=request.method,
        )
        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(
                request,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "An unexpected error occurred. Please try again later.",
            ),
        )


def create_app() -> FastAPI:
    """Build the API; services are attached by the lifespan."""
    settings = get_settings()
    docs_enabled = settings.is_development

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="LearnEase course progress API",
        debug=False,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )

    # Request id and logging context; CORS (added after) wraps it
    app.add_middleware(
        RequestContextMiddleware,
        log_requests=settings.log_requests,
        exclude_paths=settings.log_exclude_paths,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        max_age=settings.cors_max_age,
    )

    _register_exception_handlers(app)

    for router in (health_router, courses_router, progress_router, enrollments_router):
        app.include_router(router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        return {"message": "LearnEase API", "version": settings.app_version}

    return app


app = create_app()
