"""
FastAPI application factory.

Assembles the User API: logging and error tracking, the database lifespan,
problem document exception handlers, middleware and routers.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import sentry_sdk
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_api.core.config import Settings
from user_api.core.exceptions import BaseException, ValidationException
from user_api.core.logging_config import build_logging_config, setup_logging
from user_api.infrastructure.persistence.sqlalchemy.database import (
    create_engine_from_settings,
    create_schema,
    create_session_factory,
)
from user_api.presentation.api.v1.api_router import api_v1_router
from user_api.presentation.middleware.request_context import RequestContextMiddleware

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"
PROBLEM_TITLE = "An error occurred"
INTERNAL_ERROR_DETAIL = "An internal server error occurred."


def problem_response(
    status_code: int,
    detail: str,
    problem_type: str | None = None,
    headers: dict[str, str] | None = None,
    **extra: Any,
) -> JSONResponse:
    """
    Build an ``application/problem+json`` response.

    Args:
        status_code: HTTP status of the response
        detail: Human-readable explanation of this occurrence
        problem_type: Problem type reference; defaults to ``/errors/<status>``
        headers: Extra response headers
        **extra: Additional members of the problem document

    Returns:
        JSONResponse: The problem response
    """
    content = {
        "type": problem_type or f"/errors/{status_code}",
        "title": PROBLEM_TITLE,
        "status": status_code,
        "detail": detail,
        **extra,
    }
    return JSONResponse(
        status_code=status_code,
        content=content,
        headers=headers,
        media_type=PROBLEM_MEDIA_TYPE,
    )


def _initialize_sentry(settings: Settings) -> None:
    """Turn on Sentry error reporting when a DSN is configured."""
    if not settings.SENTRY_DSN:
        logger.info("No SENTRY_DSN configured; error reporting disabled.")
        return

    logger.info("Sentry DSN found, initializing Sentry.")
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        environment=settings.ENVIRONMENT,
        release=settings.API_VERSION,
    )


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Own the database for the lifetime of the application.

    On startup the engine and session factory are put on ``app.state`` and
    missing tables are created; on shutdown the engine is disposed.
    """
    current_settings: Settings = fastapi_app.state.settings
    logger.info(f"Lifespan: starting ({current_settings.ENVIRONMENT})")

    db_engine = create_engine_from_settings(current_settings)
    fastapi_app.state.db_engine = db_engine
    fastapi_app.state.actual_session_factory = create_session_factory(db_engine)

    try:
        await create_schema(db_engine)
        yield
    finally:
        logger.info("Lifespan: disposing database engine")
        await db_engine.dispose()
        fastapi_app.state.actual_session_factory = None
        fastapi_app.state.db_engine = None


def create_application(settings_override: Settings | None = None) -> FastAPI:
    """
    Build the User API application.

    Args:
        settings_override: Settings to use instead of the environment's

    Returns:
        FastAPI: The application, not yet started
    """
    current_settings = settings_override or Settings()

    setup_logging(build_logging_config(current_settings.LOG_LEVEL))
    logger.info(f"Creating application for environment: {current_settings.ENVIRONMENT}")

    _initialize_sentry(current_settings)

    app_instance = FastAPI(
        title=current_settings.API_TITLE,
        description=current_settings.API_DESCRIPTION,
        version=current_settings.API_VERSION,
        openapi_url="/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        default_response_class=JSONResponse,
        lifespan=lifespan,
        debug=False if current_settings.ENVIRONMENT in ("test", "production") else current_settings.DEBUG,
    )
    app_instance.state.settings = current_settings

    @app_instance.exception_handler(ValidationException)
    async def validation_exception_handler(
        request: Request, exc: ValidationException
    ) -> JSONResponse:
        """Report every constraint violation of the submitted resource."""
        logger.info(f"Constraint violations on {request.method} {request.url.path}: {len(exc.violations)}")
        return problem_response(
            status_code=exc.status_code,
            detail=exc.message,
            problem_type="/validation_errors",
            violations=[violation.to_dict() for violation in exc.violations],
        )

    @app_instance.exception_handler(BaseException)
    async def application_exception_handler(
        request: Request, exc: BaseException
    ) -> JSONResponse:
        """Render application exceptions with the status they carry."""
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(f"Application error: {type(exc).__name__}: {exc}", exc_info=exc)
            return problem_response(exc.status_code, INTERNAL_ERROR_DETAIL)

        logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
        return problem_response(exc.status_code, exc.message)

    @app_instance.exception_handler(StarletteHTTPException)
    async def starlette_http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """
        Handle Starlette HTTP exceptions (unknown routes, unsupported methods).

        500 errors are always masked.
        """
        logger.info(f"HTTP {exc.status_code} on {request.method} {request.url.path}: {exc.detail}")
        if exc.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
            return problem_response(exc.status_code, INTERNAL_ERROR_DETAIL)
        return problem_response(exc.status_code, str(exc.detail), headers=exc.headers)

    @app_instance.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Parameters FastAPI could not bind are client syntax errors."""
        errors = exc.errors()
        logger.warning(f"Request validation error: {errors}")
        detail = errors[0].get("msg", "Syntax error") if errors else "Syntax error"
        return problem_response(status.HTTP_400_BAD_REQUEST, detail)

    @app_instance.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Anything unexpected becomes a masked 500; details only go to the log."""
        logger.error(f"Unhandled exception: {type(exc).__name__}: {exc}", exc_info=exc)
        return problem_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_DETAIL)

    if current_settings.BACKEND_CORS_ORIGINS:
        app_instance.add_middleware(
            CORSMiddleware,
            allow_origins=current_settings.BACKEND_CORS_ORIGINS,
            allow_credentials=current_settings.CORS_ALLOW_CREDENTIALS,
            allow_methods=current_settings.CORS_ALLOW_METHODS,
            allow_headers=current_settings.CORS_ALLOW_HEADERS,
        )
    app_instance.add_middleware(RequestContextMiddleware)

    app_instance.include_router(api_v1_router, prefix=current_settings.API_PREFIX)

    @app_instance.get(f"{current_settings.API_PREFIX}/health", tags=["Health"])
    async def health_check(request: Request) -> dict[str, str]:
        """Report whether the database answers."""
        async with request.app.state.db_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return {"status": "ok"}

    @app_instance.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        return {"message": f"{current_settings.API_TITLE}. See /docs for API documentation."}

    logger.info("Application factory complete.")
    return app_instance
