"""Application entry point and FastAPI app factory."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config.settings import Settings, settings
from .controllers import checkout, sessions, status
from .database import dispose_engine, init_models
from .errors import VerdictError
from .middleware import StructuredLoggingMiddleware, TelemetryMiddleware
from .services import (
    AnalysisService,
    InMemorySessionStore,
    SessionStore,
    SqlAlchemySessionStore,
    SubscriptionService,
    TranscribeService,
    build_llm_client,
    build_subscription_service,
    build_transcribe_service,
)
from .views import ErrorResponse

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _rotating_handler(path: str, max_bytes: int, fmt: str) -> RotatingFileHandler:
    log_path = Path(path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_path,
        maxBytes=max_bytes,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _configure_logging(app_settings: Settings) -> None:
    """Stream logs to stdout plus dedicated files for pipeline and transcripts."""

    logging.getLogger().handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(_rotating_handler(app_settings.log_file, 1_000_000, _LOG_FORMAT))
    root_logger.setLevel(logging.DEBUG if app_settings.debug else logging.INFO)

    middleware_logger = logging.getLogger("verdict.middleware.structured")
    middleware_logger.handlers.clear()
    middleware_stdout = logging.StreamHandler(sys.stdout)
    middleware_stdout.setFormatter(logging.Formatter("%(message)s"))
    middleware_logger.addHandler(middleware_stdout)
    middleware_logger.setLevel(logging.INFO)
    middleware_logger.propagate = False

    # Pipeline and transcript lines also reach the root handlers.
    pipeline_logger = logging.getLogger("verdict.pipeline")
    pipeline_logger.handlers.clear()
    pipeline_logger.addHandler(
        _rotating_handler(
            app_settings.pipeline_log_file,
            500_000,
            "%(asctime)s | %(levelname)s | %(message)s",
        )
    )
    pipeline_logger.setLevel(logging.DEBUG if app_settings.debug else logging.INFO)

    transcript_logger = logging.getLogger("verdict.logs.transcript")
    transcript_logger.handlers.clear()
    transcript_logger.addHandler(
        _rotating_handler(
            app_settings.transcript_log_file,
            500_000,
            "%(asctime)s | %(levelname)s | %(message)s",
        )
    )
    transcript_logger.setLevel(logging.INFO)

    noisy_loggers = [
        "httpx",
        "httpcore",
        "openai",
        "stripe",
        "sqlalchemy.engine",
    ]
    for name in noisy_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)


def _build_session_store(app_settings: Settings) -> SessionStore:
    if app_settings.store_backend == "database":
        return SqlAlchemySessionStore()
    return InMemorySessionStore()


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request data"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def create_app(
    app_settings: Settings | None = None,
    *,
    session_store: SessionStore | None = None,
    transcribe_service: TranscribeService | None = None,
    analysis_service: AnalysisService | None = None,
    subscription_service: SubscriptionService | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Missing upstream credentials raise ``ConfigurationError`` here, so a
    misconfigured process fails at startup rather than on the first request.
    """

    app_settings = app_settings or settings
    _configure_logging(app_settings)

    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.app_version,
        debug=app_settings.debug,
        description="Verdict relationship analysis backend API",
    )

    app.state.settings = app_settings
    app.state.session_store = session_store or _build_session_store(app_settings)
    app.state.transcribe_service = transcribe_service or build_transcribe_service(app_settings)
    app.state.analysis_service = analysis_service or AnalysisService(build_llm_client(app_settings))
    app.state.subscription_service = subscription_service or build_subscription_service(app_settings)

    if app_settings.subscription_bypass:
        logger.warning("Development mode: subscription check is bypassed for session submissions")

    app.add_middleware(TelemetryMiddleware)
    app.add_middleware(StructuredLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=app_settings.cors_allow_credentials,
        allow_methods=app_settings.cors_allow_methods,
        allow_headers=app_settings.cors_allow_headers,
        max_age=86400,
    )

    app.include_router(status.router, prefix=app_settings.api_prefix)
    app.include_router(checkout.router, prefix=app_settings.api_prefix)
    app.include_router(sessions.router, prefix=app_settings.api_prefix)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        """Root endpoint."""

        return {
            "message": f"Welcome to {app_settings.app_name}",
            "version": app_settings.app_version,
            "status": "operational",
        }

    @app.get("/health", include_in_schema=False)
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""

        return {
            "status": "healthy",
            "service": app_settings.app_name,
            "version": app_settings.app_version,
        }

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Expose application metrics for Prometheus scraping."""

        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.exception_handler(VerdictError)
    async def verdict_error_handler(request: Request, exc: VerdictError):
        if exc.status_code >= 500:
            logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=exc.message).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error=_first_validation_message(exc)).model_dump(),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=str(exc.detail)).model_dump(),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Internal server error").model_dump(),
        )

    @app.on_event("startup")
    async def startup_event() -> None:
        if app_settings.store_backend == "database":
            await init_models()

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        await dispose_engine()

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "verdict.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
