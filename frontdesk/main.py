from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, get_settings
from .routers import recovery
from .services.error_handling import (
    AppError,
    build_error_response,
    log_exception,
    map_exception_to_error_code,
    new_trace_id,
)
from .services.structured_logger import start_background_logging, stop_background_logging

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        if settings.structured_log_async:
            start_background_logging()
        try:
            yield
        finally:
            stop_background_logging()

    app = FastAPI(
        title="Front Desk Recovery Router",
        version=settings.api_version,
        docs_url="/docs" if settings.debug else None,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:5000",
            "http://127.0.0.1:5000",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    async def _error_response(request: Request, exc: Exception, *, handled: bool):
        trace_id = new_trace_id()
        await log_exception(request=request, exc=exc, trace_id=trace_id, handled=handled)
        error_code, reason, status_code = map_exception_to_error_code(exc)
        debug_payload = {"trace_id": trace_id}
        if isinstance(exc, AppError) and exc.debug:
            debug_payload.update(exc.debug)
        return build_error_response(
            error_code=error_code,
            reason=reason,
            status_code=status_code,
            emergency_number=settings.emergency_number,
            debug_payload=debug_payload,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return await _error_response(request, exc, handled=True)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return await _error_response(request, exc, handled=True)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return await _error_response(request, exc, handled=True)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        return await _error_response(request, exc, handled=False)

    app.include_router(recovery.router)
    logger.info(
        "FastAPI app initialized (env=%s recovery_router=%s)",
        settings.env,
        settings.enable_recovery_router,
    )
    return app


app = create_app()
