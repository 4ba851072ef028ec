"""FastAPI application bootstrap for the Barrel Coach backend."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import get_api_router
from .core.context import get_correlation_id
from .core.errors import BarrelCoachError
from .core.sentry import capture_exception, init_sentry
from .db import init_db
from .dependencies import get_settings
from .middleware import ErrorHandlingMiddleware
from .middleware.error_handler import error_response, http_error_response, validation_error

settings = get_settings()


def configure_logging(debug: bool, level: str = "INFO") -> None:
    renderer = structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
    )


configure_logging(settings.debug, settings.log_level)
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the database and Sentry on startup; dispose the engine on shutdown."""
    logger.info("startup", environment=settings.environment)

    db_manager = init_db(
        database_url=settings.database_url,
        echo=settings.database_echo,
    )
    logger.info("database_initialized", url=settings.database_url.split("@")[-1])

    # Production schemas come from Alembic
    if settings.is_sqlite or settings.debug:
        await db_manager.create_tables()
        logger.info("database_tables_created")

    init_sentry(settings)

    yield

    await db_manager.close()
    logger.info("shutdown_complete")


app = FastAPI(
    lifespan=lifespan,
    title=settings.api_title,
    version=settings.api_version,
    description=(
        "Swing-video uploads, 4B analysis, athlete messaging and the drill-video "
        "content pipeline for the Catching Barrels lab."
    ),
)

app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


@app.exception_handler(BarrelCoachError)
async def handle_app_error(request: Request, exc: BarrelCoachError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed", code=exc.code, message=exc.message, path=request.url.path)
        capture_exception(exc)
    else:
        logger.warning("request_rejected", code=exc.code, message=exc.message, path=request.url.path)
    return error_response(exc, get_correlation_id())


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return http_error_response(exc, get_correlation_id())


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(validation_error(exc), get_correlation_id())


app.include_router(get_api_router())
app.mount(
    "/storage",
    StaticFiles(directory=settings.storage_root, check_dir=False),
    name="storage",
)


__all__ = ["app", "configure_logging", "lifespan"]
