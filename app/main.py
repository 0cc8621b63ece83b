"""
FastAPI application for the headline curator.

Run with:
    uvicorn app.main:get_app --factory
"""
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api.v1.ingestion.routes import router as ingestion_router
from .core.dependencies import init_governors, lifespan
from .core.logging import get_logger, init_logging
from .services.rate_limit import RateGovernor

logger = get_logger(__name__)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "internal_error", "message": "An unexpected error occurred"},
    )


def create_app(
    coordinator=None,
    manual_processor=None,
    store=None,
    standard_governor: Optional[RateGovernor] = None,
    cron_governor: Optional[RateGovernor] = None,
    init_database: bool = True,
) -> FastAPI:
    """
    Build the application.

    Services left as None are created from settings on first use.
    """
    app = FastAPI(title="Headline Curator", lifespan=lifespan)

    default_standard, default_cron = init_governors()
    app.state.standard_governor = standard_governor or default_standard
    app.state.cron_governor = cron_governor or default_cron
    app.state.coordinator = coordinator
    app.state.manual_processor = manual_processor
    app.state.store = store
    app.state.init_database = init_database

    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.include_router(ingestion_router, prefix="/api/v1/ingestion", tags=["ingestion"])
    return app


def get_app() -> FastAPI:
    init_logging()
    return create_app()
