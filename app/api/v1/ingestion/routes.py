"""
Ingestion API routes.

Provides endpoints for:
- Interactive and scheduled ingestion runs
- Processing a single submitted article URL
- Pruning old published headlines
- Listing configured sources

Trigger endpoints sit behind a fixed-window rate governor; the scheduled
ones also require the bearer secret, checked before any rate accounting.
"""
from datetime import timedelta
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
import logging

from ....core.config import settings
from ....core.dependencies import (
    cron_rate_limit,
    get_coordinator,
    get_manual_processor,
    get_store,
    standard_rate_limit,
)
from ....services.collectors import get_source_status
from ....services.collectors.base import utc_now
from ....services.ingestion import ManualProcessError, StoreWriteError

router = APIRouter()
logger = logging.getLogger(__name__)


class ProcessUrlRequest(BaseModel):
    url: str


@router.post("/run", dependencies=[Depends(standard_rate_limit)])
async def run_ingestion(coordinator=Depends(get_coordinator)):
    """
    Run the ingestion pipeline once (interactive re-fetch).

    Returns:
        Run summary counters
    """
    logger.info("[INGEST] POST /run")
    summary = await coordinator.run_ingestion()
    return summary.to_response()


@router.post("/cron", dependencies=[Depends(cron_rate_limit)])
async def run_scheduled_ingestion(coordinator=Depends(get_coordinator)):
    """Scheduled ingestion trigger. Requires `Authorization: Bearer <CRON_SECRET>`."""
    logger.info("[INGEST] POST /cron")
    summary = await coordinator.run_ingestion()
    return summary.to_response()


@router.post("/process-url", dependencies=[Depends(standard_rate_limit)])
async def process_url(request: ProcessUrlRequest, processor=Depends(get_manual_processor)):
    """
    Fetch, analyze and store a single article.

    Returns:
        The stored draft
    """
    logger.info(f"[MANUAL] POST /process-url url={request.url}")
    try:
        draft = await processor.process(request.url)
    except ManualProcessError as e:
        logger.warning(f"[MANUAL] Rejected {request.url}: {e.status_code} {e.message}")
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return {
        "message": "Article processed successfully",
        "article": draft.to_dict(),
    }


@router.post("/cron/prune", dependencies=[Depends(cron_rate_limit)])
async def prune_published(store=Depends(get_store)):
    """Delete published headlines older than PRUNE_AFTER_HOURS."""
    cutoff = utc_now() - timedelta(hours=settings.PRUNE_AFTER_HOURS)
    logger.info(f"[PRUNE] POST /cron/prune cutoff={cutoff.isoformat()}")
    try:
        deleted = await store.prune_published(cutoff)
    except StoreWriteError as e:
        logger.error(f"[PRUNE] Failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to prune headlines")

    return {
        "message": f"Deleted {deleted} published headlines",
        "deletedCount": deleted,
        "cutoff": cutoff.isoformat(),
    }


@router.get("/sources")
async def list_sources():
    """Configured sources and whether each has its credentials."""
    return get_source_status()
