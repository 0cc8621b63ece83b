from typing import Optional
from fastapi import Depends, FastAPI, Header, HTTPException, Request, status
from contextlib import asynccontextmanager
import secrets

from ..database import async_session, init_db
from ..services.analysis import ArticleAnalyzer
from ..services.collectors import get_all_collectors
from ..services.ingestion import IngestionCoordinator, ManualArticleProcessor, SqlHeadlineStore
from ..services.processing import CandidateValidator, RelevanceScorer
from ..services.rate_limit import RateGovernor
from .config import settings
from .logging import get_logger

logger = get_logger(__name__)

UNKNOWN_CLIENT = "unknown"


# Service construction

def init_store() -> SqlHeadlineStore:
    return SqlHeadlineStore(async_session)


def init_analyzer(scorer: Optional[RelevanceScorer] = None) -> ArticleAnalyzer:
    return ArticleAnalyzer(
        api_key=settings.OPENAI_API_KEY,
        model=settings.OPENAI_MODEL,
        scorer=scorer,
        timeout_seconds=settings.ANALYSIS_TIMEOUT_SECONDS,
        snippet_words=settings.ANALYSIS_SNIPPET_WORDS,
    )


def init_coordinator(store=None, analyzer: Optional[ArticleAnalyzer] = None) -> IngestionCoordinator:
    """Wire the ingestion pipeline from settings."""
    scorer = RelevanceScorer()
    return IngestionCoordinator(
        collectors=get_all_collectors(scorer),
        store=store or init_store(),
        analyzer=analyzer or init_analyzer(scorer),
        max_candidates=settings.volume_cap,
        validator=CandidateValidator() if settings.CURATION_ENABLED else None,
    )


def init_manual_processor(store=None, analyzer: Optional[ArticleAnalyzer] = None) -> ManualArticleProcessor:
    return ManualArticleProcessor(
        store=store or init_store(),
        analyzer=analyzer or init_analyzer(),
    )


def init_governors() -> tuple:
    """Standard and scheduled-trigger governors."""
    standard = RateGovernor(
        "standard",
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )
    cron = RateGovernor(
        "cron",
        max_requests=settings.CRON_RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.CRON_RATE_LIMIT_WINDOW_SECONDS,
    )
    return standard, cron


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle event handler for FastAPI"""
    # Startup
    if getattr(app.state, "init_database", True):
        await init_db()

    for governor in (app.state.standard_governor, app.state.cron_governor):
        governor.start_sweeper(settings.RATE_LIMIT_SWEEP_SECONDS)
    logger.info("Rate governor sweepers started")

    yield

    # Shutdown
    for governor in (app.state.standard_governor, app.state.cron_governor):
        await governor.stop_sweeper()
    logger.info("Rate governor sweepers stopped")


# Request dependencies

def client_key(request: Request) -> str:
    """Caller identity: first X-Forwarded-For hop, else the peer address."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


def _enforce(governor: RateGovernor, request: Request):
    key = client_key(request)
    decision = governor.check(key)
    if not decision.admitted:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests",
            headers={"Retry-After": str(decision.retry_after_seconds)},
        )


async def verify_cron_secret(authorization: Optional[str] = Header(default=None)):
    """Require `Authorization: Bearer <CRON_SECRET>`."""
    expected = settings.CRON_SECRET
    if not expected:
        logger.error("CRON_SECRET is not configured; rejecting scheduled trigger")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    if not authorization or not secrets.compare_digest(authorization.encode(), f"Bearer {expected}".encode()):
        logger.warning("Scheduled trigger rejected: bad or missing credential")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


async def standard_rate_limit(request: Request):
    _enforce(request.app.state.standard_governor, request)


async def cron_rate_limit(request: Request, _: None = Depends(verify_cron_secret)):
    """Credential first, then the scheduled-trigger governor."""
    _enforce(request.app.state.cron_governor, request)


def get_coordinator(request: Request) -> IngestionCoordinator:
    coordinator = getattr(request.app.state, "coordinator", None)
    if coordinator is None:
        coordinator = init_coordinator()
        request.app.state.coordinator = coordinator
    return coordinator


def get_manual_processor(request: Request) -> ManualArticleProcessor:
    processor = getattr(request.app.state, "manual_processor", None)
    if processor is None:
        processor = init_manual_processor()
        request.app.state.manual_processor = processor
    return processor


def get_store(request: Request):
    store = getattr(request.app.state, "store", None)
    if store is None:
        store = init_store()
        request.app.state.store = store
    return store
