"""
Candidate sources for the ingestion pipeline.

- RSS feeds from a curated whitelist of AI / tech publications
- NewsData.io search API (requires NEWSDATA_API_KEY)

Usage:
    from app.services.collectors import get_all_collectors

    collectors = get_all_collectors()
    outcomes = await asyncio.gather(*(c.fetch() for c in collectors))
"""
from typing import Any, Dict, List, Optional

from app.core.config import settings
from app.services.processing.scorer import RelevanceScorer
from .base import BaseCollector, FetchOutcome, RawCandidate, ScoredCandidate
from .config import RSS_FEEDS
from .newsdata_collector import NewsDataCollector
from .rss_collector import RSSCollector

__all__ = [
    "BaseCollector",
    "FetchOutcome",
    "RawCandidate",
    "ScoredCandidate",
    "RSSCollector",
    "NewsDataCollector",
    "get_all_collectors",
    "get_source_status",
]


def get_all_collectors(scorer: Optional[RelevanceScorer] = None) -> List[BaseCollector]:
    """
    Build one collector per source type, configured from settings.

    The search-API collector is included even without an API key; it then
    fails at fetch time and contributes nothing, like any other failed source.
    """
    scorer = scorer or RelevanceScorer()
    common: Dict[str, Any] = {
        "scorer": scorer,
        "recency_days": settings.RECENCY_DAYS,
        "relevance_floor": settings.RELEVANCE_FLOOR,
    }
    return [
        RSSCollector(**common),
        NewsDataCollector(
            api_key=settings.NEWSDATA_API_KEY,
            endpoint=settings.NEWSDATA_API_URL,
            **common,
        ),
    ]


def get_source_status() -> Dict[str, Dict[str, Any]]:
    """Configuration status for each source type."""
    return {
        "rss": {
            "configured": True,
            "feeds": [{"source_name": f.source_name, "url": f.url, "category": f.category} for f in RSS_FEEDS],
        },
        "newsdata": {
            "configured": bool(settings.NEWSDATA_API_KEY),
            "endpoint": settings.NEWSDATA_API_URL,
        },
    }
