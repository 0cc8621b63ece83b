"""
NewsData.io search-API collector.

Queries the /news endpoint with the primary AI and company keywords.
Failed requests are retried with exponential backoff before the source is
given up on for this run.
"""
import asyncio
import aiohttp
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional
import logging

from app.services.processing.keywords import DEFAULT_KEYWORD_CATEGORIES, SEARCH_QUERY_CATEGORIES
from .base import BaseCollector, RawCandidate
from .config import (
    API_TIMEOUT_SECONDS,
    NEWSDATA_CATEGORIES,
    NEWSDATA_DEFAULT_SOURCE,
    NEWSDATA_LANGUAGE,
    SEARCH_BACKOFF_BASE_SECONDS,
    SEARCH_MAX_ATTEMPTS,
    USER_AGENT,
)

logger = logging.getLogger(__name__)


class SearchAPIError(Exception):
    """The search API kept failing after all retry attempts."""


def build_default_query() -> str:
    keywords: List[str] = []
    for name in SEARCH_QUERY_CATEGORIES:
        keywords.extend(DEFAULT_KEYWORD_CATEGORIES[name].keywords)
    return " OR ".join(dict.fromkeys(keywords))


def parse_pub_date(value: Any) -> Optional[datetime]:
    """Parse NewsData's 'YYYY-MM-DD HH:MM:SS' (UTC) or ISO-8601 strings."""
    if not value or not isinstance(value, str):
        return None
    text = value.strip().replace("Z", "+00:00")
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class NewsDataCollector(BaseCollector):
    """Collects candidates from the NewsData.io search API."""

    def __init__(
        self,
        api_key: Optional[str],
        endpoint: str = "https://newsdata.io/api/1/news",
        query: Optional[str] = None,
        max_attempts: int = SEARCH_MAX_ATTEMPTS,
        backoff_base: float = SEARCH_BACKOFF_BASE_SECONDS,
        timeout_seconds: float = API_TIMEOUT_SECONDS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.api_key = api_key
        self.endpoint = endpoint
        self.query = query or build_default_query()
        self.max_attempts = max(1, max_attempts)
        self.backoff_base = backoff_base
        self.timeout_seconds = timeout_seconds
        self._sleep = sleep

    @property
    def name(self) -> str:
        return "NewsData.io"

    @property
    def source_type(self) -> str:
        return "newsdata"

    def _params(self) -> Dict[str, str]:
        cutoff = self._clock() - timedelta(days=self.recency_days)
        return {
            "apikey": self.api_key or "",
            "q": self.query,
            "language": NEWSDATA_LANGUAGE,
            "category": NEWSDATA_CATEGORIES,
            "from_date": cutoff.date().isoformat(),
        }

    async def _request(self, session: aiohttp.ClientSession) -> Dict[str, Any]:
        """GET the search endpoint, retrying with exponential backoff."""
        last_error: Optional[str] = None

        for attempt in range(self.max_attempts):
            try:
                async with session.get(
                    self.endpoint,
                    params=self._params(),
                    timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                ) as response:
                    if response.status == 200:
                        return await response.json(content_type=None)
                    body = await response.text()
                    last_error = f"HTTP {response.status}: {body[:200]}"
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_error = f"{type(e).__name__}: {e}"

            self._logger.warning(
                f"[FETCH] [{self.name}] Attempt {attempt + 1}/{self.max_attempts} failed: {last_error}"
            )
            if attempt + 1 < self.max_attempts:
                await self._sleep(self.backoff_base * (2 ** attempt))

        raise SearchAPIError(last_error or "search request failed")

    def parse_results(self, payload: Any) -> List[RawCandidate]:
        """Turn a search response body into candidates."""
        results = payload.get("results") if isinstance(payload, dict) else None
        items = []
        for article in results or []:
            if not isinstance(article, dict):
                continue
            title = self.clean_text(article.get("title") or "")
            link = (article.get("link") or "").strip()
            if not title or not link:
                continue
            description = self.clean_text(article.get("description") or "")
            items.append(RawCandidate(
                title=title,
                url=link,
                source_name=article.get("source_id") or NEWSDATA_DEFAULT_SOURCE,
                published_at=parse_pub_date(article.get("pubDate")),
                snippet=description or None,
                metadata={"source_categories": article.get("category") or []},
            ))
        return items

    async def collect(self) -> List[RawCandidate]:
        if not self.api_key:
            raise SearchAPIError("NEWSDATA_API_KEY is not configured")

        self._logger.info(f"Querying {self.name}")
        async with aiohttp.ClientSession(headers={"User-Agent": USER_AGENT}) as session:
            payload = await self._request(session)

        items = self.parse_results(payload)
        self._logger.info(f"{self.name} returned {len(items)} usable articles")
        return items
