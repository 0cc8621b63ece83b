"""
Manual single-URL processing.

Fetches one article page, takes its <title> and meta description, runs it
through the analyzer and stores it as a pending draft. Every rejection is a
ManualProcessError carrying the HTTP status the route should answer with.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional, Tuple
from urllib.parse import urlsplit

import aiohttp
from bs4 import BeautifulSoup

from app.services.analysis.analyzer import ArticleAnalyzer
from app.services.collectors.base import utc_now
from app.services.collectors.config import USER_AGENT
from app.services.processing.urls import normalize_url
from .store import Draft, HeadlineStore, StoreReadError, StoreWriteError

logger = logging.getLogger(__name__)

UNTITLED = "Untitled Article"


class ManualProcessError(Exception):
    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def extract_metadata(html: str) -> Tuple[str, str]:
    """Title and description of an HTML page (empty description if none)."""
    soup = BeautifulSoup(html or "", "html.parser")

    title = UNTITLED
    if soup.title and soup.title.string and soup.title.string.strip():
        title = " ".join(soup.title.string.split())

    description = ""
    for attrs in ({"name": "description"}, {"property": "og:description"}):
        tag = soup.find("meta", attrs=attrs)
        if tag and tag.get("content"):
            description = " ".join(tag["content"].split())
            break

    return title, description


class ManualArticleProcessor:
    """Processes a single user-submitted article URL."""

    def __init__(
        self,
        store: HeadlineStore,
        analyzer: ArticleAnalyzer,
        timeout_seconds: float = 30.0,
        fetch_page: Optional[Callable[[str], Awaitable[str]]] = None,
    ):
        self.store = store
        self.analyzer = analyzer
        self.timeout_seconds = timeout_seconds
        self._fetch_page = fetch_page or self._download
        self._logger = logging.getLogger(f"{__name__}.ManualArticleProcessor")

    async def _download(self, url: str) -> str:
        async with aiohttp.ClientSession(headers={"User-Agent": USER_AGENT}) as session:
            async with session.get(
                url,
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            ) as response:
                if response.status != 200:
                    raise ManualProcessError(
                        f"Failed to fetch article: HTTP {response.status}", 502
                    )
                return await response.text(errors="replace")

    async def process(self, url: str) -> Draft:
        """
        Fetch, analyze and store one article.

        Raises:
            ManualProcessError: 400 invalid URL, 409 already stored,
                502 fetch or analysis failure, 503 store unavailable,
                500 insert failure
        """
        url = (url or "").strip()
        parts = urlsplit(url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ManualProcessError("Invalid URL format", 400)

        normalized = normalize_url(url)
        self._logger.info(f"[MANUAL] Processing {normalized}")

        try:
            exists = await self.store.url_exists(normalized)
        except StoreReadError as e:
            raise ManualProcessError(f"Could not check existing headlines: {e}", 503) from e
        if exists:
            raise ManualProcessError("Article already exists", 409)

        try:
            html = await self._fetch_page(url)
        except ManualProcessError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, UnicodeDecodeError) as e:
            self._logger.warning(f"[MANUAL] Fetch failed for {url}: {type(e).__name__}: {e}")
            raise ManualProcessError(f"Failed to fetch article: {type(e).__name__}", 502) from e

        title, description = extract_metadata(html)
        analysis = await self.analyzer.analyze(title, description)
        if analysis is None:
            raise ManualProcessError("Failed to analyze article", 502)

        draft = Draft(
            title=title,
            url=normalized,
            normalized_url=normalized,
            source=parts.hostname or "manual",
            summary=analysis.summary,
            hype_score=analysis.hype_score,
            category=analysis.category,
            published_at=utc_now(),
            snippet=description or None,
            ai_summary=not analysis.degraded,
            metadata={"submitted": "manual"},
        )

        try:
            await self.store.insert_draft(draft)
        except StoreWriteError as e:
            if e.duplicate:
                raise ManualProcessError("Article already exists", 409) from e
            raise ManualProcessError("Failed to store article", 500) from e

        self._logger.info(f"[MANUAL] Stored {title!r} (hype={draft.hype_score}, category={draft.category})")
        return draft
