"""
RSS feed collector.

Fetches every configured feed in parallel. A feed that times out, returns a
non-200 status or cannot be parsed contributes nothing; the other feeds are
unaffected. When every feed fails the whole source counts as failed.
"""
import asyncio
import aiohttp
import feedparser
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence
import logging

from .base import BaseCollector, RawCandidate
from .config import RSS_FEEDS, RSS_ITEMS_PER_FEED, RSS_TIMEOUT_SECONDS, USER_AGENT, FeedSource

logger = logging.getLogger(__name__)


class FeedError(Exception):
    """A single feed answered with a bad status or an unreadable document."""


class FeedCollectionError(Exception):
    """Every configured feed failed in one collection pass."""


@dataclass
class FeedBatch:
    """Items and failed feed names from one collection pass."""
    items: List[RawCandidate] = field(default_factory=list)
    failed_feeds: List[str] = field(default_factory=list)


class RSSCollector(BaseCollector):
    """Collects candidates from a whitelist of RSS/Atom feeds."""

    def __init__(
        self,
        feeds: Optional[Sequence[FeedSource]] = None,
        items_per_feed: int = RSS_ITEMS_PER_FEED,
        timeout_seconds: float = RSS_TIMEOUT_SECONDS,
        **kwargs,
    ):
        """
        Args:
            feeds: Feeds to poll. Uses the configured whitelist if None.
            items_per_feed: Maximum entries read from each feed.
            timeout_seconds: Total timeout for one feed request.
            **kwargs: Passed through to BaseCollector (scorer, recency, floor, clock).
        """
        super().__init__(**kwargs)
        self.feeds = list(feeds) if feeds is not None else list(RSS_FEEDS)
        self.items_per_feed = items_per_feed
        self.timeout_seconds = timeout_seconds

    @property
    def name(self) -> str:
        return "RSS Feeds"

    @property
    def source_type(self) -> str:
        return "rss"

    async def _fetch_feed(
        self,
        session: aiohttp.ClientSession,
        feed: FeedSource,
    ) -> List[RawCandidate]:
        """Fetch and parse a single feed. Raises on any failure."""
        self._logger.debug(f"Fetching feed: {feed.source_name} ({feed.url})")
        async with session.get(
            feed.url,
            timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
        ) as response:
            if response.status != 200:
                raise FeedError(f"HTTP {response.status}")
            content = await response.text(errors="replace")

        return self.parse_feed(content, feed)

    def parse_feed(self, content: str, feed: FeedSource) -> List[RawCandidate]:
        """
        Turn a feed document into candidates. Entries without title or link are skipped.

        Raises:
            FeedError: the document has no entries and could not be parsed
        """
        parsed = feedparser.parse(content)
        if parsed.bozo and not parsed.entries:
            raise FeedError(f"could not be parsed: {parsed.get('bozo_exception')}")

        items = []
        for entry in parsed.entries[:self.items_per_feed]:
            title = self.clean_text(entry.get('title', ''))
            link = (entry.get('link') or '').strip()
            if not title or not link:
                continue

            snippet = self.clean_text(entry.get('summary') or entry.get('description') or '')
            items.append(RawCandidate(
                title=title,
                url=link,
                source_name=feed.source_name,
                published_at=self._parse_date(entry),
                snippet=self.truncate_text(snippet, 500) or None,
                metadata={"feed_category": feed.category} if feed.category else {},
            ))

        self._logger.debug(f"Feed {feed.source_name}: parsed {len(items)} items")
        return items

    def _parse_date(self, entry) -> Optional[datetime]:
        """Publication date from an entry, or None when it has no usable date."""
        for key in ('published_parsed', 'updated_parsed'):
            value = entry.get(key)
            if value:
                try:
                    return datetime(*value[:6], tzinfo=timezone.utc)
                except (TypeError, ValueError):
                    continue
        return None

    async def collect_feeds(self) -> FeedBatch:
        """Fetch all feeds in parallel, recording which ones failed."""
        self._logger.info(f"Fetching {len(self.feeds)} RSS feeds")
        batch = FeedBatch()

        async with aiohttp.ClientSession(headers={"User-Agent": USER_AGENT}) as session:
            tasks = [self._fetch_feed(session, feed) for feed in self.feeds]
            results = await asyncio.gather(*tasks, return_exceptions=True)

        for feed, result in zip(self.feeds, results):
            if isinstance(result, asyncio.TimeoutError):
                self._logger.warning(
                    f"Feed {feed.source_name} timed out after {self.timeout_seconds}s"
                )
                batch.failed_feeds.append(feed.source_name)
            elif isinstance(result, (FeedError, aiohttp.ClientError)):
                self._logger.warning(f"Feed {feed.source_name} error: {type(result).__name__}: {result}")
                batch.failed_feeds.append(feed.source_name)
            elif isinstance(result, Exception):
                self._logger.error(f"Feed {feed.source_name} failed: {result}")
                batch.failed_feeds.append(feed.source_name)
            else:
                batch.items.extend(result)

        self._logger.info(
            f"RSS collection complete: {len(batch.items)} items from {len(self.feeds)} feeds "
            f"({len(batch.failed_feeds)} failed)"
        )
        return batch

    async def collect(self) -> List[RawCandidate]:
        batch = await self.collect_feeds()
        if self.feeds and len(batch.failed_feeds) == len(self.feeds):
            raise FeedCollectionError(f"all {len(self.feeds)} feeds failed")
        return batch.items
