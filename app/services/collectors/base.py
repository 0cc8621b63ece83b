"""
Base collector class and candidate data structures.

Every source adapter inherits from BaseCollector and implements collect().
BaseCollector.fetch() wraps collect() so that a failing source yields a
failed FetchOutcome instead of an exception, then applies the recency window
and the relevance floor before anything reaches the ingestion coordinator.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
from datetime import datetime, timedelta, timezone
import re
import time
import logging

from app.services.processing.scorer import RelevanceScorer

logger = logging.getLogger(__name__)

DEFAULT_RECENCY_DAYS = 7
DEFAULT_RELEVANCE_FLOOR = 2


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RawCandidate:
    """An item proposed for ingestion. Lives only for one pipeline run."""
    title: str
    url: str
    source_name: str
    published_at: Optional[datetime] = None
    snippet: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def score_text(self) -> str:
        return f"{self.title} {self.snippet or ''}"


@dataclass
class ScoredCandidate(RawCandidate):
    """RawCandidate plus its keyword relevance score (1-5)."""
    score: int = 1


@dataclass
class FetchOutcome:
    """
    Tagged result of one source fetch.

    Exactly one of (candidates, error) is meaningful: a failed source carries
    an error string and no candidates.
    """
    source: str
    candidates: List[ScoredCandidate] = field(default_factory=list)
    error: Optional[str] = None
    fetched: int = 0
    dropped_stale: int = 0
    dropped_low_score: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, source: str, reason: str) -> "FetchOutcome":
        return cls(source=source, error=reason)


class BaseCollector(ABC):
    """
    Abstract base class for all candidate sources.

    Subclasses must implement:
    - collect() -> List[RawCandidate]: fetch raw items; may raise
    - name (property) -> str: human-readable source name
    """

    def __init__(
        self,
        scorer: Optional[RelevanceScorer] = None,
        recency_days: int = DEFAULT_RECENCY_DAYS,
        relevance_floor: int = DEFAULT_RELEVANCE_FLOOR,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._logger = logging.getLogger(f"collectors.{self.__class__.__name__}")
        self.scorer = scorer or RelevanceScorer()
        self.recency_days = recency_days
        self.relevance_floor = relevance_floor
        self._clock = clock
        self.last_run: Optional[datetime] = None
        self.last_run_items: int = 0
        self.error_count: int = 0
        self.consecutive_failures: int = 0

    @abstractmethod
    async def collect(self) -> List[RawCandidate]:
        """Fetch raw candidates from this source."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for this collector (e.g., 'RSS Feeds')."""
        pass

    @property
    def source_type(self) -> str:
        """Source type identifier. Defaults to the class name without 'Collector'."""
        return self.__class__.__name__.replace("Collector", "").lower()

    def is_recent(self, published: Optional[datetime], now: Optional[datetime] = None) -> bool:
        """
        True when a publication date is inside the recency window.

        Undated items are kept. Dates after `now` are treated as invalid.
        """
        if published is None:
            return True
        if published.tzinfo is None:
            published = published.replace(tzinfo=timezone.utc)
        now = now or self._clock()
        cutoff = now - timedelta(days=self.recency_days)
        return cutoff < published <= now

    def score_and_filter(self, items: List[RawCandidate], outcome: FetchOutcome) -> List[ScoredCandidate]:
        """Apply recency window and relevance floor, recording drop counts on outcome."""
        now = self._clock()
        kept: List[ScoredCandidate] = []

        for item in items:
            if not item.title or not item.url:
                continue
            if not self.is_recent(item.published_at, now):
                outcome.dropped_stale += 1
                continue

            score = self.scorer.score(item.score_text)
            if score < self.relevance_floor:
                outcome.dropped_low_score += 1
                continue

            kept.append(ScoredCandidate(
                title=item.title,
                url=item.url,
                source_name=item.source_name,
                published_at=item.published_at,
                snippet=item.snippet,
                metadata=dict(item.metadata),
                score=score,
            ))

        return kept

    async def fetch(self) -> FetchOutcome:
        """
        Run collect() with failure isolation and pre-filtering.

        Never raises: any error from the source becomes a failed outcome.
        """
        start_time = time.time()
        self._logger.info(f"[FETCH] [{self.name}] Starting fetch")

        try:
            items = await self.collect()
        except Exception as e:
            self.error_count += 1
            self.consecutive_failures += 1
            reason = f"{type(e).__name__}: {e}"
            self._logger.warning(
                f"[FETCH] [{self.name}] FAILED after {time.time() - start_time:.2f}s: {reason}"
            )
            return FetchOutcome.failed(self.name, reason)

        outcome = FetchOutcome(source=self.name, fetched=len(items))
        outcome.candidates = self.score_and_filter(items, outcome)

        self.last_run = self._clock()
        self.last_run_items = len(outcome.candidates)
        self.consecutive_failures = 0

        self._logger.info(
            f"[FETCH] [{self.name}] Completed in {time.time() - start_time:.2f}s: "
            f"fetched={outcome.fetched}, kept={len(outcome.candidates)}, "
            f"stale={outcome.dropped_stale}, below_floor={outcome.dropped_low_score}"
        )
        return outcome

    async def fetch_candidates(self) -> List[ScoredCandidate]:
        """Candidates that survived filtering; empty when the source failed."""
        return (await self.fetch()).candidates

    def get_status(self) -> dict:
        """Return collector status for monitoring."""
        if self.consecutive_failures >= 3:
            health = "unhealthy"
        elif self.consecutive_failures >= 1:
            health = "degraded"
        else:
            health = "healthy"

        return {
            "name": self.name,
            "source_type": self.source_type,
            "last_run": self.last_run.isoformat() if self.last_run else None,
            "last_run_items": self.last_run_items,
            "error_count": self.error_count,
            "consecutive_failures": self.consecutive_failures,
            "health": health,
        }

    def truncate_text(self, text: str, max_length: int = 500) -> str:
        """Truncate text to max_length, preserving word boundaries."""
        if not text or len(text) <= max_length:
            return text or ""
        truncated = text[:max_length].rsplit(" ", 1)[0]
        return truncated + "..."

    def clean_text(self, text: str) -> str:
        """Remove HTML tags and collapse whitespace."""
        if not text:
            return ""
        text = re.sub(r'<[^>]+>', '', text)
        text = re.sub(r'\s+', ' ', text)
        return text.strip()
