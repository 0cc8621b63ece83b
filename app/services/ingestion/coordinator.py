"""
Ingestion coordinator.

Runs one pipeline pass:
    fetch (all sources, concurrently) -> merge -> volume cap -> dedupe
    -> curation rules -> analyze (sequential) -> persist -> summary

Per-source, per-candidate and per-insert failures are recovered locally and
show up only in the summary counters. A failure to read the existing URLs
stops the run before anything is analyzed or written.
"""
import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from app.services.analysis.analyzer import AnalysisResult, ArticleAnalyzer
from app.services.collectors.base import BaseCollector, FetchOutcome, ScoredCandidate
from app.services.processing.deduplicator import dedupe_with_stats, normalize_all
from app.services.processing.urls import normalize_url
from app.services.processing.validator import CandidateValidator
from .store import Draft, HeadlineStore, StoreReadError, StoreWriteError

logger = logging.getLogger(__name__)

COMPLETED_MESSAGE = "Hybrid article ingestion complete"
FAILED_CLOSED_MESSAGE = "Ingestion skipped: existing headlines could not be read"


@dataclass
class IngestionSummary:
    """Counters for one pipeline run."""
    processed_count: int = 0
    error_count: int = 0
    total_candidates: int = 0
    unique_candidates: int = 0
    filtered_count: int = 0
    skipped_count: int = 0
    failed_sources: List[str] = field(default_factory=list)
    error: Optional[str] = None
    duration_seconds: float = 0.0

    @property
    def message(self) -> str:
        return FAILED_CLOSED_MESSAGE if self.error else COMPLETED_MESSAGE

    def to_response(self) -> dict:
        """JSON body returned to trigger callers."""
        body = {
            "message": self.message,
            "processedCount": self.processed_count,
            "errorCount": self.error_count,
            "totalArticles": self.total_candidates,
            "uniqueArticles": self.unique_candidates,
            "filteredCount": self.filtered_count,
            "skippedCount": self.skipped_count,
            "failedSources": list(self.failed_sources),
        }
        if self.error:
            body["error"] = self.error
        return body


def build_draft(candidate: ScoredCandidate, analysis: AnalysisResult) -> Draft:
    metadata = dict(candidate.metadata)
    metadata["relevance_score"] = candidate.score
    if analysis.degraded:
        metadata["analysis"] = "degraded"

    return Draft(
        title=candidate.title,
        url=candidate.url,
        normalized_url=normalize_url(candidate.url),
        source=candidate.source_name,
        summary=analysis.summary,
        hype_score=analysis.hype_score,
        category=analysis.category,
        published_at=candidate.published_at,
        snippet=candidate.snippet,
        ai_summary=not analysis.degraded,
        metadata=metadata,
    )


class IngestionCoordinator:
    """Top-level ingestion pipeline."""

    def __init__(
        self,
        collectors: Sequence[BaseCollector],
        store: HeadlineStore,
        analyzer: ArticleAnalyzer,
        max_candidates: Optional[int] = None,
        validator: Optional[CandidateValidator] = None,
    ):
        """
        Args:
            collectors: Source fetchers, run concurrently
            store: Headline persistence
            analyzer: Enrichment step; returns None for candidates to skip
            max_candidates: Volume cap applied before deduplication (None = no cap)
            validator: Optional title/URL curation rules applied after dedup
        """
        self.collectors = list(collectors)
        self.store = store
        self.analyzer = analyzer
        self.max_candidates = max_candidates
        self.validator = validator
        self._logger = logging.getLogger(f"{__name__}.IngestionCoordinator")

    async def _fetch_all(self) -> List[FetchOutcome]:
        results = await asyncio.gather(
            *(collector.fetch() for collector in self.collectors),
            return_exceptions=True,
        )

        outcomes = []
        for collector, result in zip(self.collectors, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                self._logger.error(f"[INGEST] Source {collector.name} raised: {result}")
                outcomes.append(FetchOutcome.failed(collector.name, str(result)))
            else:
                outcomes.append(result)
        return outcomes

    async def _process_candidate(self, candidate: ScoredCandidate, summary: IngestionSummary):
        try:
            analysis = await self.analyzer.analyze(candidate.title, candidate.snippet)
        except Exception as e:
            self._logger.error(f"[INGEST] Analyzer raised for {candidate.title!r}: {e}")
            analysis = None

        if analysis is None:
            summary.skipped_count += 1
            self._logger.info(f"[INGEST] Skipped (no analysis): {candidate.title!r}")
            return

        try:
            draft = build_draft(candidate, analysis)
            await self.store.insert_draft(draft)
        except StoreWriteError as e:
            summary.error_count += 1
            self._logger.error(f"[INGEST] Failed to store {candidate.url}: {e}")
            return
        except Exception as e:
            summary.error_count += 1
            self._logger.error(f"[INGEST] Unexpected insert error for {candidate.url}: {e}", exc_info=True)
            return

        summary.processed_count += 1
        self._logger.info(
            f"[INGEST] Stored: {candidate.title!r} (hype={analysis.hype_score}, category={analysis.category})"
        )

    async def run_ingestion(self) -> IngestionSummary:
        """Run the pipeline once. Never raises for pipeline-level failures."""
        start_time = time.time()
        summary = IngestionSummary()
        self._logger.info(f"[INGEST] Starting run with {len(self.collectors)} sources")

        outcomes = await self._fetch_all()
        candidates: List[ScoredCandidate] = []
        for outcome in outcomes:
            if outcome.ok:
                candidates.extend(outcome.candidates)
            else:
                summary.failed_sources.append(outcome.source)

        summary.total_candidates = len(candidates)
        if self.max_candidates is not None and len(candidates) > self.max_candidates:
            self._logger.info(
                f"[INGEST] Volume cap: keeping {self.max_candidates} of {len(candidates)} candidates"
            )
            candidates = candidates[:self.max_candidates]

        try:
            existing_urls = normalize_all(await self.store.list_urls())
        except Exception as e:
            reason = str(e) if isinstance(e, StoreReadError) else f"{type(e).__name__}: {e}"
            self._logger.error(f"[INGEST] Could not read existing URLs, failing closed: {reason}")
            summary.error = "existing headlines could not be read"
            summary.duration_seconds = time.time() - start_time
            return summary

        unique = dedupe_with_stats(candidates, existing_urls).unique
        summary.unique_candidates = len(unique)

        if self.validator is not None:
            valid = []
            for candidate in unique:
                result = self.validator.validate(candidate)
                if result.is_valid:
                    valid.append(candidate)
                else:
                    summary.filtered_count += 1
                    self._logger.info(
                        f"[INGEST] Filtered {candidate.title!r}: {'; '.join(result.issues)}"
                    )
            unique = valid

        # One enrichment call in flight at a time
        for candidate in unique:
            await self._process_candidate(candidate, summary)

        summary.duration_seconds = time.time() - start_time
        self._logger.info(
            f"[INGEST] Run complete in {summary.duration_seconds:.2f}s: "
            f"total={summary.total_candidates}, unique={summary.unique_candidates}, "
            f"filtered={summary.filtered_count}, processed={summary.processed_count}, "
            f"skipped={summary.skipped_count}, errors={summary.error_count}, "
            f"failed_sources={summary.failed_sources}"
        )
        return summary
