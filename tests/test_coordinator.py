import json
import unittest
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest import mock

from app.services.analysis.analyzer import AnalysisQuotaError, AnalysisResult, ArticleAnalyzer
from app.services.collectors.base import FetchOutcome, ScoredCandidate
from app.services.ingestion.coordinator import IngestionCoordinator, IngestionSummary
from app.services.ingestion.store import StoreReadError, StoreWriteError
from app.services.processing.validator import CandidateValidator


def candidate(url, title=None, score=3):
    return ScoredCandidate(
        title=title or f"Headline about {url} and new AI systems",
        url=url,
        source_name="Test",
        published_at=datetime(2025, 3, 10, tzinfo=timezone.utc),
        score=score,
    )


class FakeSource:
    def __init__(self, name, candidates=None, error=None, raises=None):
        self.name = name
        self._candidates = candidates or []
        self._error = error
        self._raises = raises

    async def fetch(self):
        if self._raises:
            raise self._raises
        if self._error:
            return FetchOutcome.failed(self.name, self._error)
        return FetchOutcome(source=self.name, candidates=list(self._candidates), fetched=len(self._candidates))


class FakeStore:
    def __init__(self, existing=(), read_error=None, failing_urls=()):
        self.existing = list(existing)
        self.read_error = read_error
        self.failing_urls = set(failing_urls)
        self.inserted = []
        self.list_calls = 0

    async def list_urls(self):
        self.list_calls += 1
        if self.read_error:
            raise self.read_error
        return self.existing

    async def insert_draft(self, draft):
        if draft.normalized_url in self.failing_urls:
            raise StoreWriteError("constraint violated")
        self.inserted.append(draft)
        return str(len(self.inserted))


class FakeAnalyzer:
    def __init__(self, results=None):
        self.results = results or {}
        self.calls = []

    async def analyze(self, title, snippet=None):
        self.calls.append(title)
        result = self.results.get(title, AnalysisResult(summary="Summary.", hype_score=4, category="Research"))
        if isinstance(result, Exception):
            raise result
        return result


def client_returning(content=None, error=None):
    create = mock.AsyncMock()
    if error is not None:
        create.side_effect = error
    else:
        create.return_value = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
        )
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


class TestIngestionCoordinator(unittest.IsolatedAsyncioTestCase):
    async def test_end_to_end_dedupes_and_stores(self):
        a = [candidate("https://a.com/1"), candidate("https://a.com/2")]
        b = [candidate("https://a.com/1?utm=feed"), candidate("https://b.com/3")]
        store = FakeStore(existing=["https://b.com/3/"])
        analyzer = FakeAnalyzer()
        coordinator = IngestionCoordinator([FakeSource("A", a), FakeSource("B", b)], store, analyzer)

        summary = await coordinator.run_ingestion()

        self.assertEqual(summary.total_candidates, 4)
        self.assertEqual(summary.unique_candidates, 2)
        self.assertEqual(summary.processed_count, 2)
        self.assertEqual(summary.error_count, 0)
        self.assertEqual(store.list_calls, 1)
        self.assertEqual([d.normalized_url for d in store.inserted], ["https://a.com/1", "https://a.com/2"])

        draft = store.inserted[0]
        self.assertEqual(draft.moderation_status, "pending")
        self.assertFalse(draft.is_published)
        self.assertTrue(draft.ai_summary)
        self.assertEqual(draft.hype_score, 4)
        self.assertEqual(draft.metadata["relevance_score"], 3)

    async def test_store_read_failure_fails_closed(self):
        store = FakeStore(read_error=StoreReadError("connection refused"))
        analyzer = FakeAnalyzer()
        coordinator = IngestionCoordinator([FakeSource("A", [candidate("https://a.com/1")])], store, analyzer)

        summary = await coordinator.run_ingestion()

        self.assertEqual(summary.processed_count, 0)
        self.assertEqual(summary.error_count, 0)
        self.assertIsNotNone(summary.error)
        self.assertEqual(analyzer.calls, [])
        self.assertEqual(store.inserted, [])
        body = summary.to_response()
        self.assertEqual(body["processedCount"], 0)
        self.assertIn("error", body)

    async def test_unexpected_read_error_also_fails_closed(self):
        store = FakeStore(read_error=RuntimeError("driver bug"))
        summary = await IngestionCoordinator([FakeSource("A")], store, FakeAnalyzer()).run_ingestion()
        self.assertIsNotNone(summary.error)

    async def test_empty_summary_is_a_silent_skip(self):
        item = candidate("https://a.com/1")
        analyzer = ArticleAnalyzer(client=client_returning(json.dumps({"summary": "", "hype_score": 3})))
        store = FakeStore()
        coordinator = IngestionCoordinator([FakeSource("A", [item])], store, analyzer)

        summary = await coordinator.run_ingestion()

        self.assertEqual(summary.processed_count, 0)
        self.assertEqual(summary.error_count, 0)
        self.assertEqual(summary.skipped_count, 1)
        self.assertEqual(store.inserted, [])

    async def test_quota_error_still_stores_with_defaults(self):
        item = candidate("https://a.com/1", title="Frontier lab announces new model family")
        analyzer = ArticleAnalyzer(client=client_returning(error=AnalysisQuotaError()))
        store = FakeStore()
        coordinator = IngestionCoordinator([FakeSource("A", [item])], store, analyzer)

        summary = await coordinator.run_ingestion()

        self.assertEqual(summary.processed_count, 1)
        draft = store.inserted[0]
        self.assertEqual(draft.hype_score, 3)
        self.assertEqual(draft.summary, "Frontier lab announces new model family")
        self.assertEqual(draft.category, "Other")
        self.assertFalse(draft.ai_summary)

    async def test_insert_failure_is_counted_and_run_continues(self):
        items = [candidate("https://a.com/1"), candidate("https://a.com/2"), candidate("https://a.com/3")]
        store = FakeStore(failing_urls={"https://a.com/2"})
        coordinator = IngestionCoordinator([FakeSource("A", items)], store, FakeAnalyzer())

        summary = await coordinator.run_ingestion()

        self.assertEqual(summary.processed_count, 2)
        self.assertEqual(summary.error_count, 1)

    async def test_analyzer_exception_is_a_skip(self):
        item = candidate("https://a.com/1", title="Broken analysis headline for testing")
        analyzer = FakeAnalyzer({item.title: RuntimeError("bug")})
        summary = await IngestionCoordinator([FakeSource("A", [item])], FakeStore(), analyzer).run_ingestion()
        self.assertEqual(summary.skipped_count, 1)
        self.assertEqual(summary.error_count, 0)

    async def test_failed_sources_do_not_block_others(self):
        sources = [
            FakeSource("Down", error="HTTP 500"),
            FakeSource("Raises", raises=RuntimeError("unexpected")),
            FakeSource("Up", [candidate("https://a.com/1")]),
        ]
        summary = await IngestionCoordinator(sources, FakeStore(), FakeAnalyzer()).run_ingestion()

        self.assertEqual(summary.processed_count, 1)
        self.assertEqual(summary.failed_sources, ["Down", "Raises"])

    async def test_volume_cap_applies_before_dedupe(self):
        items = [candidate(f"https://a.com/{i}") for i in range(5)]
        store = FakeStore(existing=["https://a.com/0"])
        analyzer = FakeAnalyzer()
        coordinator = IngestionCoordinator([FakeSource("A", items)], store, analyzer, max_candidates=3)

        summary = await coordinator.run_ingestion()

        self.assertEqual(summary.total_candidates, 5)
        self.assertEqual(summary.to_response()["totalArticles"], 5)
        self.assertEqual(summary.unique_candidates, 2)
        self.assertEqual(len(analyzer.calls), 2)

    async def test_curation_rules_filter_before_analysis(self):
        items = [candidate("https://a.com/1", title="Short"), candidate("https://a.com/2")]
        analyzer = FakeAnalyzer()
        coordinator = IngestionCoordinator(
            [FakeSource("A", items)], FakeStore(), analyzer, validator=CandidateValidator()
        )

        summary = await coordinator.run_ingestion()

        self.assertEqual(summary.filtered_count, 1)
        self.assertEqual(summary.processed_count, 1)
        self.assertNotIn("Short", analyzer.calls)

    async def test_no_sources(self):
        summary = await IngestionCoordinator([], FakeStore(), FakeAnalyzer()).run_ingestion()
        self.assertEqual(summary.total_candidates, 0)
        self.assertEqual(summary.processed_count, 0)


class TestIngestionSummary(unittest.TestCase):
    def test_response_keys(self):
        body = IngestionSummary(processed_count=2, error_count=1, total_candidates=5, unique_candidates=3).to_response()
        self.assertEqual(body["message"], "Hybrid article ingestion complete")
        self.assertEqual(body["processedCount"], 2)
        self.assertEqual(body["errorCount"], 1)
        self.assertEqual(body["totalArticles"], 5)
        self.assertEqual(body["uniqueArticles"], 3)
        self.assertNotIn("error", body)


if __name__ == "__main__":
    unittest.main()
