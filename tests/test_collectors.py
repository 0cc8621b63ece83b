import asyncio
import unittest
from datetime import datetime, timedelta, timezone
from typing import List
from unittest import mock

import aiohttp

from app.services.collectors.base import BaseCollector, FetchOutcome, RawCandidate
from app.services.collectors.config import FeedSource
from app.services.collectors.newsdata_collector import (
    NewsDataCollector,
    SearchAPIError,
    build_default_query,
    parse_pub_date,
)
from app.services.collectors.rss_collector import FeedCollectionError, FeedError, RSSCollector
from app.services.processing.keywords import KeywordCategory
from app.services.processing.scorer import RelevanceScorer, ScoringConfig

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


def fixed_clock():
    return NOW


def keyword_scorer():
    return RelevanceScorer(ScoringConfig(categories={
        "companies": KeywordCategory(weight=4, keywords=("openai", "anthropic")),
    }))


class StaticCollector(BaseCollector):
    def __init__(self, items=None, error=None, **kwargs):
        kwargs.setdefault("scorer", keyword_scorer())
        kwargs.setdefault("clock", fixed_clock)
        super().__init__(**kwargs)
        self._items = items or []
        self._error = error

    @property
    def name(self) -> str:
        return "Static"

    async def collect(self) -> List[RawCandidate]:
        if self._error:
            raise self._error
        return self._items


RSS_DOCUMENT = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Test Feed</title>
    <item>
      <title>OpenAI releases a new reasoning model</title>
      <link>https://example.com/openai-model</link>
      <description>&lt;p&gt;The   model is &lt;b&gt;faster&lt;/b&gt;.&lt;/p&gt;</description>
      <pubDate>Mon, 10 Mar 2025 08:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Entry without a link</title>
    </item>
    <item>
      <title>Undated Anthropic post</title>
      <link>https://example.com/undated</link>
    </item>
  </channel>
</rss>
"""


class TestRecencyWindow(unittest.TestCase):
    def setUp(self):
        self.collector = StaticCollector()

    def test_undated_items_are_kept(self):
        self.assertTrue(self.collector.is_recent(None, NOW))

    def test_inside_window(self):
        self.assertTrue(self.collector.is_recent(NOW - timedelta(days=6, hours=23), NOW))
        self.assertTrue(self.collector.is_recent(NOW, NOW))

    def test_outside_window(self):
        self.assertFalse(self.collector.is_recent(NOW - timedelta(days=7), NOW))
        self.assertFalse(self.collector.is_recent(NOW - timedelta(days=30), NOW))

    def test_future_dates_are_rejected(self):
        self.assertFalse(self.collector.is_recent(NOW + timedelta(minutes=1), NOW))

    def test_naive_dates_are_treated_as_utc(self):
        self.assertTrue(self.collector.is_recent(datetime(2025, 3, 9, 12, 0), NOW))


class TestBaseCollectorFetch(unittest.IsolatedAsyncioTestCase):
    async def test_failure_becomes_failed_outcome(self):
        collector = StaticCollector(error=RuntimeError("feed exploded"))
        outcome = await collector.fetch()
        self.assertFalse(outcome.ok)
        self.assertEqual(outcome.candidates, [])
        self.assertIn("feed exploded", outcome.error)
        self.assertEqual(collector.get_status()["health"], "degraded")

    async def test_filters_stale_and_low_relevance(self):
        items = [
            RawCandidate("OpenAI ships agents", "https://e.com/1", "S", NOW - timedelta(hours=1)),
            RawCandidate("OpenAI old news", "https://e.com/2", "S", NOW - timedelta(days=8)),
            RawCandidate("Gardening tips", "https://e.com/3", "S", NOW - timedelta(hours=1)),
            RawCandidate("Anthropic undated", "https://e.com/4", "S"),
        ]
        collector = StaticCollector(items=items)
        outcome = await collector.fetch()

        self.assertTrue(outcome.ok)
        self.assertEqual([c.url for c in outcome.candidates], ["https://e.com/1", "https://e.com/4"])
        self.assertEqual(outcome.fetched, 4)
        self.assertEqual(outcome.dropped_stale, 1)
        self.assertEqual(outcome.dropped_low_score, 1)
        self.assertTrue(all(c.score >= 2 for c in outcome.candidates))

    async def test_fetch_candidates_is_empty_on_failure(self):
        collector = StaticCollector(error=ValueError("bad"))
        self.assertEqual(await collector.fetch_candidates(), [])

    def test_failed_outcome_shape(self):
        outcome = FetchOutcome.failed("X", "boom")
        self.assertFalse(outcome.ok)
        self.assertEqual(outcome.candidates, [])


class TestRSSCollector(unittest.TestCase):
    def setUp(self):
        self.feed = FeedSource("Test Feed", "https://example.com/rss", "AI")
        self.collector = RSSCollector(feeds=[self.feed], scorer=keyword_scorer(), clock=fixed_clock)

    def test_parse_feed(self):
        items = self.collector.parse_feed(RSS_DOCUMENT, self.feed)

        self.assertEqual(len(items), 2)
        first = items[0]
        self.assertEqual(first.title, "OpenAI releases a new reasoning model")
        self.assertEqual(first.url, "https://example.com/openai-model")
        self.assertEqual(first.source_name, "Test Feed")
        self.assertEqual(first.snippet, "The model is faster.")
        self.assertEqual(first.published_at, datetime(2025, 3, 10, 8, 0, tzinfo=timezone.utc))
        self.assertEqual(first.metadata, {"feed_category": "AI"})
        self.assertIsNone(items[1].published_at)

    def test_items_per_feed_limit(self):
        collector = RSSCollector(feeds=[self.feed], items_per_feed=1, clock=fixed_clock)
        self.assertEqual(len(collector.parse_feed(RSS_DOCUMENT, self.feed)), 1)

    def test_unparseable_feed_raises(self):
        with self.assertRaises(FeedError):
            self.collector.parse_feed("this is not xml at all <<<", self.feed)


class TestRSSCollectorIsolation(unittest.IsolatedAsyncioTestCase):
    async def test_one_failing_feed_does_not_block_others(self):
        good = FeedSource("Good", "https://good.example/rss")
        bad = FeedSource("Bad", "https://bad.example/rss")
        collector = RSSCollector(feeds=[good, bad], scorer=keyword_scorer(), clock=fixed_clock)

        async def fake_fetch(session, feed):
            if feed is bad:
                raise RuntimeError("unexpected")
            return collector.parse_feed(RSS_DOCUMENT, feed)

        with mock.patch.object(collector, "_fetch_feed", side_effect=fake_fetch):
            batch = await collector.collect_feeds()

        self.assertEqual(len(batch.items), 2)
        self.assertEqual(batch.failed_feeds, ["Bad"])

    async def test_every_feed_failing_fails_the_source(self):
        feeds = [FeedSource("Down", "http://127.0.0.1:1/feed"), FeedSource("Gone", "https://gone.example/rss")]
        collector = RSSCollector(feeds=feeds, scorer=keyword_scorer(), clock=fixed_clock)

        async def fake_fetch(session, feed):
            if feed.source_name == "Down":
                raise aiohttp.ClientConnectionError("refused")
            raise FeedError("HTTP 404")

        with mock.patch.object(collector, "_fetch_feed", side_effect=fake_fetch):
            with self.assertRaises(FeedCollectionError):
                await collector.collect()
            outcome = await collector.fetch()

        self.assertFalse(outcome.ok)
        self.assertIn("FeedCollectionError", outcome.error)
        self.assertEqual(collector.consecutive_failures, 1)
        self.assertEqual(collector.get_status()["health"], "degraded")

    async def test_empty_feed_list_is_not_a_failure(self):
        collector = RSSCollector(feeds=[], scorer=keyword_scorer(), clock=fixed_clock)
        outcome = await collector.fetch()
        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.candidates, [])


class FakeResponse:
    def __init__(self, status, payload=None):
        self.status = status
        self._payload = payload

    async def json(self, content_type=None):
        return self._payload

    async def text(self):
        return "error body"

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        return False


class FakeSession:
    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append(params)
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class TestNewsDataCollector(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.sleeps = []

        async def fake_sleep(seconds):
            self.sleeps.append(seconds)

        self.collector = NewsDataCollector(
            api_key="key",
            scorer=keyword_scorer(),
            clock=fixed_clock,
            sleep=fake_sleep,
        )

    async def test_retries_with_exponential_backoff(self):
        payload = {"results": []}
        session = FakeSession([
            FakeResponse(500),
            aiohttp.ClientConnectionError("reset"),
            FakeResponse(200, payload),
        ])
        result = await self.collector._request(session)
        self.assertEqual(result, payload)
        self.assertEqual(self.sleeps, [1.0, 2.0])
        self.assertEqual(len(session.calls), 3)

    async def test_gives_up_after_max_attempts(self):
        session = FakeSession([FakeResponse(503), FakeResponse(503), asyncio.TimeoutError()])
        with self.assertRaises(SearchAPIError):
            await self.collector._request(session)
        self.assertEqual(self.sleeps, [1.0, 2.0])

    async def test_missing_api_key_fails_the_source_only(self):
        collector = NewsDataCollector(api_key=None, clock=fixed_clock)
        outcome = await collector.fetch()
        self.assertFalse(outcome.ok)
        self.assertIn("NEWSDATA_API_KEY", outcome.error)

    def test_params_include_window_start(self):
        params = self.collector._params()
        self.assertEqual(params["from_date"], "2025-03-03")
        self.assertEqual(params["apikey"], "key")
        self.assertEqual(params["language"], "en")

    def test_parse_results(self):
        payload = {
            "status": "success",
            "results": [
                {
                    "title": "Anthropic raises new round",
                    "link": "https://news.example/anthropic",
                    "description": "<p>Funding news</p>",
                    "pubDate": "2025-03-09 10:30:00",
                    "source_id": "technews",
                    "category": ["technology"],
                },
                {"title": "No link here"},
                {"link": "https://news.example/no-title"},
                "garbage",
            ],
        }
        items = self.collector.parse_results(payload)
        self.assertEqual(len(items), 1)
        item = items[0]
        self.assertEqual(item.source_name, "technews")
        self.assertEqual(item.snippet, "Funding news")
        self.assertEqual(item.published_at, datetime(2025, 3, 9, 10, 30, tzinfo=timezone.utc))

    def test_parse_results_tolerates_bad_payloads(self):
        self.assertEqual(self.collector.parse_results(None), [])
        self.assertEqual(self.collector.parse_results({"results": None}), [])

    def test_parse_pub_date(self):
        self.assertIsNone(parse_pub_date(None))
        self.assertIsNone(parse_pub_date("yesterday"))
        self.assertEqual(
            parse_pub_date("2025-03-09T10:30:00Z"),
            datetime(2025, 3, 9, 10, 30, tzinfo=timezone.utc),
        )

    def test_default_query_joins_keywords(self):
        query = build_default_query()
        self.assertIn("OpenAI", query)
        self.assertIn(" OR ", query)


if __name__ == "__main__":
    unittest.main()
