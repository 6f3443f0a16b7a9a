import datetime
import time
import unittest
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "feedmerge" / "src"
sys.path.insert(0, str(SRC))

from feedmerge.errors import FetchError
from feedmerge.merge import merge_feeds
from feedmerge.models.feed import RawFeed, RawItem
from feedmerge.models.source import SourceConfig
from feedmerge.orchestrator import fetch_all_feeds


NOW = datetime.datetime(2025, 6, 1, tzinfo=datetime.timezone.utc)


def _raw(title: str, count: int) -> RawFeed:
    return RawFeed(
        title=title,
        items=[
            RawItem(
                title=f"{title} {n}",
                link=f"https://{title.lower()}.example.net/{n}",
                isoDate=f"2025-05-{n + 1:02d}T00:00:00.000Z",
            )
            for n in range(count)
        ],
    )


class StubFetcher:
    """Maps URL -> RawFeed or exception; records calls."""

    def __init__(self, responses, delays=None):
        self.responses = responses
        self.delays = delays or {}
        self.calls = []

    def __call__(self, url, timeout=10):
        self.calls.append((url, timeout))
        time.sleep(self.delays.get(url, 0))
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response


class TestFetchAllFeeds(unittest.TestCase):
    def test_no_enabled_sources_uses_example_data(self):
        sources = [
            SourceConfig(url=None, name="Feed 1", category="Blog"),
            SourceConfig(url="https://example.com/feed1.xml", name="Feed 2", category="News"),
            SourceConfig(url="https://example.com/feed2.xml", name="Feed 3", category="News"),
            SourceConfig(url="   ", name="Feed 4", category="News"),
        ]
        fetcher = StubFetcher({})
        results = fetch_all_feeds(sources, fetcher, now=NOW)

        self.assertEqual(fetcher.calls, [])
        self.assertEqual(len(results), 1)
        self.assertEqual(results[0].feed_info.title, "Example Feed")
        self.assertEqual(len(results[0].items), 3)

    def test_one_failure_does_not_abort_others(self):
        sources = [
            SourceConfig(url="https://bad.example.net/rss", name="Bad", category="News"),
            SourceConfig(url="https://good.example.net/rss", name="Good", category="Blog"),
        ]
        fetcher = StubFetcher({
            "https://bad.example.net/rss": FetchError("Feed fetch failed: 500", url="https://bad.example.net/rss"),
            "https://good.example.net/rss": _raw("Good", 4),
        })
        results = fetch_all_feeds(sources, fetcher, timeout=3)
        merged = merge_feeds(results, max_items=10, now=NOW)

        self.assertEqual(len(merged.items), 4)
        self.assertEqual(len(merged.meta.sources), 2)
        self.assertEqual(merged.meta.sources[0].title, "Error: Bad")
        self.assertEqual(merged.meta.sources[0].error, "Feed fetch failed: 500")
        self.assertEqual(merged.meta.sources[1].title, "Good")
        self.assertTrue(all(timeout == 3 for _, timeout in fetcher.calls))

    def test_unexpected_exceptions_are_contained(self):
        sources = [SourceConfig(url="https://boom.example.net/rss", name="Boom")]
        fetcher = StubFetcher({"https://boom.example.net/rss": RuntimeError("kaboom")})
        results = fetch_all_feeds(sources, fetcher)

        self.assertEqual(len(results), 1)
        self.assertEqual(results[0].items, [])
        self.assertEqual(results[0].feed_info.title, "Error: Boom")
        self.assertEqual(results[0].feed_info.error, "kaboom")

    def test_results_keep_registry_order(self):
        sources = [
            SourceConfig(url="https://slow.example.net/rss", name="Slow"),
            SourceConfig(url=None, name="Disabled"),
            SourceConfig(url="https://fast.example.net/rss", name="Fast"),
        ]
        fetcher = StubFetcher(
            {
                "https://slow.example.net/rss": _raw("Slow", 1),
                "https://fast.example.net/rss": _raw("Fast", 2),
            },
            delays={"https://slow.example.net/rss": 0.2},
        )
        results = fetch_all_feeds(sources, fetcher, max_workers=2)

        self.assertEqual([r.feed_info.name for r in results], ["Slow", "Fast"])
        self.assertEqual([len(r.items) for r in results], [1, 2])
        self.assertEqual(results[0].items[0].source, "Slow")


if __name__ == "__main__":
    unittest.main()
