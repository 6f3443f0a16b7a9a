import unittest
from unittest.mock import MagicMock, patch
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "feedmerge" / "src"
sys.path.insert(0, str(SRC))

import requests

from feedmerge.errors import FetchError
from feedmerge.providers.rss import fetch_feed, parse_feed_document


RSS_FEED = b"""<?xml version="1.0"?>
<rss version="2.0" xmlns:dc="http://purl.org/dc/elements/1.1/">
    <channel>
        <title>Test Blog</title>
        <description>Posts about testing</description>
        <link>https://example.com</link>
        <item>
            <title>First Post</title>
            <link>https://example.com/post1</link>
            <description>&lt;p&gt;Hello &lt;b&gt;world&lt;/b&gt;&lt;/p&gt;</description>
            <pubDate>Mon, 01 Jan 2024 12:00:00 GMT</pubDate>
            <guid>https://example.com/post1</guid>
            <category>Testing</category>
            <dc:creator>Jane Doe</dc:creator>
        </item>
        <item>
            <title>Second Post</title>
            <link>https://example.com/post2</link>
        </item>
    </channel>
</rss>
"""


class TestParseFeedDocument(unittest.TestCase):
    def test_parse_rss_feed(self):
        feed = parse_feed_document(RSS_FEED)

        self.assertEqual(feed.title, "Test Blog")
        self.assertEqual(feed.description, "Posts about testing")
        self.assertEqual(len(feed.items), 2)

        first = feed.items[0]
        self.assertEqual(first.title, "First Post")
        self.assertEqual(first.link, "https://example.com/post1")
        self.assertEqual(first.content_snippet, "Hello world")
        self.assertEqual(first.pub_date, "Mon, 01 Jan 2024 12:00:00 GMT")
        self.assertEqual(first.iso_date, "2024-01-01T12:00:00.000Z")
        self.assertEqual(first.guid, "https://example.com/post1")
        self.assertEqual(first.category, "Testing")
        self.assertEqual(first.author, "Jane Doe")

        second = feed.items[1]
        self.assertIsNone(second.pub_date)
        self.assertIsNone(second.iso_date)
        self.assertIsNone(second.content_snippet)

    def test_parse_atom_feed(self):
        atom = b"""<?xml version="1.0"?>
        <feed xmlns="http://www.w3.org/2005/Atom">
            <title>Atom Blog</title>
            <entry>
                <title>Atom Post</title>
                <link href="https://example.com/atom-post"/>
                <id>urn:uuid:1234</id>
                <updated>2024-01-15T10:30:00Z</updated>
            </entry>
        </feed>
        """
        feed = parse_feed_document(atom)
        self.assertEqual(feed.title, "Atom Blog")
        self.assertEqual(feed.items[0].link, "https://example.com/atom-post")
        self.assertEqual(feed.items[0].guid, "urn:uuid:1234")
        self.assertEqual(feed.items[0].iso_date, "2024-01-15T10:30:00.000Z")

    def test_garbage_raises_fetch_error(self):
        with self.assertRaises(FetchError):
            parse_feed_document(b"this is not a feed <<<")


class TestFetchFeed(unittest.TestCase):
    def test_fetch_feed_success(self):
        mock_response = MagicMock()
        mock_response.content = RSS_FEED
        mock_response.raise_for_status = MagicMock()

        with patch("feedmerge.providers.rss.requests.get", return_value=mock_response) as mock_get:
            feed = fetch_feed("https://example.com/feed.xml", timeout=5)

        self.assertEqual(len(feed.items), 2)
        _, kwargs = mock_get.call_args
        self.assertEqual(kwargs["timeout"], 5)

    def test_fetch_feed_http_error(self):
        with patch(
            "feedmerge.providers.rss.requests.get",
            side_effect=requests.ConnectionError("Connection failed"),
        ):
            with self.assertRaises(FetchError) as ctx:
                fetch_feed("https://example.com/feed.xml")

        self.assertEqual(ctx.exception.details["url"], "https://example.com/feed.xml")
        self.assertIn("Connection failed", ctx.exception.message)

    def test_fetch_feed_bad_document_carries_url(self):
        mock_response = MagicMock()
        mock_response.content = b"<html><body>nope</body>"
        mock_response.raise_for_status = MagicMock()

        with patch("feedmerge.providers.rss.requests.get", return_value=mock_response):
            with self.assertRaises(FetchError) as ctx:
                fetch_feed("https://example.com/broken.xml")

        self.assertEqual(ctx.exception.url, "https://example.com/broken.xml")


if __name__ == "__main__":
    unittest.main()
