import calendar
import datetime
import logging
from typing import Any, Optional, Union

import feedparser
import requests
from bs4 import BeautifulSoup

from ..dates import to_iso
from ..errors import FetchError
from ..models.feed import RawFeed, RawItem

logger = logging.getLogger(__name__)

USER_AGENT = "feedmerge/0.1 (RSS Feed Merger)"


def _html_to_text(html_text: Optional[str]) -> Optional[str]:
    if not html_text:
        return None
    text = BeautifulSoup(html_text, "html.parser").get_text(" ")
    return " ".join(text.split())


def _struct_to_iso(value: Any) -> Optional[str]:
    """feedparser *_parsed fields are UTC struct_time values."""
    if not value:
        return None
    try:
        ts = calendar.timegm(value)
        return to_iso(datetime.datetime.fromtimestamp(ts, tz=datetime.timezone.utc))
    except (TypeError, ValueError, OverflowError):
        return None


def _entry_content(entry: Any) -> Optional[str]:
    contents = entry.get("content") or []
    for block in contents:
        value = block.get("value")
        if value:
            return value
    return entry.get("summary") or entry.get("description")


def _entry_category(entry: Any) -> Optional[str]:
    for tag in entry.get("tags") or []:
        term = tag.get("term")
        if term:
            return term
    return entry.get("category")


def _to_raw_item(entry: Any) -> RawItem:
    content = _entry_content(entry)
    pub_date = entry.get("published") or entry.get("updated")
    iso_date = _struct_to_iso(entry.get("published_parsed") or entry.get("updated_parsed"))
    return RawItem(
        title=entry.get("title"),
        link=entry.get("link"),
        contentSnippet=_html_to_text(content),
        content=content,
        pubDate=pub_date,
        isoDate=iso_date,
        author=entry.get("author"),
        creator=entry.get("dc_creator"),
        guid=entry.get("id") or entry.get("guid"),
        category=_entry_category(entry),
    )


def parse_feed_document(text: Union[str, bytes]) -> RawFeed:
    """Parse RSS/Atom text into a RawFeed. Raises FetchError on garbage."""
    parsed = feedparser.parse(text)
    channel = parsed.feed or {}

    if parsed.bozo and not parsed.entries and not channel.get("title"):
        raise FetchError(f"Feed parsing error: {parsed.get('bozo_exception')}")

    return RawFeed(
        title=channel.get("title"),
        description=channel.get("subtitle") or channel.get("description"),
        link=channel.get("link"),
        items=[_to_raw_item(entry) for entry in parsed.entries],
    )


def fetch_feed(url: str, timeout: float = 10) -> RawFeed:
    """
    Download and parse one feed. Single attempt, no retries.
    """
    try:
        resp = requests.get(
            url,
            headers={"User-Agent": USER_AGENT},
            timeout=timeout,
        )
        resp.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Feed request failed for {url}: {e}")
        raise FetchError(f"Feed fetch failed: {e}", url=url)

    try:
        feed = parse_feed_document(resp.content)
    except FetchError as e:
        raise FetchError(e.message, url=url)

    logger.debug(f"Parsed {len(feed.items)} entries from {url}")
    return feed
