import datetime
import logging
import re
from typing import List, Optional

from .dates import effective_timestamp
from .models.feed import CanonicalItem, FeedInfo, FeedResult, RawFeed, RawItem
from .models.source import SourceConfig

logger = logging.getLogger(__name__)

# Inline CSS such as ".note p { color: red; }" leaking into feed snippets
_SELECTOR = (
    r"(?:[.#@][\w-]+|\b(?:html|body|div|span|p|a|img|table|t[dhr]|[ou]l|li|h[1-6]"
    r"|figure|figcaption|section|article|blockquote)\b)[\w.#:()\[\]=\"'-]*"
)
_STYLE_BLOCK_RE = re.compile(rf"{_SELECTOR}(?:(?:\s*[,>+~]\s*|\s+){_SELECTOR})*\s*\{{[^{{}}]*\}}")
_WHITESPACE_RE = re.compile(r"\s+")

TRUNCATE_THRESHOLD = 100
TRUNCATE_LENGTH = 297
ELLIPSIS = "..."


def clean_description(text: Optional[str]) -> str:
    """Strip style blocks, collapse whitespace, cut long text to 297 chars + '...'."""
    text = _STYLE_BLOCK_RE.sub(" ", text or "")
    text = _WHITESPACE_RE.sub(" ", text).strip()
    if len(text) > TRUNCATE_THRESHOLD:
        text = text[:TRUNCATE_LENGTH] + ELLIPSIS
    return text


def clean_title(title: Optional[str], suffix: Optional[str]) -> Optional[str]:
    if title and suffix and title.endswith(suffix):
        return title[: -len(suffix)]
    return title


def normalize_item(item: RawItem, source: SourceConfig, feed_title: Optional[str]) -> CanonicalItem:
    rule = source.link_rewrite
    link = rule.apply(item.link) if rule else item.link
    guid = rule.apply(item.guid) if rule else item.guid

    return CanonicalItem(
        title=clean_title(item.title, source.title_suffix),
        link=link,
        description=clean_description(item.content_snippet or item.content),
        pubDate=item.pub_date,
        isoDate=item.iso_date,
        author=item.author or item.creator or "Unknown",
        guid=guid or link,
        category=item.category or source.category,
        source=source.name,
        feedTitle=feed_title,
    )


def feed_info_for(raw: RawFeed, source: SourceConfig) -> FeedInfo:
    return FeedInfo(
        title=raw.title,
        description=raw.description,
        link=raw.link,
        category=source.category,
        name=source.name,
        minDate=source.min_date,
    )


def normalize_feed(raw: RawFeed, source: SourceConfig) -> FeedResult:
    """
    Convert one fetched feed into a FeedResult for its source.
    Items dated before source.min_date are dropped.
    """
    items: List[CanonicalItem] = [normalize_item(i, source, raw.title) for i in raw.items]

    if source.min_date is not None:
        cutoff = source.min_date
        if cutoff.tzinfo is None:
            cutoff = cutoff.replace(tzinfo=datetime.timezone.utc)
        kept = [i for i in items if effective_timestamp(i) >= cutoff]
        dropped = len(items) - len(kept)
        if dropped:
            logger.info(f"{source.name}: dropped {dropped} items older than {cutoff.isoformat()}")
        items = kept

    return FeedResult(feedInfo=feed_info_for(raw, source), items=items)


def error_result(source: SourceConfig, error: Optional[str] = None) -> FeedResult:
    """Empty FeedResult standing in for a source that failed this run."""
    return FeedResult(
        feedInfo=FeedInfo(
            title=f"Error: {source.name}",
            description="Failed to fetch feed",
            link=source.url,
            category=source.category,
            name=source.name,
            minDate=source.min_date,
            error=error,
        ),
        items=[],
    )
