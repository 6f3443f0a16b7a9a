import datetime
import logging
from typing import List, Optional, Sequence

from .dates import effective_timestamp
from .models.feed import CanonicalItem, FeedResult, MergedFeed, MergedMeta

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Merged RSS Feed"
DEFAULT_DESCRIPTION = "Combined feed from multiple sources"
DEFAULT_GENERATOR = "GitHub Actions RSS Merger"


def rank_items(items: Sequence[CanonicalItem]) -> List[CanonicalItem]:
    """Newest first; items with equal timestamps keep their input order."""
    # sorted() is stable with reverse=True as well
    return sorted(items, key=effective_timestamp, reverse=True)


def merge_feeds(
    feed_results: Sequence[FeedResult],
    max_items: int = 10,
    *,
    now: Optional[datetime.datetime] = None,
    title: str = DEFAULT_TITLE,
    description: str = DEFAULT_DESCRIPTION,
    generated_by: str = DEFAULT_GENERATOR,
) -> MergedFeed:
    """
    Concatenate all sources' items, rank them and keep the newest max_items.
    Every source's feedInfo is listed in meta.sources, failed ones included.
    """
    all_items: List[CanonicalItem] = []
    sources = []
    for result in feed_results:
        sources.append(result.feed_info)
        all_items.extend(result.items)

    limited = rank_items(all_items)[:max(0, max_items)]
    logger.info(f"Merged {len(all_items)} items from {len(sources)} sources, keeping {len(limited)}")

    return MergedFeed(
        meta=MergedMeta(
            title=title,
            description=description,
            lastUpdated=now or datetime.datetime.now(datetime.timezone.utc),
            totalItems=len(limited),
            sources=sources,
            generatedBy=generated_by,
        ),
        items=limited,
    )
