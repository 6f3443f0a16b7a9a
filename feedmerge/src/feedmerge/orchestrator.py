import concurrent.futures
import logging
from typing import Callable, List, Optional, Sequence

from .fallback import create_example_data
from .models.feed import FeedResult, RawFeed
from .models.source import SourceConfig
from .normalize import error_result, normalize_feed
from .providers.rss import fetch_feed

logger = logging.getLogger(__name__)

Fetcher = Callable[..., RawFeed]


def fetch_source(source: SourceConfig, fetcher: Fetcher = fetch_feed, timeout: float = 10) -> FeedResult:
    """Fetch and normalize a single source. Exceptions propagate to the caller."""
    logger.info(f"Fetching feed: {source.name} ({source.url})")
    raw = fetcher(source.url, timeout=timeout)
    result = normalize_feed(raw, source)
    logger.info(f"Fetched {len(result.items)} items from {source.name}")
    return result


def fetch_all_feeds(
    sources: Sequence[SourceConfig],
    fetcher: Fetcher = fetch_feed,
    *,
    max_workers: int = 4,
    timeout: float = 10,
    now=None,
) -> List[FeedResult]:
    """
    Fetch every enabled source concurrently and return one FeedResult per
    enabled source, in registry order. A failing source yields an empty
    error result instead of aborting the others. With no enabled source the
    example dataset is returned.
    """
    logger.info("Starting RSS feed fetch...")
    enabled = [s for s in sources if s.enabled]

    if not enabled:
        logger.info("No valid RSS feed URLs provided. Using example data.")
        return create_example_data(now)

    skipped = len(sources) - len(enabled)
    if skipped:
        logger.info(f"Skipping {skipped} disabled sources")

    results: List[Optional[FeedResult]] = [None] * len(enabled)
    workers = max(1, min(max_workers, len(enabled)))

    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(fetch_source, source, fetcher, timeout): index
            for index, source in enumerate(enabled)
        }
        # Wait for every task; one failure must not cancel the rest
        for fut in concurrent.futures.as_completed(futures):
            index = futures[fut]
            source = enabled[index]
            try:
                results[index] = fut.result()
            except Exception as e:
                message = getattr(e, "message", None) or str(e) or e.__class__.__name__
                logger.error(f"Error fetching feed {source.name}: {message}")
                results[index] = error_result(source, message)

    return results
