import logging
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from .config import Settings
from .dates import to_iso
from .export import json_export, rss_export
from .export.paths import get_output_dir
from .merge import merge_feeds
from .models.source import SourceConfig
from .orchestrator import Fetcher, fetch_all_feeds
from .providers.rss import fetch_feed

logger = logging.getLogger(__name__)


def run_update(
    settings: Settings,
    sources: Sequence[SourceConfig],
    *,
    fetcher: Optional[Fetcher] = None,
    max_workers: int = 4,
    write_xml: bool = True,
) -> Dict[str, Any]:
    """
    One full run: fetch, merge, write feed.json (and feed.xml).
    Write failures propagate; the JSON file is written first.
    """
    out_dir = get_output_dir(settings.output_dir)

    feed_results = fetch_all_feeds(
        sources,
        fetcher or fetch_feed,
        max_workers=max_workers,
        timeout=settings.timeout,
    )
    merged = merge_feeds(feed_results, settings.max_items)

    json_path = json_export.export_merged_json(merged, out_dir / settings.output_file)
    logger.info(f"Total items: {merged.meta.total_items}")
    logger.info(f"Last updated: {to_iso(merged.meta.last_updated)}")

    xml_path: Optional[Path] = None
    if write_xml:
        xml_path = rss_export.export_rss(merged, out_dir / settings.xml_file)

    logger.info("Summary:")
    for info in merged.meta.sources:
        logger.info(f"  - {info.name}: {info.title}")

    return {
        "merged": merged,
        "json": str(json_path),
        "xml": str(xml_path) if xml_path else None,
    }
