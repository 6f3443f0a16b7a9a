import logging
from pathlib import Path
from typing import List, Optional, Union
from xml.sax.saxutils import escape

from ..dates import OLDEST, effective_timestamp, to_rfc1123
from ..models.feed import CanonicalItem, MergedFeed

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 500


def _text(value: Optional[str]) -> str:
    return escape(value or "")


def _cdata(value: Optional[str]) -> str:
    # "]]>" cannot appear inside a CDATA section, so split it across two
    value = (value or "").replace("]]>", "]]]]><![CDATA[>")
    return f"<![CDATA[{value}]]>"


def _preview(description: str) -> str:
    if len(description) > PREVIEW_LENGTH:
        return description[:PREVIEW_LENGTH] + "..."
    return description


def _item_lines(item: CanonicalItem) -> List[str]:
    lines = ["    <item>"]
    lines.append(f"      <title>{_cdata(item.title)}</title>")
    lines.append(f"      <link>{_text(item.link)}</link>")
    lines.append(f"      <description>{_cdata(_preview(item.description))}</description>")
    stamp = effective_timestamp(item)
    if stamp != OLDEST:
        lines.append(f"      <pubDate>{to_rfc1123(stamp)}</pubDate>")
    lines.append(f"      <guid>{_text(item.guid or item.link)}</guid>")
    lines.append(f"      <category>{_text(item.category)}</category>")
    lines.append(f"      <source>{_text(item.source)}</source>")
    lines.append("    </item>")
    return lines


def render_rss(merged: MergedFeed) -> bytes:
    """Render the merged feed as an RSS 2.0 document."""
    meta = merged.meta
    lines = []
    lines.append('<?xml version="1.0" encoding="UTF-8"?>')
    lines.append('<rss version="2.0">')
    lines.append("  <channel>")
    lines.append(f"    <title>{_text(meta.title)}</title>")
    lines.append(f"    <description>{_text(meta.description)}</description>")
    lines.append(f"    <lastBuildDate>{to_rfc1123(meta.last_updated)}</lastBuildDate>")
    lines.append(f"    <generator>{_text(meta.generated_by)}</generator>")
    for item in merged.items:
        lines.extend(_item_lines(item))
    lines.append("  </channel>")
    lines.append("</rss>")
    return ("\n".join(lines) + "\n").encode("utf-8")


def export_rss(merged: MergedFeed, path: Union[str, Path]) -> Path:
    path = Path(path)
    with open(path, "wb") as f:
        f.write(render_rss(merged))
    logger.info(f"Generated RSS XML at {path}")
    return path
