import os
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .models.source import SourceConfig

logger = logging.getLogger(__name__)

# Built-in registry used when no sources file is given: (env var, name, category)
_ENV_SOURCES = [
    ("RSS_FEED_1", "Feed 1", "Blog"),
    ("RSS_FEED_2", "Feed 2", "News"),
]


def default_sources(env: Optional[Mapping[str, str]] = None) -> List[SourceConfig]:
    """
    Registry of the two built-in sources, with URLs from RSS_FEED_1/RSS_FEED_2.
    Unset variables leave the source disabled.
    """
    if env is None:
        env = os.environ
    return [
        SourceConfig(url=env.get(var) or None, name=name, category=category)
        for var, name, category in _ENV_SOURCES
    ]


def _build_source(entry: Any, index: int) -> SourceConfig:
    if not isinstance(entry, dict):
        raise ValidationError(f"'feeds.sources[{index}]' must be a mapping.")
    if not isinstance(entry.get("name"), str) or not entry["name"].strip():
        raise ValidationError(f"'feeds.sources[{index}].name' must be a non-empty string.")
    try:
        return SourceConfig.model_validate(entry)
    except PydanticValidationError as e:
        raise ValidationError(
            f"Invalid source '{entry['name']}'",
            details={"errors": [err["msg"] for err in e.errors()]},
        )


def load_sources(path: str = "feeds.yaml") -> List[SourceConfig]:
    """
    Load the source registry from YAML.
    Expected shape:
      feeds:
        sources:
          - name: "Example Blog"
            url: https://mirror.example.org/feed.xml
            category: Blog
            min_date: 2025-05-01T00:00:00Z
            link_rewrite: {pattern: mirror.example.org, replacement: example.org}
            title_suffix: " | Example Blog"
    """
    p = Path(path)
    if not p.exists():
        raise ValidationError(f"Sources file not found: {path}")

    try:
        data = yaml.safe_load(p.read_text()) or {}
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid sources YAML: {e}")

    if not isinstance(data, dict) or not isinstance(data.get("feeds"), dict):
        raise ValidationError("Sources file must contain a 'feeds' object.")

    entries = data["feeds"].get("sources")
    if not isinstance(entries, list) or not entries:
        raise ValidationError("'feeds.sources' must be a non-empty list.")

    sources = [_build_source(entry, i) for i, entry in enumerate(entries)]

    names = [s.name for s in sources]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ValidationError(
            "Source names must be unique.", details={"duplicates": duplicates}
        )

    logger.info(f"Loaded {len(sources)} sources from {path}")
    return sources


def describe_sources(sources: List[SourceConfig]) -> List[Dict[str, Any]]:
    """Registry listing as plain dicts for CLI output."""
    return [
        {
            **s.model_dump(mode="json", by_alias=True, exclude_none=True),
            "enabled": s.enabled,
        }
        for s in sources
    ]
