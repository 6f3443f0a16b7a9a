import json
import logging
from pathlib import Path
from typing import Any, Union

from ..models.feed import MergedFeed

logger = logging.getLogger(__name__)


def export_json(data: Any, path: Path):
    """
    Export data to a pretty-printed JSON file. Key order is kept as given.
    """
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False, default=str)
        f.write("\n")


def export_merged_json(merged: MergedFeed, path: Union[str, Path]) -> Path:
    path = Path(path)
    export_json(merged.to_document(), path)
    logger.info(f"Successfully saved merged feed to {path}")
    return path


def load_merged_json(path: Union[str, Path]) -> MergedFeed:
    """Read a document written by export_merged_json back into a MergedFeed."""
    with open(path, encoding='utf-8') as f:
        return MergedFeed.model_validate(json.load(f))
