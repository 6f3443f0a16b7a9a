import os
import logging
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITEMS = 10
DEFAULT_TIMEOUT = 10.0


def load_env_file(path: str = ".env"):
    """
    Load environment variables from a .env file into os.environ.
    Does not override existing strings.
    """
    p = Path(path)
    if not p.exists():
        return

    try:
        with open(p) as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith('#'):
                    continue
                if '=' in line:
                    key, val = line.split('=', 1)
                    key = key.strip()
                    val = val.strip().strip('"').strip("'")
                    if key not in os.environ:
                        os.environ[key] = val
    except OSError as e:
        logger.warning(f"Failed to load .env: {e}")


class Settings(BaseModel):
    """
    Process-level settings, built once at startup and passed down explicitly.
    """
    model_config = ConfigDict(frozen=True)

    max_items: int = DEFAULT_MAX_ITEMS
    output_dir: str = "data"
    output_file: str = "feed.json"
    xml_file: str = "feed.xml"
    timeout: float = DEFAULT_TIMEOUT


def _int_env(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {key}={raw!r}, using {default}")
        return default
    if value < 1:
        logger.warning(f"Ignoring {key}={value} (must be >= 1), using {default}")
        return default
    return value


def _float_env(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {key}={raw!r}, using {default}")
        return default
    return value if value > 0 else default


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from environment variables (os.environ by default)."""
    if env is None:
        env = os.environ
    return Settings(
        max_items=_int_env(env, "MAX_ITEMS", DEFAULT_MAX_ITEMS),
        output_dir=env.get("FEED_OUTPUT_DIR") or "data",
        output_file=env.get("FEED_OUTPUT_FILE") or "feed.json",
        xml_file=env.get("FEED_XML_FILE") or "feed.xml",
        timeout=_float_env(env, "FEED_TIMEOUT", DEFAULT_TIMEOUT),
    )
