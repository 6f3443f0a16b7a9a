import datetime
from email.utils import format_datetime, parsedate_to_datetime
from typing import Any, Optional

# Effective timestamp for items without a usable date: sorts last, fails any cutoff
OLDEST = datetime.datetime.min.replace(tzinfo=datetime.timezone.utc)


def _as_utc(dt: datetime.datetime) -> datetime.datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=datetime.timezone.utc)
    return dt.astimezone(datetime.timezone.utc)


def parse_datetime(value: Any) -> Optional[datetime.datetime]:
    """Parse ISO 8601 or RFC 2822 text into an aware UTC datetime, or None."""
    # Offsets near year 1 or 9999 overflow when shifted to UTC
    if isinstance(value, datetime.datetime):
        try:
            return _as_utc(value)
        except OverflowError:
            return None
    if not isinstance(value, str) or not value.strip():
        return None
    value = value.strip()

    try:
        return _as_utc(datetime.datetime.fromisoformat(value.replace("Z", "+00:00")))
    except (ValueError, OverflowError):
        pass

    # RSS pubDate style
    try:
        return _as_utc(parsedate_to_datetime(value))
    except (TypeError, ValueError, IndexError, OverflowError):
        pass

    return None


def effective_timestamp(item: Any) -> datetime.datetime:
    """isoDate if present, else pubDate; OLDEST when neither parses."""
    raw = getattr(item, "iso_date", None) or getattr(item, "pub_date", None)
    return parse_datetime(raw) or OLDEST


def to_iso(dt: datetime.datetime) -> str:
    """UTC ISO 8601 with millisecond precision and a Z suffix."""
    dt = _as_utc(dt)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def to_rfc1123(dt: datetime.datetime) -> str:
    return format_datetime(_as_utc(dt), usegmt=True)
