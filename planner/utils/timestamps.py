"""Timestamp normalization for document-store records.

Records reach the planner in several shapes depending on where they were
read: native ``datetime`` objects from the client SDK, ISO-8601 strings from
JSON payloads, ``{"seconds", "nanoseconds"}`` maps from the store itself and
``{"_seconds", "_nanoseconds"}`` maps from the serverless-call transport.
Every shape is classified first and then converted by a dedicated function.

Conversion is best-effort: nothing here raises on malformed input.
``parse_timestamp`` returns ``None``, ``to_datetime`` falls back to "now" and
``to_epoch_millis`` falls back to ``0``.

All datetimes returned are timezone-aware. Naive inputs are read as local
time, so calendar-day comparisons happen in the local timezone.
"""

from collections.abc import Mapping
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Any, Optional

from planner.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


class TimestampShape(str, Enum):
    """Known serialized timestamp shapes."""
    ABSENT = "absent"
    DATETIME = "datetime"
    DATE = "date"
    CONVERTIBLE = "convertible"
    SECONDS = "seconds"
    UNDERSCORE_SECONDS = "underscore_seconds"
    STRING = "string"
    EPOCH_MILLIS = "epoch_millis"
    UNKNOWN = "unknown"


def _has_field(value: Any, name: str) -> bool:
    if isinstance(value, Mapping):
        return name in value
    return hasattr(value, name)


def _get_field(value: Any, name: str, default: Any = None) -> Any:
    if isinstance(value, Mapping):
        return value.get(name, default)
    return getattr(value, name, default)


def classify_timestamp(value: Any) -> TimestampShape:
    """
    Classify a raw timestamp value.

    Order matters: an SDK timestamp object can also expose ``seconds``, so the
    conversion method wins over the field checks, and ``seconds`` is checked
    before ``_seconds``.
    """
    if value is None:
        return TimestampShape.ABSENT
    if isinstance(value, datetime):
        return TimestampShape.DATETIME
    if isinstance(value, date):
        return TimestampShape.DATE
    if callable(getattr(value, "to_datetime", None)):
        return TimestampShape.CONVERTIBLE
    if _has_field(value, "seconds"):
        return TimestampShape.SECONDS
    if _has_field(value, "_seconds"):
        return TimestampShape.UNDERSCORE_SECONDS
    if isinstance(value, str):
        return TimestampShape.STRING if value.strip() else TimestampShape.ABSENT
    if isinstance(value, bool):
        return TimestampShape.UNKNOWN
    if isinstance(value, (int, float)):
        return TimestampShape.EPOCH_MILLIS
    return TimestampShape.UNKNOWN


def _ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.astimezone()
    return value


def _from_seconds(seconds: Any, nanoseconds: Any) -> datetime:
    converted = datetime.fromtimestamp(int(seconds), tz=timezone.utc)
    if nanoseconds:
        converted += timedelta(microseconds=int(nanoseconds) // 1000)
    return converted


def _from_string(text: str) -> datetime:
    text = text.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return _ensure_aware(datetime.fromisoformat(text))


def _from_convertible(value: Any) -> Optional[datetime]:
    converted = value.to_datetime()
    if isinstance(converted, datetime):
        return _ensure_aware(converted)
    return None


def _convert(value: Any, shape: TimestampShape) -> Optional[datetime]:
    if shape == TimestampShape.DATETIME:
        return _ensure_aware(value)
    if shape == TimestampShape.DATE:
        return start_of_day(value)
    if shape == TimestampShape.CONVERTIBLE:
        return _from_convertible(value)
    if shape == TimestampShape.SECONDS:
        return _from_seconds(_get_field(value, "seconds"), _get_field(value, "nanoseconds", 0))
    if shape == TimestampShape.UNDERSCORE_SECONDS:
        return _from_seconds(_get_field(value, "_seconds"), _get_field(value, "_nanoseconds", 0))
    if shape == TimestampShape.STRING:
        return _from_string(value)
    if shape == TimestampShape.EPOCH_MILLIS:
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    return None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Convert any known timestamp shape to an aware datetime, or ``None``."""
    shape = classify_timestamp(value)
    try:
        return _convert(value, shape)
    except (ValueError, TypeError, OverflowError, OSError):
        return None


def to_datetime(value: Any) -> datetime:
    """Convert a timestamp, falling back to the current time."""
    converted = parse_timestamp(value)
    if converted is None:
        logger.warning(
            "Unparsable timestamp, falling back to now",
            timestamp_shape=classify_timestamp(value).value,
            value_type=type(value).__name__,
        )
        return datetime.now(timezone.utc)
    return converted


def to_epoch_millis(value: Any) -> int:
    """Milliseconds since the epoch, or ``0`` when the value is unusable."""
    converted = parse_timestamp(value)
    if converted is None:
        return 0
    return int(converted.timestamp() * 1000)


def local_day(value: Any) -> Optional[date]:
    """Calendar day of a timestamp in the local timezone."""
    converted = parse_timestamp(value)
    if converted is None:
        return None
    return converted.astimezone().date()


def start_of_day(day: date) -> datetime:
    """Local midnight at the start of ``day``."""
    return datetime.combine(day, time.min).astimezone()


def end_of_day(day: date) -> datetime:
    """Last representable local instant of ``day``."""
    return datetime.combine(day, time.max).astimezone()
