"""
Timestamp normalization for report and alert sources.

Community reports arrive with Firestore-style timestamps, NWS alerts with ISO
8601 strings; fusion compares everything as epoch milliseconds.
"""
from datetime import datetime, timezone
import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)

# Epoch values above this are treated as milliseconds (year 2286 in seconds)
MILLIS_THRESHOLD = 1e10


def now_millis() -> int:
    """Current UTC time in epoch milliseconds."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def _from_seconds_nanos(seconds: Any, nanos: Any) -> int:
    return int(seconds) * 1000 + int(nanos or 0) // 1_000_000


def to_epoch_millis(timestamp_value: Any) -> Optional[int]:
    """
    Convert a timestamp in any supported shape to epoch milliseconds.

    Handles:
    - Firestore Timestamp objects (``seconds`` / ``nanoseconds`` attributes)
    - Serialized Firestore timestamps ({'_seconds', '_nanoseconds'} or
      {'seconds', 'nanoseconds'})
    - datetime objects (naive values are assumed UTC)
    - ISO 8601 strings, including a trailing 'Z'
    - Unix timestamps in milliseconds or seconds

    Args:
        timestamp_value: Timestamp in one of the formats above

    Returns:
        Epoch milliseconds, or None if the value cannot be interpreted

    Examples:
        >>> to_epoch_millis('2024-05-01T12:00:00Z')
        1714564800000
        >>> to_epoch_millis(1714564800)
        1714564800000
        >>> to_epoch_millis({'_seconds': 1714564800, '_nanoseconds': 5000000})
        1714564800005
        >>> to_epoch_millis('not a date') is None
        True
    """
    if timestamp_value is None or isinstance(timestamp_value, bool):
        return None

    try:
        if isinstance(timestamp_value, datetime):
            if timestamp_value.tzinfo is None:
                timestamp_value = timestamp_value.replace(tzinfo=timezone.utc)
            return int(timestamp_value.timestamp() * 1000)

        if isinstance(timestamp_value, str):
            dt = datetime.fromisoformat(timestamp_value.strip().replace('Z', '+00:00'))
            return to_epoch_millis(dt)

        if isinstance(timestamp_value, (int, float)):
            if timestamp_value != timestamp_value:  # NaN
                return None
            if abs(timestamp_value) > MILLIS_THRESHOLD:
                return int(timestamp_value)
            return int(timestamp_value * 1000)

        if isinstance(timestamp_value, dict):
            if '_seconds' in timestamp_value:
                return _from_seconds_nanos(timestamp_value['_seconds'],
                                           timestamp_value.get('_nanoseconds'))
            if 'seconds' in timestamp_value:
                return _from_seconds_nanos(timestamp_value['seconds'],
                                           timestamp_value.get('nanoseconds'))
            logger.warning(f"Unrecognized timestamp mapping keys: {sorted(timestamp_value)}")
            return None

        # Firestore Timestamp / protobuf-style objects
        if hasattr(timestamp_value, 'seconds'):
            return _from_seconds_nanos(timestamp_value.seconds,
                                       getattr(timestamp_value, 'nanoseconds',
                                               getattr(timestamp_value, 'nanos', 0)))

        logger.warning(f"Unknown timestamp type: {type(timestamp_value)}")
        return None

    except (ValueError, TypeError, OSError, OverflowError) as e:
        logger.warning(f"Invalid timestamp value {timestamp_value!r}: {e}")
        return None
