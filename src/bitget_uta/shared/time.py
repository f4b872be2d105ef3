"""
Time utilities for bitget-uta

Millisecond timestamps as the exchange expects them on the wire.
Request signing, query parameters and response envelopes all use
integer milliseconds since the Unix epoch.
"""

import time
from datetime import datetime, timezone
from typing import Any, Optional


def utc_now_ms() -> int:
    """
    Get current UTC timestamp in milliseconds.

    Returns:
        int: Current UTC timestamp in milliseconds
    """
    return int(time.time() * 1000)


def format_timestamp_ms(timestamp_ms: Optional[int] = None) -> str:
    """
    Format a millisecond timestamp as the decimal string used on the wire.

    Args:
        timestamp_ms: Milliseconds since epoch (defaults to now)

    Returns:
        Decimal string, e.g. "1700000000000"
    """
    if timestamp_ms is None:
        timestamp_ms = utc_now_ms()
    return str(int(timestamp_ms))


def to_epoch_ms(timestamp: Any) -> Optional[int]:
    """
    Convert various timestamp formats to UTC epoch milliseconds.

    Rules:
    - datetime: naive values are treated as UTC
    - Numeric: >= 1_000_000_000_000 → ms, else treat as seconds × 1000
    - Numeric strings: same rule as numbers
    - ISO strings: parse as UTC to epoch ms
    - Missing/invalid: return None

    Args:
        timestamp: Can be datetime, int, float, str (digits or ISO), or None

    Returns:
        Epoch milliseconds (int) or None if invalid
    """
    if timestamp is None or isinstance(timestamp, bool):
        return None

    try:
        if isinstance(timestamp, datetime):
            dt = timestamp
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            return int(dt.timestamp() * 1000)

        if isinstance(timestamp, (int, float)):
            # If >= 1 trillion, assume it's already in milliseconds
            if timestamp >= 1_000_000_000_000:
                return int(timestamp)
            return int(timestamp * 1000)

        if isinstance(timestamp, str):
            stripped = timestamp.strip()
            if stripped.isdigit():
                return to_epoch_ms(int(stripped))

            dt = datetime.fromisoformat(stripped.replace('Z', '+00:00'))
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            return int(dt.timestamp() * 1000)

    except (ValueError, TypeError, OverflowError):
        pass

    return None
