"""Timestamp formatting utilities for OpenTSDB queries."""

from __future__ import annotations

import time
from datetime import datetime

# Format for dates in OpenTSDB /q queries
TSDB_DATE_FORMAT = "%Y/%m/%d-%H:%M:%S"


def format_tsdb_date(timestamp: int) -> str:
    """Format a unix timestamp the way OpenTSDB expects query dates.

    The date is rendered in local time, which is how OpenTSDB interprets it.

    Args:
        timestamp: Unix seconds

    Returns:
        Date string such as ``2024/01/15-12:30:45``.
    """
    return datetime.fromtimestamp(timestamp).strftime(TSDB_DATE_FORMAT)


def now() -> int:
    """Current time as unix seconds."""
    return int(time.time())
