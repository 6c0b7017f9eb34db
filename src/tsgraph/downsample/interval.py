"""
Interval downsampling.

Points are grouped into epoch aligned buckets of a fixed width and each
bucket is reduced to one point with an aggregator. Long results are further
thinned with LTTB so a graph never receives more points than it can draw.
"""

from __future__ import annotations

import re

import numpy as np

from tsgraph.exceptions import ValidationError
from tsgraph.logger import logger
from tsgraph.models import DataPoint

from .lttb import lttb_indices

_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400, "w": 604800}
_INTERVAL_RE = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$")


def parse_interval(interval: str | int) -> int:
    """Convert an interval spec such as ``30s``, ``5m`` or ``1h`` to seconds.

    A bare integer is taken as seconds.

    Raises:
        ValidationError: If the spec is malformed or not positive
    """
    if isinstance(interval, int):
        seconds = interval
    else:
        match = _INTERVAL_RE.match(interval)
        if match is None:
            raise ValidationError(f"Invalid downsample interval: {interval!r}")
        count, unit = match.groups()
        seconds = int(count) * _UNIT_SECONDS[unit or "s"]

    if seconds <= 0:
        raise ValidationError(f"Downsample interval must be positive: {interval!r}")
    return seconds


def _aggregate(values: np.ndarray, bucket_starts: np.ndarray, sizes: np.ndarray, method: str) -> np.ndarray:
    """Reduce each bucket of ``values`` (delimited by ``bucket_starts``) to one value."""
    if method == "count":
        return sizes.astype(float)
    if method == "sum":
        return np.add.reduceat(values, bucket_starts)
    if method == "min":
        return np.minimum.reduceat(values, bucket_starts)
    if method == "max":
        return np.maximum.reduceat(values, bucket_starts)

    means = np.add.reduceat(values, bucket_starts) / sizes
    if method == "avg":
        return means
    if method == "dev":
        deviations = values - np.repeat(means, sizes)
        return np.sqrt(np.add.reduceat(deviations * deviations, bucket_starts) / sizes)

    raise ValidationError(f"Unsupported downsample type: {method!r}")


def format_value(value: float) -> str:
    """Render an aggregated value as a compact decimal string."""
    return np.format_float_positional(value, trim="-")


class IntervalDownsampler:
    """Bucketing downsampler with an optional LTTB point budget."""

    def __init__(self, lttb_threshold: int = 0) -> None:
        """Initialize the downsampler.

        Args:
            lttb_threshold: Maximum points per series after bucketing; 0 means unlimited
        """
        self.lttb_threshold = lttb_threshold

    def downsample(
        self,
        points: list[DataPoint],
        interval: str | int,
        method: str,
        start: int,
        end: int,
    ) -> list[DataPoint]:
        """Downsample sorted ``points`` to one point per interval.

        Args:
            points: Points sorted by timestamp
            interval: Bucket width (see parse_interval())
            method: One of avg, sum, min, max, dev, count
            start: Window start; earlier points are ignored
            end: Window end; later points are ignored

        Returns:
            Points sorted by timestamp with unique timestamps. Each point is
            stamped with the start of its bucket.
        """
        seconds = parse_interval(interval)
        method = getattr(method, "value", method)

        window = [point for point in points if start <= point.timestamp <= end]
        if not window:
            return []

        timestamps = np.fromiter((point.timestamp for point in window), dtype=np.int64, count=len(window))
        values = np.fromiter((float(point.value) for point in window), dtype=float, count=len(window))

        buckets = timestamps // seconds * seconds
        bucket_stamps, bucket_starts, sizes = np.unique(buckets, return_index=True, return_counts=True)
        aggregated = _aggregate(values, bucket_starts, sizes, method)

        if self.lttb_threshold and len(bucket_stamps) > max(self.lttb_threshold, 3):
            keep = lttb_indices(np.column_stack([bucket_stamps, aggregated]), max(self.lttb_threshold, 3))
            logger.debug(f"LTTB reduced {len(bucket_stamps)} buckets to {len(keep)} points")
            bucket_stamps = bucket_stamps[keep]
            aggregated = aggregated[keep]

        return [DataPoint(timestamp=int(ts), value=format_value(value)) for ts, value in zip(bucket_stamps, aggregated)]
