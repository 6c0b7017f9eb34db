"""
QueryCache - msgpack file backed cache of downsampled query results.

One file per cache key holds the whole series mapping for that key and is the
only copy of it; every update rewrites the file atomically.
"""

from __future__ import annotations

import contextlib
import threading
import weakref
from collections.abc import Generator
from pathlib import Path
from typing import Any

import msgpack

from tsgraph.logger import logger
from tsgraph.models import DataPoint
from tsgraph.utils import atomic_write_bytes

from .merge import SeriesMap

# Entries live only while some caller holds the lock object
_locks: weakref.WeakValueDictionary[str, threading.Lock] = weakref.WeakValueDictionary()
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = str(path)
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.Lock()
        return lock


def pack_series(series_map: SeriesMap) -> bytes:
    """Serialize a series mapping, preserving series order."""
    payload = {series: [[point.timestamp, point.value] for point in points] for series, points in series_map.items()}
    return msgpack.packb(payload, use_bin_type=True)


def unpack_series(data: bytes) -> SeriesMap:
    """Deserialize a series mapping written by pack_series().

    Raises:
        ValueError: If the content is not a valid series mapping
    """
    try:
        payload: Any = msgpack.unpackb(data, raw=False)
    except (msgpack.exceptions.ExtraData, msgpack.exceptions.UnpackException, ValueError, TypeError) as e:
        raise ValueError(f"Unreadable cache content: {e}") from e

    if not isinstance(payload, dict):
        raise ValueError("Cache content is not a series mapping")

    series_map: SeriesMap = {}
    for series, rows in payload.items():
        if not isinstance(series, str) or not isinstance(rows, list):
            raise ValueError(f"Invalid cached series {series!r}")
        points = []
        for row in rows:
            if not isinstance(row, list) or len(row) != 2 or not isinstance(row[0], int):
                raise ValueError(f"Invalid cached point in series {series!r}: {row!r}")
            points.append(DataPoint(timestamp=row[0], value=str(row[1])))
        series_map[series] = points
    return series_map


class QueryCache:
    """Cache file for a single cache key."""

    def __init__(self, path: str | Path) -> None:
        """Initialize the cache handle.

        Args:
            path: Cache file path (see cache_file_path())
        """
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    @contextlib.contextmanager
    def locked(self) -> Generator["QueryCache", None, None]:
        """Hold the in-process lock for this cache file.

        Serializes read-merge-write cycles on the same key within one
        process. Other processes are not excluded.
        """
        with _lock_for(self.path):
            yield self

    def load(self) -> SeriesMap | None:
        """Load the cached mapping.

        Returns:
            The cached mapping, or None when the file is missing or cannot be read.
        """
        try:
            data = self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Could not read query cache {self.path}: {e}")
            return None

        try:
            return unpack_series(data)
        except ValueError as e:
            logger.warning(f"Ignoring corrupt query cache {self.path}: {e}")
            return None

    def save(self, series_map: SeriesMap) -> None:
        """Replace the cache file with ``series_map``."""
        atomic_write_bytes(self.path, pack_series(series_map))

    def delete(self) -> bool:
        """Remove the cache file.

        Returns:
            True if a file was removed.
        """
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        return True


def cache_end_stamp(series_map: SeriesMap, reference: str = "first") -> int | None:
    """Timestamp the cached data is considered current up to.

    Args:
        series_map: Cached mapping
        reference: "first" uses the last point of the first cached series,
            "min" the earliest last point across all cached series

    Returns:
        The timestamp, or None when there is no cached point to judge by.
    """
    if reference == "min":
        last_points = [points[-1].timestamp for points in series_map.values() if points]
        return min(last_points) if last_points else None

    for points in series_map.values():
        return points[-1].timestamp if points else None
    return None


def is_stale(series_map: SeriesMap, span_threshold: int, reference: str = "first") -> bool:
    """Whether cached data ends before ``span_threshold``."""
    end_stamp = cache_end_stamp(series_map, reference)
    logger.debug(f"cache ends at {end_stamp}, minimum threshold is {span_threshold}")
    return end_stamp is None or end_stamp < span_threshold
