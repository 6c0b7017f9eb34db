"""Cache key hashing and cache file locations."""

from __future__ import annotations

import hashlib
from pathlib import Path

CACHE_SUBDIR = "query_cache"


def compute_cache_key(query_key: str, downsample_interval: str, downsample_type: str, identity: str = "") -> str:
    """Derive the cache key for a query.

    Args:
        query_key: OpenTSDB key string for the query
        downsample_interval: Effective downsample interval
        downsample_type: Effective downsample aggregator
        identity: Requesting identity (user name); different users never share a cache

    Returns:
        Hex digest identifying the cached result.
    """
    material = f"{query_key}{downsample_interval}{downsample_type}{identity}"
    return hashlib.md5(material.encode("utf-8")).hexdigest()


def cache_file_path(cache_dir: str | Path, cache_key: str, week_over_week: bool = False) -> Path:
    """Path of the cache file backing ``cache_key``.

    The previous-period half of a week-over-week graph gets its own file.
    """
    suffix = "_wow.cache" if week_over_week else ".cache"
    return Path(cache_dir) / CACHE_SUBDIR / f"{cache_key}{suffix}"
