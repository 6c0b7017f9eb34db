"""Per-query result cache: key hashing, file storage and merging."""

from .keys import CACHE_SUBDIR, cache_file_path, compute_cache_key
from .merge import SeriesMap, merge_cache, merge_series
from .store import QueryCache, cache_end_stamp, is_stale, pack_series, unpack_series

__all__ = [
    "CACHE_SUBDIR",
    "QueryCache",
    "SeriesMap",
    "cache_end_stamp",
    "cache_file_path",
    "compute_cache_key",
    "is_stale",
    "merge_cache",
    "merge_series",
    "pack_series",
    "unpack_series",
]
