"""
Splicing freshly downsampled series onto cached ones.

Cached and new series are both sorted by timestamp without duplicates, and
so is every series this module returns.
"""

from __future__ import annotations

from tsgraph.logger import logger
from tsgraph.models import DataPoint

SeriesMap = dict[str, list[DataPoint]]


def merge_series(cached: list[DataPoint], new: list[DataPoint]) -> list[DataPoint]:
    """Merge one new series onto its cached counterpart.

    - A cached series that starts after the new one is dropped: the new
      window covers it entirely.
    - Otherwise cached points at or after the new series' first timestamp
      are removed, then as many points as the new series holds are dropped
      from the front of the cache so it does not grow without bound, and the
      new points are appended.
    """
    if not new:
        return list(cached)
    if not cached:
        return list(new)

    new_data_start = new[0].timestamp
    if cached[0].timestamp > new_data_start:
        return list(new)

    kept = [point for point in cached if point.timestamp < new_data_start]
    logger.debug(f"Trimming {len(new)} points from cached data")
    return kept[len(new):] + list(new)


def merge_cache(cached: SeriesMap, new: SeriesMap) -> SeriesMap:
    """Merge a whole downsampled result into a cached mapping.

    Series only present in the cache are kept untouched, series only present
    in the new result are added as they are.

    Returns:
        The merged mapping; cached series order first, then new series.
    """
    merged: SeriesMap = {}
    for series, points in cached.items():
        if series in new:
            logger.debug(f"Updating data for series {series}")
            merged[series] = merge_series(points, new[series])
        else:
            merged[series] = list(points)

    for series, points in new.items():
        if series not in merged:
            merged[series] = list(points)

    return merged
