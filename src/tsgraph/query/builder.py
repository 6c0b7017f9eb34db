"""
Query building for the OpenTSDB /q endpoint.

Turns the metrics of a QueryRequest into an OpenTSDB key string and resolves
the time window the query covers.
"""

from __future__ import annotations

from dataclasses import dataclass

from tsgraph.models import MetricSpec
from tsgraph.utils.timestamp import format_tsdb_date, now

# Valid return types for OpenTSDB /q queries
TSDB_RETURN_TYPES = ("ascii", "json")

# Window used when no start time is requested
DEFAULT_WINDOW = 4 * 60 * 60

URL_TEMPLATE = "http://{host}/q?start={start}&end={end}{key}&{return_type}"


@dataclass
class QueryWindow:
    """Resolved query window in unix seconds (both ends inclusive)."""

    start: int
    end: int


def build_metric_key(metric: MetricSpec, default_aggregation: str) -> str:
    """Build the ``&m=`` fragment for one metric.

    Args:
        metric: Metric to query
        default_aggregation: Aggregator used when the metric has none

    Returns:
        Key fragment such as ``&m=sum:rate:nointerpolation:cpu.load{host=a}``
    """
    agg_type = metric.agg_type.value if metric.agg_type is not None else default_aggregation
    qkey = f"&m={agg_type}:"

    if metric.rate:
        qkey += "rate:"

    if not metric.lerp:
        qkey += "nointerpolation:"

    qkey += metric.name

    if metric.tags:
        qkey += "{" + ",".join(metric.tags) + "}"

    return qkey


def build_query_key(metrics: list[MetricSpec], default_aggregation: str) -> str:
    """Concatenate the key fragments for all requested metrics, in order."""
    return "".join(build_metric_key(metric, default_aggregation) for metric in metrics)


def resolve_window(
    start_time: int | None,
    end_time: int | None,
    trim: int = 0,
    current_time: int | None = None,
) -> QueryWindow:
    """Resolve the effective query window.

    ``trim`` is taken off the end twice: once from the requested end (or
    from now when no end is given) and once more from the result. Existing
    dashboards rely on the double trim, so keep it.

    Args:
        start_time: Requested start (unix seconds)
        end_time: Requested end (unix seconds)
        trim: Seconds to hold back from the end
        current_time: Override for "now", mostly for tests

    Returns:
        QueryWindow with the resolved start and end.
    """
    if end_time is not None:
        end = int(end_time) - trim
    else:
        end = (now() if current_time is None else current_time) - trim
    end -= trim

    start = int(start_time) if start_time is not None else end - DEFAULT_WINDOW
    return QueryWindow(start=start, end=end)


def build_url(host: str, key: str, window: QueryWindow, return_type: str = "ascii") -> str | None:
    """Build the OpenTSDB query URL.

    Args:
        host: OpenTSDB host[:port]
        key: Query key string from build_query_key()
        window: Resolved query window
        return_type: One of TSDB_RETURN_TYPES

    Returns:
        The query URL, or None when there is no key to search on.
    """
    if not key:
        return None
    if return_type not in TSDB_RETURN_TYPES:
        raise ValueError(f"Invalid return type: {return_type}. Must be one of {TSDB_RETURN_TYPES}")

    return URL_TEMPLATE.format(
        host=host,
        start=format_tsdb_date(window.start),
        end=format_tsdb_date(window.end),
        key=key,
        return_type=return_type,
    )
