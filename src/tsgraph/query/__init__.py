"""Query building, response parsing and legend normalization for OpenTSDB."""

from tsgraph.query.builder import DEFAULT_WINDOW, QueryWindow, build_metric_key, build_query_key, build_url, resolve_window
from tsgraph.query.legend import normalize_legend
from tsgraph.query.parser import parse_line, parse_response, series_key

__all__ = [
    "DEFAULT_WINDOW",
    "QueryWindow",
    "build_metric_key",
    "build_query_key",
    "build_url",
    "normalize_legend",
    "parse_line",
    "parse_response",
    "resolve_window",
    "series_key",
]
