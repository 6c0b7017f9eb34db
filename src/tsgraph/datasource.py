"""
OpenTSDB datasource.

Coordinates one graph query: builds the OpenTSDB query, consults the query
cache, fetches and parses the response, downsamples each series, merges the
result into the cache and assembles what the graph needs to draw.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Protocol

from tsgraph.cache import QueryCache, cache_file_path, compute_cache_key, is_stale, merge_cache
from tsgraph.client import TsdbClient
from tsgraph.config import DatasourceSettings, get_cache_dir, get_settings
from tsgraph.downsample import IntervalDownsampler, parse_interval
from tsgraph.exceptions import TransportError, ValidationError
from tsgraph.logger import logger
from tsgraph.models import DataPoint, DownsampleType, HistoryMode, QueryError, QueryRequest, QueryResult
from tsgraph.query import QueryWindow, build_query_key, build_url, normalize_legend, parse_response, resolve_window

# Longest diagnostic text kept from a failed request
_MAX_ERROR_LENGTH = 256


class Fetcher(Protocol):
    def fetch(self, url: str) -> str: ...


class Downsampler(Protocol):
    def downsample(self, points: list[DataPoint], interval: str, method: str, start: int, end: int) -> list[DataPoint]: ...


def format_transport_error(message: str) -> list[str]:
    """Turn a transport failure into a two-part message for display.

    OpenTSDB error pages carry the summary on the third line and the detail,
    behind a 15 character label, on the fourth. Anything shorter is reported
    as is.
    """
    lines = message.split("\n")
    error_message = lines[2:]
    if len(error_message) >= 2:
        return [error_message[0].strip()[:_MAX_ERROR_LENGTH], error_message[1][15:].strip()[:_MAX_ERROR_LENGTH]]

    detail = next((line.strip() for line in lines if line.strip()), "")
    return ["Failed to retrieve metrics from OpenTSDB", detail[:_MAX_ERROR_LENGTH]]


class OpenTSDBDatasource:
    """Cached, downsampled access to one OpenTSDB host."""

    def __init__(
        self,
        host: str | None = None,
        settings: DatasourceSettings | None = None,
        client: Fetcher | None = None,
        downsampler: Downsampler | None = None,
        cache_dir: str | Path | None = None,
    ) -> None:
        """Initialize the datasource.

        Args:
            host: OpenTSDB host[:port]; picked from the configured hosts when omitted
            settings: Datasource settings; read from the environment when omitted
            client: Transport used for queries
            downsampler: Downsampler applied to every series
            cache_dir: Cache directory; see get_cache_dir() for the default

        Raises:
            ConfigurationError: If no host is given and none is configured
        """
        self.settings = settings or get_settings()
        self.host = host or self.settings.pick_host()
        self.tsdb_query_trim = self.settings.trim
        self.client = client or TsdbClient(timeout=self.settings.fetch_timeout)
        self.downsampler = downsampler or IntervalDownsampler(lttb_threshold=self.settings.lttb_threshold)
        self.cache_dir = Path(cache_dir) if cache_dir is not None else get_cache_dir()

        self.tsdb_query_url: str | None = None
        self.window: QueryWindow | None = None
        self.ts_data: QueryResult | QueryError | None = None

        logger.debug(f"OpenTSDB datasource created for {self.host}")

    def _downsample_params(self, request: QueryRequest) -> tuple[str, str]:
        """Effective downsample interval and aggregator.

        Overrides are taken from the last metric in the request.
        """
        last_metric = request.metrics[-1]
        interval = last_metric.ds_interval or self.settings.downsample_interval
        ds_type = last_metric.ds_type.value if last_metric.ds_type is not None else self.settings.downsample_type

        parse_interval(interval)
        try:
            DownsampleType(ds_type)
        except ValueError:
            raise ValidationError(f"Unsupported downsample type: {ds_type!r}") from None
        return interval, ds_type

    def get_raw_data(self, request: QueryRequest, identity: str = "") -> QueryResult | QueryError:
        """Fetch, downsample and cache the series for ``request``.

        Args:
            request: Graph query
            identity: Requesting user; part of the cache key and of log lines

        Returns:
            QueryResult, or QueryError when OpenTSDB could not be queried. The
            cache is left untouched on error.

        Raises:
            ValidationError: If the request has no metrics or an invalid downsample setting
        """
        log_tag = f"({identity or 'anonymous'}) "

        if not request.metrics:
            logger.debug(log_tag + "No query data found")
            raise ValidationError("No query found to search on")

        query_key = build_query_key(request.metrics, self.settings.default_aggregation)
        if not query_key:
            raise ValidationError("No query found to search on")

        ds_interval, ds_type = self._downsample_params(request)
        cache_key = request.cache_key or compute_cache_key(query_key, ds_interval, ds_type, identity)

        week_over_week = request.history_graph == HistoryMode.WEEK_OVER_WEEK and request.previous
        if week_over_week:
            logger.debug(log_tag + "Using cache file for week-over-week data")
        cache = QueryCache(cache_file_path(self.cache_dir, cache_key, week_over_week))

        window = resolve_window(request.start_time, request.end_time, self.tsdb_query_trim)

        with cache.locked():
            if request.new_query and cache.delete():
                logger.debug(log_tag + "Resetting query cache")

            cached = cache.load()
            if cached is not None and request.time_span is not None:
                logger.debug(log_tag + "Checking to make sure cached data is current")
                span_threshold = window.end - request.time_span
                if is_stale(cached, span_threshold, self.settings.staleness_reference):
                    logger.debug(log_tag + f"Cached data is stale, querying from {span_threshold}")
                    cache.delete()
                    cached = None
                    window = QueryWindow(start=span_threshold, end=window.end)

            query_url = build_url(self.host, query_key, window)
            if query_url is None:
                raise ValidationError("No query found to search on")
            self.tsdb_query_url = query_url
            self.window = window

            data_pull_start = time.monotonic()
            try:
                raw_data = self.client.fetch(query_url)
            except TransportError as e:
                logger.error(log_tag + f"Failed to retrieve metrics from OpenTSDB, start time was: {window.start}")
                logger.error(log_tag + str(e)[:_MAX_ERROR_LENGTH])
                self.ts_data = QueryError(error=format_transport_error(str(e)), query_url=query_url)
                return self.ts_data

            pull_time = time.monotonic() - data_pull_start
            num_points = raw_data.count("\n") + (1 if raw_data and not raw_data.endswith("\n") else 0)
            logger.info(log_tag + f"Retrieved {num_points} lines from OpenTSDB, total execution time: {pull_time:.1f} seconds")

            graph_data = parse_response(raw_data, request, window)
            legend = normalize_legend(list(graph_data), request.metrics)

            logger.debug(log_tag + f"Downsampling data, interval: {ds_interval} method: {ds_type}, start: {window.start}, end: {window.end}")
            for series, points in graph_data.items():
                points.sort(key=lambda point: point.timestamp)
                graph_data[series] = self.downsampler.downsample(points, ds_interval, ds_type, window.start, window.end)

            if cached is None:
                cache.save(graph_data)
            else:
                cache.save(merge_cache(cached, graph_data))

        start_time = min((points[0].timestamp for points in graph_data.values() if points), default=None)
        end_time = max((points[-1].timestamp for points in graph_data.values() if points), default=None)

        self.ts_data = QueryResult(
            series=graph_data,
            cache_key=cache_key,
            query_cache=str(cache.path),
            query_url=query_url,
            start=start_time,
            end=end_time,
            legend=legend,
            num_points=num_points,
        )
        return self.ts_data

    def flush_data(self) -> None:
        """Clear the last result and resolved window."""
        self.ts_data = None
        self.window = None
        self.tsdb_query_url = None
