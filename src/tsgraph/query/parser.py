"""
Parser for the OpenTSDB ascii response format.

Each line of the payload is ``<metric> <timestamp> <value> [tag=value ...]``.
"""

from __future__ import annotations

from tsgraph.exceptions import ParseError
from tsgraph.logger import logger
from tsgraph.models import DataPoint, QueryRequest
from tsgraph.query.builder import QueryWindow


def series_key(metric: str, tag_key: str) -> str:
    """Series identity shared by the parser, the legend and the cache."""
    return f"{metric} {tag_key}"


def parse_line(line: str) -> tuple[str, int, str, list[str]]:
    """Split one response line into its fields.

    Returns:
        Tuple of (metric, timestamp, value, tags)

    Raises:
        ParseError: If the timestamp or value is missing or malformed
    """
    fields = line.split(" ")
    if len(fields) < 3 or not fields[1] or not fields[2]:
        raise ParseError(f"Missing timestamp or value in line: {line[:256]!r}", line=line)

    metric, raw_timestamp, value, *tags = fields
    try:
        timestamp = int(raw_timestamp)
    except ValueError:
        raise ParseError(f"Invalid timestamp {raw_timestamp!r} in line: {line[:256]!r}", line=line) from None
    try:
        float(value)
    except ValueError:
        raise ParseError(f"Invalid value {value!r} in line: {line[:256]!r}", line=line) from None

    return metric, timestamp, value, tags


def parse_response(raw_data: str, request: QueryRequest, window: QueryWindow) -> dict[str, list[DataPoint]]:
    """Group response lines into series, keeping only points inside the window.

    In history mode every line is keyed with the tags declared on the first
    requested metric, since the tag text OpenTSDB returns for a shifted
    window need not match the current one.

    Args:
        raw_data: Newline delimited OpenTSDB ascii payload
        request: The request the payload answers
        window: Resolved query window; points outside it are dropped

    Returns:
        Mapping of series key to points, in arrival order (unsorted).
    """
    history_tag_key = ""
    if request.is_history and request.metrics:
        history_tag_key = " ".join(request.metrics[0].tags)

    graph_data: dict[str, list[DataPoint]] = {}
    skipped = 0

    for line in raw_data.split("\n"):
        if not line.strip():
            continue
        try:
            metric, timestamp, value, tags = parse_line(line.rstrip("\r"))
        except ParseError as e:
            skipped += 1
            logger.debug(f"Skipping malformed line: {e}")
            continue

        if request.is_history:
            tag_key = history_tag_key
        else:
            tag_key = " ".join(tags)

        if timestamp < window.start or timestamp > window.end:
            continue

        graph_data.setdefault(series_key(metric, tag_key), []).append(DataPoint(timestamp=timestamp, value=value))

    if skipped:
        logger.warning(f"Skipped {skipped} malformed lines in OpenTSDB response")

    return graph_data
