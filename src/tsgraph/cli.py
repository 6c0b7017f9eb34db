#!/usr/bin/env python3
"""
tsgraph CLI tool

Command line interface for running graph queries and starting the API server
"""

from __future__ import annotations

import argparse
import sys

from tsgraph.exceptions import ConfigurationError, ValidationError
from tsgraph.models import Aggregator, HistoryMode, MetricSpec, QueryRequest


def build_request(args: argparse.Namespace) -> QueryRequest:
    """
    Build a QueryRequest from parsed ``query`` arguments

    Every ``--metric`` shares the ``--tag``, ``--agg``, ``--rate`` and ``--lerp`` options.

    Args:
        args: Parsed arguments

    Returns:
        QueryRequest for the datasource
    """
    metrics = [
        MetricSpec(
            name=name,
            agg_type=Aggregator(args.agg) if args.agg else None,
            rate=args.rate,
            lerp=args.lerp,
            tags=args.tag or [],
            ds_interval=args.ds_interval,
        )
        for name in args.metric
    ]
    return QueryRequest(
        metrics=metrics,
        start_time=args.start,
        end_time=args.end,
        time_span=args.span,
        history_graph=HistoryMode(args.history),
        previous=args.previous,
        new_query=args.refresh,
        cache_key=args.cache_key,
    )


def run_query(args: argparse.Namespace) -> int:
    """
    Run a single query and print the result as JSON

    Args:
        args: Parsed ``query`` arguments

    Returns:
        Exit code (0 on success, 1 on any failure)
    """
    from tsgraph.datasource import OpenTSDBDatasource

    try:
        datasource = OpenTSDBDatasource(host=args.host)
        result = datasource.get_raw_data(build_request(args), identity=args.identity)
    except (ConfigurationError, ValidationError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(result.model_dump_json(indent=2))
    return 0 if result.status == "ok" else 1


def run_serve(host: str = "127.0.0.1", port: int = 4243, dev: bool = False) -> None:
    """
    Start the tsgraph API server

    Args:
        host: Host name
        port: Port number
        dev: Enable development mode with auto-reload
    """
    try:
        import uvicorn
    except ImportError:
        print("Error: API functionality is not installed!")
        print("To install: pip install tsgraph[api]")
        sys.exit(1)

    print("Starting tsgraph API server...")
    print(f"Endpoint: http://{host}:{port}/api/v1")
    if dev:
        print("Development mode: auto-reload enabled")

    uvicorn.run("tsgraph.api.main:app", host=host, port=port, reload=dev)


def main(argv: list[str] | None = None) -> int:
    """
    CLI main entry point
    """
    parser = argparse.ArgumentParser(description="tsgraph OpenTSDB query tool")
    subparsers = parser.add_subparsers(dest="command", help="Subcommands")

    query_parser = subparsers.add_parser("query", help="Run a graph query and print the result")
    query_parser.add_argument("-m", "--metric", action="append", required=True, help="Metric name (repeatable)")
    query_parser.add_argument("-t", "--tag", action="append", default=None, help="Tag filter key=value (repeatable)")
    query_parser.add_argument("--agg", choices=[a.value for a in Aggregator], default=None, help="Aggregator (default: configured)")
    query_parser.add_argument("--rate", action="store_true", help="Query the rate of change")
    query_parser.add_argument("--lerp", action="store_true", help="Let OpenTSDB interpolate")
    query_parser.add_argument("--ds-interval", default=None, help="Downsample interval, e.g. 1m (default: configured)")
    query_parser.add_argument("--start", type=int, default=None, help="Start time in unix seconds (default: end - 4h)")
    query_parser.add_argument("--end", type=int, default=None, help="End time in unix seconds (default: now)")
    query_parser.add_argument("--span", type=int, default=None, help="Graph span in seconds for cache freshness checks")
    query_parser.add_argument("--history", choices=[h.value for h in HistoryMode], default=HistoryMode.NONE.value, help="History graph mode")
    query_parser.add_argument("--previous", action="store_true", help="Previous-period half of a week-over-week graph")
    query_parser.add_argument("--refresh", action="store_true", help="Discard any cached result first")
    query_parser.add_argument("--cache-key", default=None, help="Explicit cache key")
    query_parser.add_argument("--identity", default="", help="Requesting identity for cache separation")
    query_parser.add_argument("--host", default=None, help="OpenTSDB host[:port] (default: TSGRAPH_TSDB_HOSTS)")

    serve_parser = subparsers.add_parser("serve", help="Start the tsgraph API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host name (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=4243, help="Port number (default: 4243)")
    serve_parser.add_argument("--dev", action="store_true", help="Enable development mode with auto-reload")

    args = parser.parse_args(argv)

    if args.command == "query":
        return run_query(args)
    if args.command == "serve":
        run_serve(host=args.host, port=args.port, dev=args.dev)
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
