"""
tsgraph data models package.

This package contains the request and result models shared by all tsgraph components.
"""

from tsgraph.models.query import Aggregator, DownsampleType, HistoryMode, MetricSpec, QueryRequest
from tsgraph.models.series import DataPoint, QueryError, QueryResult, SeriesData

__all__ = [
    "Aggregator",
    "DataPoint",
    "DownsampleType",
    "HistoryMode",
    "MetricSpec",
    "QueryError",
    "QueryRequest",
    "QueryResult",
    "SeriesData",
]
