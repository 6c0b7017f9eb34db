"""
tsgraph - Cached, downsampled OpenTSDB series for graph dashboards.

Examples:
    >>> from tsgraph import MetricSpec, OpenTSDBDatasource, QueryRequest
    >>> datasource = OpenTSDBDatasource(host="tsdb.example.com:4242")
    >>> result = datasource.get_raw_data(QueryRequest(metrics=[MetricSpec(name="cpu.load")]))
    >>> result.legend
    {'cpu.load ': 'cpu.load'}
"""

from tsgraph.datasource import OpenTSDBDatasource
from tsgraph.exceptions import ConfigurationError, ParseError, TransportError, TsgraphError, ValidationError
from tsgraph.models import DataPoint, MetricSpec, QueryError, QueryRequest, QueryResult

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "DataPoint",
    "MetricSpec",
    "OpenTSDBDatasource",
    "ParseError",
    "QueryError",
    "QueryRequest",
    "QueryResult",
    "TransportError",
    "TsgraphError",
    "ValidationError",
]
