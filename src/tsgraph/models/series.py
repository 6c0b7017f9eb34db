"""
Series data models.

Series are keyed by "<metric> <tag string>". Values travel as decimal strings
so that nothing is lost between the remote store, the cache and the caller.
"""

from typing import Literal

from pydantic import BaseModel, Field


class DataPoint(BaseModel):
    """A single time series point."""

    timestamp: int = Field(..., description="Unix seconds")
    value: str = Field(..., description="Value as a decimal string")

    def __str__(self) -> str:
        return f"DataPoint(timestamp={self.timestamp}, value={self.value})"


SeriesData = list[DataPoint]


class QueryResult(BaseModel):
    """Downsampled series for one request plus the metadata needed to re-query it."""

    status: Literal["ok"] = "ok"
    series: dict[str, SeriesData] = Field(default_factory=dict, description="Series key to points")
    cache_key: str = Field(..., description="Cache key the result was stored under")
    query_cache: str = Field(..., description="Path of the cache file")
    query_url: str = Field(..., description="OpenTSDB URL that was queried")
    start: int | None = Field(default=None, description="Earliest timestamp across all series")
    end: int | None = Field(default=None, description="Latest timestamp across all series")
    legend: dict[str, str] = Field(default_factory=dict, description="Series key to display label")
    num_points: int = Field(default=0, description="Raw lines received from OpenTSDB")


class QueryError(BaseModel):
    """Returned instead of a result when OpenTSDB could not be queried."""

    status: Literal["error"] = "error"
    error: list[str] = Field(..., description="Two-part human readable message")
    query_url: str | None = Field(default=None, description="OpenTSDB URL that failed")
