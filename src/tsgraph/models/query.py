"""
Query request models.

A QueryRequest is built per call and never persisted.
"""

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class Aggregator(str, Enum):
    """Aggregators understood by OpenTSDB when combining series."""

    SUM = "sum"
    MIN = "min"
    MAX = "max"
    AVG = "avg"
    DEV = "dev"
    ZIMSUM = "zimsum"
    MIMMIN = "mimmin"
    MIMMAX = "mimmax"


class DownsampleType(str, Enum):
    """Aggregators available to the local downsampler."""

    AVG = "avg"
    SUM = "sum"
    MIN = "min"
    MAX = "max"
    DEV = "dev"
    COUNT = "count"


class HistoryMode(str, Enum):
    """History graph mode.

    - no: plain query
    - wow: week-over-week comparison against a shifted window
    """

    NONE = "no"
    WEEK_OVER_WEEK = "wow"


class MetricSpec(BaseModel):
    """One metric to query, with its aggregation and tag filters."""

    name: str = Field(..., min_length=1, description="Metric name")
    agg_type: Aggregator | None = Field(default=None, description="Aggregator (configured default when omitted)")
    rate: bool = Field(default=False, description="Query the rate of change instead of raw values")
    lerp: bool = Field(default=False, description="Let OpenTSDB interpolate between points")
    tags: list[str] = Field(default_factory=list, description="Tag filters as key=value strings")
    ds_interval: str | None = Field(default=None, description="Downsample interval override")
    ds_type: DownsampleType | None = Field(default=None, description="Downsample aggregator override")

    @field_validator("tags")
    @classmethod
    def _tags_are_pairs(cls, tags: list[str]) -> list[str]:
        for tag in tags:
            if "=" not in tag:
                raise ValueError(f"Tag filter must be key=value: {tag!r}")
        return tags

    @property
    def tag_names(self) -> list[str]:
        """Names of the tags this metric is filtered on."""
        return [tag.split("=", 1)[0] for tag in self.tags]


class QueryRequest(BaseModel):
    """A request for one graph's worth of series."""

    metrics: list[MetricSpec] = Field(default_factory=list, description="Metrics to query, in order")
    start_time: int | None = Field(default=None, description="Query start (unix seconds)")
    end_time: int | None = Field(default=None, description="Query end (unix seconds)")
    time_span: int | None = Field(default=None, ge=0, description="Graph span in seconds, used to judge cache freshness")
    history_graph: HistoryMode = Field(default=HistoryMode.NONE, description="History graph mode")
    previous: bool = Field(default=False, description="Previous-period half of a week-over-week graph")
    new_query: bool = Field(default=False, description="Discard any cached result before querying")
    cache_key: str | None = Field(default=None, description="Explicit cache key")

    @property
    def is_history(self) -> bool:
        return self.history_graph != HistoryMode.NONE
