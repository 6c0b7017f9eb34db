"""Downsampling of sorted series for graphing.

Any object with a ``downsample(points, interval, method, start, end)`` method
can stand in for IntervalDownsampler.
"""

from .interval import IntervalDownsampler, format_value, parse_interval
from .lttb import lttb_indices

__all__ = ["IntervalDownsampler", "format_value", "lttb_indices", "parse_interval"]
