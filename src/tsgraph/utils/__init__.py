"""Utility modules for tsgraph."""

from tsgraph.utils.file import atomic_write_bytes, datasync
from tsgraph.utils.timestamp import TSDB_DATE_FORMAT, format_tsdb_date, now

__all__ = [
    "TSDB_DATE_FORMAT",
    "atomic_write_bytes",
    "datasync",
    "format_tsdb_date",
    "now",
]
