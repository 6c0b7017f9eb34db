"""Configuration and environment handling for tsgraph."""

import os
import random
from pathlib import Path

from pydantic import BaseModel, Field

from tsgraph.exceptions import ConfigurationError

__all__ = [
    "DatasourceSettings",
    "get_cache_dir",
    "get_settings",
    "reset_settings",
]


def _split_hosts(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [host.strip() for host in raw.split(",") if host.strip()]


class DatasourceSettings(BaseModel):
    """OpenTSDB datasource configuration.

    All values can be customized via environment variables.
    """

    hosts: list[str] = Field(
        default_factory=list,
        description="OpenTSDB hosts (host[:port]); one is picked at random per datasource",
    )

    trim: int = Field(
        default=0,
        ge=0,
        description="Seconds trimmed off the query end to account for lag in OpenTSDB population",
    )

    default_aggregation: str = Field(
        default="sum",
        description="Aggregator used for metrics that do not specify one",
    )

    downsample_interval: str = Field(
        default="1m",
        description="Default downsample interval (e.g. 30s, 1m, 1h)",
    )

    downsample_type: str = Field(
        default="avg",
        description="Default downsample aggregator",
    )

    fetch_timeout: float = Field(
        default=300.0,  # 5 minutes, queries over long spans are slow
        gt=0,
        description="Timeout in seconds for a single OpenTSDB request",
    )

    lttb_threshold: int = Field(
        default=1_000,
        ge=0,
        description="Reduce downsampled series longer than this with LTTB (0 disables)",
    )

    staleness_reference: str = Field(
        default="first",
        pattern="^(first|min)$",
        description="Series used to judge cache freshness: first cached series or minimum across all",
    )

    @classmethod
    def from_env(cls) -> "DatasourceSettings":
        """Create DatasourceSettings from environment variables.

        Environment variables:
        - TSGRAPH_TSDB_HOSTS: Comma separated OpenTSDB hosts
        - TSGRAPH_TSDB_TRIM: Query end trim in seconds (default: 0)
        - TSGRAPH_DEFAULT_AGGREGATION: Default aggregator (default: sum)
        - TSGRAPH_DOWNSAMPLE_INTERVAL: Default downsample interval (default: 1m)
        - TSGRAPH_DOWNSAMPLE_TYPE: Default downsample aggregator (default: avg)
        - TSGRAPH_FETCH_TIMEOUT: Request timeout in seconds (default: 300)
        - TSGRAPH_LTTB_THRESHOLD: LTTB reduction threshold (default: 1000)
        - TSGRAPH_STALENESS_REFERENCE: first or min (default: first)
        """
        fields = cls.model_fields
        return cls(
            hosts=_split_hosts(os.environ.get("TSGRAPH_TSDB_HOSTS")),
            trim=int(os.environ.get("TSGRAPH_TSDB_TRIM") or fields["trim"].default),
            default_aggregation=os.environ.get("TSGRAPH_DEFAULT_AGGREGATION") or fields["default_aggregation"].default,
            downsample_interval=os.environ.get("TSGRAPH_DOWNSAMPLE_INTERVAL") or fields["downsample_interval"].default,
            downsample_type=os.environ.get("TSGRAPH_DOWNSAMPLE_TYPE") or fields["downsample_type"].default,
            fetch_timeout=float(os.environ.get("TSGRAPH_FETCH_TIMEOUT") or fields["fetch_timeout"].default),
            lttb_threshold=int(os.environ.get("TSGRAPH_LTTB_THRESHOLD") or fields["lttb_threshold"].default),
            staleness_reference=os.environ.get("TSGRAPH_STALENESS_REFERENCE") or fields["staleness_reference"].default,
        )

    def pick_host(self) -> str:
        """Choose one of the configured hosts at random.

        Raises:
            ConfigurationError: If no host is configured
        """
        if not self.hosts:
            raise ConfigurationError("No OpenTSDB Host configured")
        return random.choice(self.hosts)


# Global settings instance
_settings: DatasourceSettings | None = None


def get_settings() -> DatasourceSettings:
    """Get datasource settings.

    Returns cached instance if already initialized.
    """
    global _settings
    if _settings is None:
        _settings = DatasourceSettings.from_env()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None


# Forbidden system directories that cannot be used as cache directories
_FORBIDDEN_PATHS = frozenset(["/", "/etc", "/sys", "/dev", "/bin", "/sbin", "/usr", "/var", "/boot", "/proc"])


def _validate_cache_dir(cache_path: Path) -> None:
    """Validate that cache directory is not a dangerous system path.

    Args:
        cache_path: Path to validate

    Raises:
        ValueError: If path is a forbidden system directory
    """
    resolved_str = str(cache_path.resolve())

    for forbidden in _FORBIDDEN_PATHS:
        if resolved_str == forbidden or resolved_str.rstrip("/") == forbidden:
            raise ValueError(f"TSGRAPH_CACHE_DIR cannot be set to system directory: {forbidden}")


def get_cache_dir() -> Path:
    """Get the cache directory for tsgraph.

    Resolution priority:
    1. TSGRAPH_CACHE_DIR environment variable (if set)
    2. XDG_CACHE_HOME/tsgraph (if XDG_CACHE_HOME is set)
    3. ~/.cache/tsgraph (fallback)

    Returns:
        Path object pointing to the cache directory.

    Raises:
        ValueError: If TSGRAPH_CACHE_DIR points to a system directory
    """
    tsgraph_cache_dir = os.environ.get("TSGRAPH_CACHE_DIR")
    if tsgraph_cache_dir:
        cache_path = Path(tsgraph_cache_dir).expanduser().resolve()
        _validate_cache_dir(cache_path)
        return cache_path

    xdg_cache_home = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache_home:
        return Path(xdg_cache_home).expanduser() / "tsgraph"

    return Path.home() / ".cache" / "tsgraph"
