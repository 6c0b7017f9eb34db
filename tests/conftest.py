"""
Pytest configuration and shared fixtures.
"""

import pytest

from tsgraph.config import reset_settings


@pytest.fixture(autouse=True)
def clean_env_for_tests(monkeypatch):
    """Clean environment variables for test isolation.

    Ensures tests don't accidentally write to the user's real cache directory
    or pick up a developer's OpenTSDB configuration.

    This fixture is applied automatically to all tests (autouse=True).
    """
    for name in (
        "TSGRAPH_CACHE_DIR",
        "TSGRAPH_TSDB_HOSTS",
        "TSGRAPH_TSDB_TRIM",
        "TSGRAPH_DEFAULT_AGGREGATION",
        "TSGRAPH_DOWNSAMPLE_INTERVAL",
        "TSGRAPH_DOWNSAMPLE_TYPE",
        "TSGRAPH_FETCH_TIMEOUT",
        "TSGRAPH_LTTB_THRESHOLD",
        "TSGRAPH_STALENESS_REFERENCE",
        "XDG_CACHE_HOME",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def cache_dir(tmp_path):
    """Temporary cache directory."""
    return tmp_path / "cache"
