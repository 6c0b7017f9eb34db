"""Tests for config module."""

from pathlib import Path

import pytest

from tsgraph.config import DatasourceSettings, get_cache_dir, get_settings, reset_settings
from tsgraph.exceptions import ConfigurationError


class TestGetCacheDir:
    """Tests for get_cache_dir function."""

    def test_tsgraph_cache_dir_takes_priority(self, monkeypatch):
        """Test that TSGRAPH_CACHE_DIR has highest priority."""
        monkeypatch.setenv("TSGRAPH_CACHE_DIR", "/custom/tsgraph/cache")
        monkeypatch.setenv("XDG_CACHE_HOME", "/should/not/be/used")

        assert get_cache_dir() == Path("/custom/tsgraph/cache")

    def test_xdg_cache_home_used_when_tsgraph_cache_dir_not_set(self, monkeypatch):
        """Test that XDG_CACHE_HOME/tsgraph is used when TSGRAPH_CACHE_DIR not set."""
        monkeypatch.setenv("XDG_CACHE_HOME", "/home/user/.cache")

        assert get_cache_dir() == Path("/home/user/.cache/tsgraph")

    def test_fallback_to_home_cache(self):
        """Test fallback to ~/.cache/tsgraph when no env vars set."""
        assert get_cache_dir() == Path.home() / ".cache" / "tsgraph"

    def test_path_expansion_with_tilde(self, monkeypatch):
        """Test that ~ is expanded in TSGRAPH_CACHE_DIR."""
        monkeypatch.setenv("TSGRAPH_CACHE_DIR", "~/custom/cache")

        result = get_cache_dir()

        assert result == Path.home() / "custom" / "cache"
        assert "~" not in str(result)

    def test_system_directory_rejected(self, monkeypatch):
        """Test that system directories cannot be used as cache directory."""
        monkeypatch.setenv("TSGRAPH_CACHE_DIR", "/etc")

        with pytest.raises(ValueError, match="system directory"):
            get_cache_dir()


class TestDatasourceSettings:
    """Tests for DatasourceSettings."""

    def test_defaults(self):
        settings = DatasourceSettings.from_env()

        assert settings.hosts == []
        assert settings.trim == 0
        assert settings.default_aggregation == "sum"
        assert settings.downsample_interval == "1m"
        assert settings.downsample_type == "avg"
        assert settings.fetch_timeout == 300.0
        assert settings.lttb_threshold == 1000
        assert settings.staleness_reference == "first"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("TSGRAPH_TSDB_HOSTS", "tsdb1:4242, tsdb2:4242,")
        monkeypatch.setenv("TSGRAPH_TSDB_TRIM", "30")
        monkeypatch.setenv("TSGRAPH_DOWNSAMPLE_INTERVAL", "5m")
        monkeypatch.setenv("TSGRAPH_LTTB_THRESHOLD", "0")
        monkeypatch.setenv("TSGRAPH_STALENESS_REFERENCE", "min")

        settings = DatasourceSettings.from_env()

        assert settings.hosts == ["tsdb1:4242", "tsdb2:4242"]
        assert settings.trim == 30
        assert settings.downsample_interval == "5m"
        assert settings.lttb_threshold == 0
        assert settings.staleness_reference == "min"

    def test_invalid_staleness_reference_rejected(self, monkeypatch):
        monkeypatch.setenv("TSGRAPH_STALENESS_REFERENCE", "last")

        with pytest.raises(ValueError):
            DatasourceSettings.from_env()

    def test_pick_host_chooses_configured_host(self):
        settings = DatasourceSettings(hosts=["a:4242", "b:4242"])

        for _ in range(10):
            assert settings.pick_host() in ("a:4242", "b:4242")

    def test_pick_host_without_hosts_raises(self):
        with pytest.raises(ConfigurationError, match="No OpenTSDB Host configured"):
            DatasourceSettings().pick_host()

    def test_get_settings_is_cached_until_reset(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("TSGRAPH_TSDB_TRIM", "10")

        assert get_settings() is first

        reset_settings()
        assert get_settings().trim == 10
