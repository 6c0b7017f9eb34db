"""Tests for the query cache file store."""

import gc
import threading

import msgpack
import pytest
from fakes import points

from tsgraph.cache import store
from tsgraph.cache import (
    QueryCache,
    cache_end_stamp,
    cache_file_path,
    compute_cache_key,
    is_stale,
    pack_series,
    unpack_series,
)


class TestCacheKeys:
    """Tests for cache key hashing and paths."""

    def test_key_is_md5_hex(self):
        key = compute_cache_key("&m=sum:nointerpolation:cpu.load", "1m", "avg", "alice")

        assert len(key) == 32
        int(key, 16)

    def test_key_depends_on_every_part(self):
        base = compute_cache_key("&m=sum:a", "1m", "avg", "alice")

        assert compute_cache_key("&m=sum:a", "1m", "avg", "alice") == base
        assert compute_cache_key("&m=sum:b", "1m", "avg", "alice") != base
        assert compute_cache_key("&m=sum:a", "5m", "avg", "alice") != base
        assert compute_cache_key("&m=sum:a", "1m", "max", "alice") != base
        assert compute_cache_key("&m=sum:a", "1m", "avg", "bob") != base

    def test_paths(self, tmp_path):
        assert cache_file_path(tmp_path, "abc") == tmp_path / "query_cache" / "abc.cache"
        assert cache_file_path(tmp_path, "abc", week_over_week=True) == tmp_path / "query_cache" / "abc_wow.cache"


class TestQueryCache:
    """Tests for loading and saving cache files."""

    def test_missing_file_loads_as_none(self, tmp_path):
        cache = QueryCache(tmp_path / "missing.cache")

        assert not cache.exists()
        assert cache.load() is None

    def test_save_then_load_preserves_order(self, tmp_path):
        cache = QueryCache(tmp_path / "query_cache" / "k.cache")
        data = {"b ": points((1, "1.5")), "a ": points((1, "2"), (2, "3"))}

        cache.save(data)

        assert cache.exists()
        loaded = cache.load()
        assert loaded == data
        assert list(loaded) == ["b ", "a "]

    def test_save_replaces_whole_file(self, tmp_path):
        cache = QueryCache(tmp_path / "k.cache")
        cache.save({"a ": points((1, 1))})

        cache.save({"b ": points((2, 2))})

        assert list(cache.load()) == ["b "]

    def test_save_leaves_no_temp_files(self, tmp_path):
        cache = QueryCache(tmp_path / "k.cache")

        cache.save({"a ": points((1, 1))})

        assert [p.name for p in tmp_path.iterdir()] == ["k.cache"]

    @pytest.mark.parametrize(
        "content",
        [
            b"",
            b"not msgpack at all \xc1",
            msgpack.packb([1, 2, 3]),
            msgpack.packb({"a ": [[1]]}),
            msgpack.packb({"a ": [["x", "1"]]}),
            msgpack.packb({"a ": "nope"}),
        ],
    )
    def test_corrupt_file_loads_as_none(self, tmp_path, content):
        path = tmp_path / "k.cache"
        path.write_bytes(content)

        assert QueryCache(path).load() is None

    def test_delete(self, tmp_path):
        cache = QueryCache(tmp_path / "k.cache")
        cache.save({"a ": points((1, 1))})

        assert cache.delete() is True
        assert not cache.exists()
        assert cache.delete() is False

    def test_locked_is_shared_per_path(self, tmp_path):
        first = QueryCache(tmp_path / "k.cache")
        second = QueryCache(tmp_path / "k.cache")
        acquired = []

        with first.locked():
            thread = threading.Thread(target=lambda: acquired.append(second.locked().__enter__() is second))
            thread.start()
            thread.join(timeout=0.2)
            assert acquired == []

        thread.join(timeout=2)
        assert acquired == [True]

    def test_released_locks_are_not_retained(self, tmp_path):
        cache = QueryCache(tmp_path / "k.cache")

        with cache.locked():
            assert str(cache.path) in store._locks

        gc.collect()
        assert str(cache.path) not in store._locks

    def test_pack_roundtrip_of_values_as_strings(self):
        data = {"a ": points((1, "0.30000000000000004"))}

        assert unpack_series(pack_series(data))["a "][0].value == "0.30000000000000004"


class TestStaleness:
    """Tests for cache freshness checks."""

    def test_first_series_is_reference(self):
        cached = {"a ": points((50, 1), (100, 1)), "b ": points((50, 1), (500, 1))}

        assert cache_end_stamp(cached) == 100
        assert is_stale(cached, 150)
        assert not is_stale(cached, 100)

    def test_min_reference(self):
        cached = {"a ": points((50, 1), (500, 1)), "b ": points((50, 1), (100, 1))}

        assert cache_end_stamp(cached, "first") == 500
        assert cache_end_stamp(cached, "min") == 100
        assert not is_stale(cached, 150, "first")
        assert is_stale(cached, 150, "min")

    def test_empty_cache_is_stale(self):
        assert cache_end_stamp({}) is None
        assert is_stale({}, 0)
        assert is_stale({"a ": []}, 0)
