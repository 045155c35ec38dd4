"""
Token Cache Unit Tests
"""

import os
import stat

import pytest

from open_kkt.cache import FileCache, MemoryCache, TokenStore
from open_kkt.exceptions import CacheMiss, CacheUnavailable


class TestFileCache:
    """Tests for the file-backed store"""

    @pytest.fixture
    def cache(self, tmp_path) -> FileCache:
        return FileCache(tmp_path / "cache")

    def test_creates_directory(self, tmp_path):
        cache = FileCache(tmp_path / "nested" / "cache")
        assert cache.directory.is_dir()

    def test_round_trip(self, cache: FileCache):
        cache.set("OpenApiToken 42", "token-value")
        assert cache.has("OpenApiToken 42")
        assert cache.get("OpenApiToken 42") == "token-value"

    def test_overwrite(self, cache: FileCache):
        cache.set("key", "first")
        cache.set("key", "second")
        assert cache.get("key") == "second"
        assert [p.name for p in cache.directory.iterdir()] == ["key"]

    def test_file_permissions(self, cache: FileCache):
        cache.set("key", "value")
        mode = stat.S_IMODE(os.stat(cache.directory / "key").st_mode)
        assert mode == 0o600

    def test_missing_entry(self, cache: FileCache):
        assert cache.has("absent") is False
        with pytest.raises(CacheMiss):
            cache.get("absent")

    def test_unreadable_entry(self, cache: FileCache):
        """Should report a read failure distinctly from a missing entry"""
        (cache.directory / "broken").mkdir()
        with pytest.raises(CacheUnavailable) as exc_info:
            cache.get("broken")
        assert not isinstance(exc_info.value, CacheMiss)

    def test_delete(self, cache: FileCache):
        cache.set("key", "value")
        cache.delete("key")
        cache.delete("key")
        assert cache.has("key") is False

    @pytest.mark.parametrize("key", ["", "..", "../escape", "a/b", "a\\b"])
    def test_invalid_keys(self, cache: FileCache, key: str):
        with pytest.raises(CacheUnavailable):
            cache.set(key, "value")

    def test_directory_cannot_be_created(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        with pytest.raises(CacheUnavailable):
            FileCache(blocker / "cache")


class TestMemoryCache:
    """Tests for the in-process store"""

    def test_round_trip_and_miss(self):
        cache = MemoryCache()
        assert cache.has("key") is False
        with pytest.raises(CacheMiss):
            cache.get("key")
        cache.set("key", "value")
        assert cache.get("key") == "value"
        cache.delete("key")
        assert cache.has("key") is False


class TestTokenStore:
    """Tests for the token cache facade"""

    def test_round_trip(self):
        store = TokenStore(MemoryCache())
        store.set("42", "token-value")
        assert store.get("42") == "token-value"
        assert store.has("42") is True

    def test_key_format(self):
        cache = MemoryCache()
        TokenStore(cache).set("42", "token-value")
        assert cache.get("OpenApiToken 42") == "token-value"

    def test_scoped_by_app_id(self):
        store = TokenStore(MemoryCache())
        store.set("1", "first")
        store.set("2", "second")
        assert store.get("1") == "first"
        assert store.get("2") == "second"

    def test_load_absent(self):
        assert TokenStore(MemoryCache()).load("42") is None

    def test_load_entry_vanished(self):
        class RacyStore(MemoryCache):
            def has(self, key):
                return True

        assert TokenStore(RacyStore()).load("42") is None

    def test_backing_failure_wrapped(self):
        class FailingStore(MemoryCache):
            def set(self, key, value):
                raise OSError("read-only file system")

        with pytest.raises(CacheUnavailable) as exc_info:
            TokenStore(FailingStore()).set("42", "token")
        assert isinstance(exc_info.value.cause, OSError)

    def test_load_read_failure_propagates(self, tmp_path):
        cache = FileCache(tmp_path)
        (tmp_path / "OpenApiToken 42").mkdir()

        class ExistingStore:
            def has(self, key):
                return True

            def get(self, key):
                return cache.get(key)

            def set(self, key, value):
                cache.set(key, value)

            def delete(self, key):
                cache.delete(key)

        with pytest.raises(CacheUnavailable):
            TokenStore(ExistingStore()).load("42")

    def test_file_backed_round_trip(self, tmp_path):
        store = TokenStore(FileCache(tmp_path))
        store.set("42", "token-value")
        assert TokenStore(FileCache(tmp_path)).load("42") == "token-value"
