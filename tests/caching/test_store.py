"""
Unit tests for dependency cache restore and save.
"""

import pytest
from pathlib import Path
from unittest.mock import Mock

from mavenkit.caching.keys import CacheKey
from mavenkit.caching.store import CacheKeyStore, RestoreResult, format_bytes
from mavenkit.core.exceptions import CacheRestoreFailure, CacheSaveFailure
from mavenkit.core.state import CACHE_KEY_STATE, RunStateStore

KEY = CacheKey(digest_hex="abc123")
CHAIN = ["maven-deps-linux-17-3.9.6", "maven-deps-linux-17", "maven-deps-linux", "maven-deps"]


@pytest.fixture
def repository(tmp_path: Path) -> Path:
    repo = tmp_path / "repository"
    repo.mkdir()
    (repo / "lib.jar").write_bytes(b"x" * 2048)
    return repo


@pytest.fixture
def backend():
    return Mock()


@pytest.fixture
def state_store():
    return RunStateStore()


@pytest.fixture
def store(backend, state_store, repository):
    return CacheKeyStore(backend=backend, state_store=state_store, repository=repository)


class TestRestore:
    """Tests for CacheKeyStore.restore."""

    def test_exact_hit(self, store, backend, repository):
        backend.restore_cache.return_value = KEY.value

        result = store.restore(KEY, CHAIN)

        assert result == RestoreResult(hit=True, matched_key=KEY.value, exact=True)
        backend.restore_cache.assert_called_once_with([repository], KEY.value, CHAIN)

    def test_fallback_hit_is_not_exact(self, store, backend):
        backend.restore_cache.return_value = "maven-deps-linux-17"

        result = store.restore(KEY, CHAIN)

        assert result.hit is True
        assert result.exact is False
        assert result.matched_key == "maven-deps-linux-17"

    def test_miss(self, store, backend):
        backend.restore_cache.return_value = None

        assert store.restore(KEY, CHAIN) == RestoreResult(hit=False)

    def test_backend_error_is_a_miss(self, store, backend):
        backend.restore_cache.side_effect = CacheRestoreFailure("unreachable")

        assert store.restore(KEY, CHAIN).hit is False

    def test_disabled(self, backend, repository):
        store = CacheKeyStore(backend=backend, repository=repository, enabled=False)

        assert store.restore(KEY, CHAIN).hit is False
        backend.restore_cache.assert_not_called()


class TestSave:
    """Tests for CacheKeyStore.save."""

    def test_save(self, store, backend, state_store, repository):
        assert store.save(KEY) is True

        backend.save_cache.assert_called_once_with([repository], KEY.value)
        assert state_store.get_state(CACHE_KEY_STATE) == KEY.digest_hex

    def test_second_save_of_same_key_is_noop(self, store, backend):
        assert store.save(KEY) is True
        assert store.save(KEY) is False

        assert backend.save_cache.call_count == 1

    def test_different_key_is_saved(self, store, backend):
        store.save(KEY)

        assert store.save(CacheKey(digest_hex="def456")) is True
        assert backend.save_cache.call_count == 2

    def test_gate_shared_through_state_file(self, backend, repository, tmp_path: Path):
        state_file = tmp_path / "state.json"
        first = CacheKeyStore(backend, RunStateStore(state_file), repository)
        second = CacheKeyStore(backend, RunStateStore(state_file), repository)

        assert first.save(KEY) is True
        assert second.save(KEY) is False
        assert backend.save_cache.call_count == 1

    def test_state_write_failure_keeps_save_successful(
        self, backend, repository, tmp_path: Path
    ):
        """A saved entry stays saved when the run state cannot be written."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        store = CacheKeyStore(backend, RunStateStore(blocker / "state.json"), repository)

        assert store.save(KEY) is True
        backend.save_cache.assert_called_once_with([repository], KEY.value)

    def test_missing_repository_skips(self, backend, state_store, tmp_path: Path):
        store = CacheKeyStore(backend, state_store, tmp_path / "missing")

        assert store.save(KEY) is False
        backend.save_cache.assert_not_called()
        assert state_store.get_state(CACHE_KEY_STATE) == ""

    def test_backend_error_returns_false(self, store, backend, state_store):
        backend.save_cache.side_effect = CacheSaveFailure("quota exceeded")

        assert store.save(KEY) is False
        assert state_store.get_state(CACHE_KEY_STATE) == ""

    def test_retry_after_backend_error(self, store, backend):
        backend.save_cache.side_effect = [CacheSaveFailure("flaky"), None]

        assert store.save(KEY) is False
        assert store.save(KEY) is True

    def test_disabled(self, backend, repository):
        store = CacheKeyStore(backend=backend, repository=repository, enabled=False)

        assert store.save(KEY) is False
        backend.save_cache.assert_not_called()


class TestCacheStats:
    """Tests for get_cache_stats and format_bytes."""

    def test_stats(self, store):
        stats = store.get_cache_stats()

        assert stats == {"size": 2048, "size_formatted": "2.0 KB", "files": 1}

    def test_stats_missing_repository(self, backend, tmp_path: Path):
        store = CacheKeyStore(backend, repository=tmp_path / "missing")

        assert store.get_cache_stats() == {"size": 0, "size_formatted": "0 B", "files": 0}

    @pytest.mark.parametrize(
        "size,expected",
        [
            (0, "0 B"),
            (512, "512 B"),
            (1536, "1.5 KB"),
            (5 * 1024 * 1024, "5.0 MB"),
            (3 * 1024**3, "3.0 GB"),
        ],
    )
    def test_format_bytes(self, size, expected):
        assert format_bytes(size) == expected
