"""
Unit tests for the local cache backend.
"""

import json
import pytest
from pathlib import Path
from unittest.mock import patch

from mavenkit.caching.backend import LocalCacheBackend
from mavenkit.core.exceptions import CacheRestoreFailure, CacheSaveFailure


@pytest.fixture
def repository(tmp_path: Path) -> Path:
    repo = tmp_path / "m2" / "repository"
    (repo / "org" / "example").mkdir(parents=True)
    (repo / "org" / "example" / "lib-1.0.jar").write_bytes(b"jar-v1")
    return repo


@pytest.fixture
def backend(tmp_path: Path) -> LocalCacheBackend:
    return LocalCacheBackend(tmp_path / "cache")


class TestLocalCacheBackend:
    """Tests for LocalCacheBackend."""

    def test_miss_on_empty_cache(self, backend, repository):
        assert backend.restore_cache([repository], "maven-deps-abc", ["maven-deps"]) is None

    def test_save_and_exact_restore(self, backend, repository):
        backend.save_cache([repository], "maven-deps-abc")
        jar = repository / "org" / "example" / "lib-1.0.jar"
        jar.unlink()

        matched = backend.restore_cache([repository], "maven-deps-abc", [])

        assert matched == "maven-deps-abc"
        assert jar.read_bytes() == b"jar-v1"

    def test_fallback_prefix_restore(self, backend, repository):
        backend.save_cache([repository], "maven-deps-linux-17-3.9.6-old")

        matched = backend.restore_cache(
            [repository],
            "maven-deps-new",
            ["maven-deps-linux-17-3.9.6", "maven-deps-linux", "maven-deps"],
        )

        assert matched == "maven-deps-linux-17-3.9.6-old"

    def test_fallback_prefers_newest_entry(self, backend, repository):
        with patch("mavenkit.caching.backend.time.time", return_value=100.0):
            backend.save_cache([repository], "maven-deps-linux-a")
        with patch("mavenkit.caching.backend.time.time", return_value=200.0):
            backend.save_cache([repository], "maven-deps-linux-b")

        matched = backend.restore_cache([repository], "maven-deps-x", ["maven-deps-linux"])

        assert matched == "maven-deps-linux-b"

    def test_more_specific_fallback_wins(self, backend, repository):
        with patch("mavenkit.caching.backend.time.time", return_value=100.0):
            backend.save_cache([repository], "maven-deps-linux-17-x")
        with patch("mavenkit.caching.backend.time.time", return_value=200.0):
            backend.save_cache([repository], "maven-deps-linux-21-y")

        matched = backend.restore_cache(
            [repository], "maven-deps-z", ["maven-deps-linux-17", "maven-deps-linux"]
        )

        assert matched == "maven-deps-linux-17-x"

    def test_saving_existing_key_is_noop(self, backend, repository):
        backend.save_cache([repository], "maven-deps-abc")
        (repository / "org" / "example" / "lib-1.0.jar").write_bytes(b"jar-v2")

        backend.save_cache([repository], "maven-deps-abc")

        assert backend.list_keys() == ["maven-deps-abc"]
        assert len(list((backend.entries_dir).iterdir())) == 1

    def test_index_format(self, backend, repository):
        backend.save_cache([repository], "maven-deps-abc")

        index = json.loads(backend.index_path.read_text())

        assert index["version"] == 1
        assert "maven-deps-abc" in index["entries"]

    def test_missing_archive_raises_restore_failure(self, backend, repository):
        backend.save_cache([repository], "maven-deps-abc")
        for archive in backend.entries_dir.iterdir():
            archive.unlink()

        with pytest.raises(CacheRestoreFailure):
            backend.restore_cache([repository], "maven-deps-abc", [])

    def test_archive_error_raises_save_failure(self, backend, repository):
        with patch(
            "mavenkit.caching.backend.create_archive", side_effect=OSError("disk full")
        ):
            with pytest.raises(CacheSaveFailure, match="disk full"):
                backend.save_cache([repository], "maven-deps-abc")

        assert backend.list_keys() == []
