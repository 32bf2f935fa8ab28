"""
Unit tests for the local tool cache.
"""

from pathlib import Path

from mavenkit.toolchain.tool_cache import LocalToolCache


def _extracted_tool(tmp_path: Path, name: str = "extracted") -> Path:
    tool = tmp_path / name
    (tool / "bin").mkdir(parents=True)
    (tool / "bin" / "mvn").write_text("#!/bin/sh")
    return tool


class TestLocalToolCache:
    """Tests for LocalToolCache."""

    def test_miss_on_empty_cache(self, tmp_path: Path):
        cache = LocalToolCache(tmp_path / "tools")
        assert cache.find_cached_tool("Maven", "3.9.6", "x64") is None

    def test_store_then_find(self, tmp_path: Path):
        cache = LocalToolCache(tmp_path / "tools")

        stored = cache.store_cached_tool(_extracted_tool(tmp_path), "Maven", "3.9.6", "x64")

        assert stored == tmp_path / "tools" / "Maven" / "3.9.6" / "x64"
        assert (stored / "bin" / "mvn").exists()
        assert (stored.parent / "x64.complete").exists()
        assert cache.find_cached_tool("Maven", "3.9.6", "x64") == stored

    def test_partial_install_is_a_miss(self, tmp_path: Path):
        """Test a directory without completion marker is ignored."""
        cache = LocalToolCache(tmp_path / "tools")
        (tmp_path / "tools" / "Java_temurin" / "17" / "x64").mkdir(parents=True)

        assert cache.find_cached_tool("Java_temurin", "17", "x64") is None

    def test_store_replaces_existing(self, tmp_path: Path):
        cache = LocalToolCache(tmp_path / "tools")
        first = cache.store_cached_tool(_extracted_tool(tmp_path, "a"), "Maven", "3.9.6", "x64")
        (first / "stale.txt").write_text("old")

        second = cache.store_cached_tool(_extracted_tool(tmp_path, "b"), "Maven", "3.9.6", "x64")

        assert second == first
        assert not (second / "stale.txt").exists()

    def test_versions_are_separate(self, tmp_path: Path):
        cache = LocalToolCache(tmp_path / "tools")
        cache.store_cached_tool(_extracted_tool(tmp_path), "Maven", "3.9.6", "x64")

        assert cache.find_cached_tool("Maven", "3.9.5", "x64") is None
