"""
Dependency cache backends.

A backend persists directory trees under string keys. Entries are
immutable: once a key has been saved, saving it again does nothing.
Restore follows the usual CI cache convention: the primary key must match
exactly, fallback keys match the most recently saved entry whose key
starts with them.
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from filelock import FileLock, Timeout

from mavenkit.core.directory import get_dependency_cache_dir
from mavenkit.core.exceptions import CacheRestoreFailure, CacheSaveFailure
from mavenkit.core.filesystem import (
    FilesystemError,
    atomic_write,
    create_archive,
    extract_archive,
)

logger = logging.getLogger(__name__)


class CacheBackend(ABC):
    """Interface for dependency cache storage."""

    @abstractmethod
    def restore_cache(
        self, paths: Sequence[Path], primary_key: str, fallback_keys: Sequence[str]
    ) -> Optional[str]:
        """
        Restore ``paths`` from the best matching entry.

        Returns:
            The key of the restored entry, or None on a miss

        Raises:
            CacheRestoreFailure: If the backend fails
        """

    @abstractmethod
    def save_cache(self, paths: Sequence[Path], key: str) -> None:
        """
        Save ``paths`` under ``key``.

        Raises:
            CacheSaveFailure: If the backend fails
        """


class LocalCacheBackend(CacheBackend):
    """
    Cache backend storing entries as tar.gz archives in a local directory.

    Layout::

        <directory>/
            index.json          # key -> {"archive", "created"}
            index.lock
            entries/<n>.tar.gz

    Paths are archived under their absolute location, so a restore puts
    them back where they were saved from.

    Example:
        >>> backend = LocalCacheBackend(Path("/tmp/cache"))
        >>> backend.save_cache([Path.home() / ".m2" / "repository"], "maven-deps-abc")
        >>> backend.restore_cache([Path.home() / ".m2" / "repository"],
        ...                       "maven-deps-def", ["maven-deps-linux", "maven-deps"])
        'maven-deps-abc'
    """

    def __init__(self, directory: Optional[Path] = None, lock_timeout: int = 60):
        self.directory = (
            Path(directory) if directory is not None else get_dependency_cache_dir()
        )
        self.index_path = self.directory / "index.json"
        self.entries_dir = self.directory / "entries"
        self.lock_timeout = lock_timeout

    @contextmanager
    def _lock(self):
        self.directory.mkdir(parents=True, exist_ok=True)
        try:
            with FileLock(self.directory / "index.lock", timeout=self.lock_timeout):
                yield
        except Timeout as e:
            raise CacheSaveFailure(
                f"Could not acquire cache lock within {self.lock_timeout} seconds"
            ) from e

    def _load_index(self) -> Dict[str, Dict]:
        if not self.index_path.exists():
            return {}

        try:
            with open(self.index_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Invalid cache index {self.index_path}, ignoring: {e}")
            return {}

        return data.get("entries", {}) if isinstance(data, dict) else {}

    def _save_index(self, entries: Dict[str, Dict]) -> None:
        atomic_write(
            self.index_path, json.dumps({"version": 1, "entries": entries}, indent=2)
        )

    @staticmethod
    def _match(
        entries: Dict[str, Dict], primary_key: str, fallback_keys: Sequence[str]
    ) -> Optional[str]:
        if primary_key in entries:
            return primary_key

        for prefix in fallback_keys:
            candidates = [key for key in entries if key.startswith(prefix)]
            if candidates:
                return max(candidates, key=lambda k: entries[k].get("created", 0))

        return None

    def restore_cache(
        self, paths: Sequence[Path], primary_key: str, fallback_keys: Sequence[str]
    ) -> Optional[str]:
        entries = self._load_index()
        matched = self._match(entries, primary_key, fallback_keys)
        if matched is None:
            return None

        archive = self.entries_dir / entries[matched]["archive"]
        anchor = Path(Path(paths[0]).absolute().anchor) if paths else Path("/")

        logger.info(f"Restoring cache entry {matched}")
        try:
            extract_archive(archive, anchor)
        except FilesystemError as e:
            raise CacheRestoreFailure(f"Failed to restore {matched}: {e}") from e

        return matched

    def save_cache(self, paths: Sequence[Path], key: str) -> None:
        with self._lock():
            entries = self._load_index()
            if key in entries:
                logger.info(f"Cache entry {key} already exists, not saving")
                return

            archive_name = f"{len(entries) + 1}-{int(time.time())}.tar.gz"
            try:
                create_archive(self.entries_dir / archive_name, paths)
            except OSError as e:
                raise CacheSaveFailure(f"Failed to archive {key}: {e}") from e

            entries[key] = {"archive": archive_name, "created": time.time()}
            self._save_index(entries)

        logger.info(f"Saved cache entry {key}")

    def list_keys(self) -> List[str]:
        """Saved keys, oldest first."""
        entries = self._load_index()
        return sorted(entries, key=lambda k: entries[k].get("created", 0))
