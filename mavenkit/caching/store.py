"""
Dependency cache restore and save.

CacheKeyStore drives a CacheBackend for the local Maven repository. Cache
problems never fail a build: backend errors are logged as warnings and
reported as a miss (restore) or as nothing saved (save).

Saving is idempotent within one build invocation: the digest of the last
saved key is kept in run state, and saving the same key again is a no-op.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from mavenkit.caching.backend import CacheBackend, LocalCacheBackend
from mavenkit.caching.keys import CacheKey
from mavenkit.core.directory import get_maven_repository_dir
from mavenkit.core.exceptions import StateError
from mavenkit.core.filesystem import directory_stats
from mavenkit.core.state import RunCacheState, RunStateStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RestoreResult:
    """
    Outcome of a cache restore.

    Attributes:
        hit: Whether any entry was restored
        matched_key: Key of the restored entry
        exact: True when the primary key matched; a fallback match leaves
            the dependency store only partially warm
    """

    hit: bool
    matched_key: Optional[str] = None
    exact: bool = False

    @classmethod
    def miss(cls) -> "RestoreResult":
        return cls(hit=False)


def format_bytes(size: int) -> str:
    """
    Render a byte count for humans.

    Example:
        >>> format_bytes(0)
        '0 B'
        >>> format_bytes(1536)
        '1.5 KB'
    """
    if size == 0:
        return "0 B"

    units = ["B", "KB", "MB", "GB", "TB"]
    value = float(size)
    index = 0
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1

    return f"{value:.1f} {units[index]}" if index else f"{int(value)} B"


class CacheKeyStore:
    """
    Restore and save the dependency store through a cache backend.

    Example:
        >>> store = CacheKeyStore(LocalCacheBackend(), RunStateStore())
        >>> result = store.restore(key, chain)
        >>> # ... run the build ...
        >>> store.save(key)
        True
    """

    def __init__(
        self,
        backend: Optional[CacheBackend] = None,
        state_store: Optional[RunStateStore] = None,
        repository: Optional[Path] = None,
        enabled: bool = True,
    ):
        """
        Initialize cache key store.

        Args:
            backend: Cache backend (default: LocalCacheBackend())
            state_store: Run state of this invocation (default: in-memory)
            repository: Dependency store directory (default: ~/.m2/repository)
            enabled: When False, restore and save do nothing
        """
        self.backend = backend or LocalCacheBackend()
        self.state_store = state_store or RunStateStore()
        self.repository = (
            Path(repository) if repository is not None else get_maven_repository_dir()
        )
        self.enabled = enabled

    def restore(self, key: CacheKey, chain: Sequence[str]) -> RestoreResult:
        """Restore the dependency store from ``key`` or the best fallback."""
        if not self.enabled:
            logger.info("Dependency caching disabled, skipping restore")
            return RestoreResult.miss()

        logger.info(f"Restoring dependency cache with key: {key}")

        try:
            matched = self.backend.restore_cache(
                [self.repository], key.value, list(chain)
            )
        except Exception as e:
            logger.warning(f"Cache restore failed: {e}")
            return RestoreResult.miss()

        if not matched:
            logger.info("No dependency cache found")
            return RestoreResult.miss()

        exact = matched == key.value
        if exact:
            logger.info(f"Dependency cache restored from key: {matched}")
        else:
            logger.info(f"Dependency cache partially restored from key: {matched}")

        return RestoreResult(hit=True, matched_key=matched, exact=exact)

    def save(self, key: CacheKey) -> bool:
        """
        Save the dependency store under ``key``.

        Returns:
            True if the backend stored a new entry
        """
        if not self.enabled:
            logger.info("Dependency caching disabled, skipping save")
            return False

        state = RunCacheState.load(self.state_store)
        if state.last_saved_digest == key.digest_hex:
            logger.info("Dependency cache already saved for this key, skipping")
            return False

        if not self.repository.exists():
            logger.warning(
                f"Maven repository not found at {self.repository}, skipping cache save"
            )
            return False

        logger.info(f"Saving dependency cache with key: {key}")

        try:
            self.backend.save_cache([self.repository], key.value)
        except Exception as e:
            logger.warning(f"Cache save failed: {e}")
            return False

        state.last_saved_digest = key.digest_hex
        try:
            state.persist(self.state_store)
        except StateError as e:
            # The entry is stored; a later save in this run may repeat it
            logger.warning(f"Could not record saved cache key: {e}")

        logger.info("Dependency cache saved successfully")
        return True

    def get_cache_stats(self) -> Dict[str, Any]:
        """
        Size of the dependency store.

        Returns:
            Dict with 'size', 'size_formatted' and 'files' (all zero/'0 B'
            when the store is missing or unreadable)
        """
        if not self.repository.exists():
            return {"size": 0, "size_formatted": "0 B", "files": 0}

        try:
            stats = directory_stats(self.repository)
        except OSError as e:
            logger.warning(f"Could not get cache stats: {e}")
            return {"size": 0, "size_formatted": "0 B", "files": 0}

        return {
            "size": stats.size_bytes,
            "size_formatted": format_bytes(stats.size_bytes),
            "files": stats.file_count,
        }
