"""
Local tool cache.

Installed tools are kept under ``<root>/<name>/<version>/<arch>/`` next to
an ``<arch>.complete`` marker, the layout CI runners use for their hosted
tool cache. A directory without its marker is a partial install and is
never returned.
"""

import logging
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from filelock import FileLock, Timeout

from mavenkit.core.directory import get_tool_cache_dir
from mavenkit.core.filesystem import safe_rmtree
from mavenkit.core.platform import detect_platform

logger = logging.getLogger(__name__)


class ToolCacheLockTimeout(Exception):
    """Raised when the tool cache lock cannot be acquired."""

    pass


class LocalToolCache:
    """
    Directory-backed cache of installed tools.

    Example:
        >>> cache = LocalToolCache()
        >>> cached = cache.find_cached_tool("Maven", "3.9.6")
        >>> if cached is None:
        ...     cached = cache.store_cached_tool(extracted_dir, "Maven", "3.9.6")
    """

    def __init__(self, root: Optional[Path] = None, lock_timeout: int = 300):
        """
        Initialize tool cache.

        Args:
            root: Cache root (default: ~/.mavenkit/tools)
            lock_timeout: Timeout in seconds for acquiring the cache lock
        """
        self.root = Path(root) if root is not None else get_tool_cache_dir()
        self.lock_timeout = lock_timeout

    def _tool_dir(self, name: str, version: str, arch: Optional[str]) -> Path:
        return self.root / name / version / (arch or detect_platform().arch)

    @staticmethod
    def _marker(tool_dir: Path) -> Path:
        return tool_dir.parent / f"{tool_dir.name}.complete"

    @contextmanager
    def _lock(self, name: str):
        lock_path = self.root / ".locks" / f"{name}.lock"
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with FileLock(lock_path, timeout=self.lock_timeout):
                yield
        except Timeout as e:
            raise ToolCacheLockTimeout(
                f"Could not acquire tool cache lock for {name} "
                f"within {self.lock_timeout} seconds"
            ) from e

    def find_cached_tool(
        self, name: str, version: str, arch: Optional[str] = None
    ) -> Optional[Path]:
        """
        Look up a completely stored tool.

        Returns:
            Path to the tool directory, or None on a miss
        """
        tool_dir = self._tool_dir(name, version, arch)
        if tool_dir.is_dir() and self._marker(tool_dir).exists():
            logger.debug(f"Tool cache hit: {name} {version} at {tool_dir}")
            return tool_dir

        logger.debug(f"Tool cache miss: {name} {version}")
        return None

    def store_cached_tool(
        self, source_dir: Path, name: str, version: str, arch: Optional[str] = None
    ) -> Path:
        """
        Move an extracted tool directory into the cache.

        Any previous (possibly partial) copy of the same tool is replaced.

        Returns:
            Path to the cached tool directory
        """
        tool_dir = self._tool_dir(name, version, arch)
        marker = self._marker(tool_dir)

        with self._lock(name):
            marker.unlink(missing_ok=True)
            if tool_dir.exists():
                safe_rmtree(tool_dir, require_prefix=self.root)

            tool_dir.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(source_dir), str(tool_dir))
            marker.touch()

        logger.info(f"Cached {name} {version} at {tool_dir}")
        return tool_dir
