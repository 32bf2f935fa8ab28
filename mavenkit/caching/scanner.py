"""
Maven manifest discovery.

Finds the ``pom.xml`` files of a (possibly multi-module) project. The
discovery order is part of the cache key, so it must not change for an
unchanged tree: entries are visited in sorted name order, depth first.
"""

import logging
from pathlib import Path
from typing import List, Tuple

logger = logging.getLogger(__name__)

MANIFEST_NAME = "pom.xml"
BUILD_OUTPUT_DIR = "target"
MAX_DEPTH = 5


class ManifestScanner:
    """
    Locate manifests below a project root.

    The root manifest always comes first. Subdirectories are searched down
    to ``max_depth`` levels, skipping hidden directories, the build-output
    directory and symlinked directories. Unreadable directories are skipped.

    The bound is inclusive for manifests and exclusive for listing: with the
    default of 5, ``a/b/c/d/e/pom.xml`` is found but directories at depth 5
    are never listed, so a module six levels below the root is not. This is
    one level shallower than a walk that lists the depth-5 directories too.
    Raise ``max_depth`` for deeper layouts.

    Example:
        >>> scanner = ManifestScanner()
        >>> for manifest in scanner.scan(Path("my-project")):
        ...     print(manifest)
        my-project/pom.xml
        my-project/core/pom.xml
        my-project/web/pom.xml
    """

    def __init__(self, max_depth: int = MAX_DEPTH):
        self.max_depth = max_depth

    def scan(self, root: Path) -> List[Path]:
        """
        Find manifests below ``root``.

        Never raises; a missing root yields an empty list.
        """
        root = Path(root)
        manifests: List[Path] = []

        root_manifest = root / MANIFEST_NAME
        if root_manifest.is_file():
            manifests.append(root_manifest)

        # Explicit work stack of (directory, depth); the root is depth 0
        stack: List[Tuple[Path, int]] = [(root, 0)]

        while stack:
            directory, depth = stack.pop()

            if depth > 0:
                manifest = directory / MANIFEST_NAME
                if manifest.is_file():
                    manifests.append(manifest)

            if depth >= self.max_depth:
                continue

            try:
                entries = sorted(directory.iterdir(), key=lambda p: p.name)
            except OSError as e:
                logger.debug(f"Skipping unreadable directory {directory}: {e}")
                continue

            children = [
                (entry, depth + 1) for entry in entries if self._is_candidate_dir(entry)
            ]
            # Reversed so the first child in name order is popped first
            stack.extend(reversed(children))

        logger.debug(f"Found {len(manifests)} manifest(s) under {root}")
        return manifests

    @staticmethod
    def _is_candidate_dir(entry: Path) -> bool:
        name = entry.name
        if name.startswith(".") or name == BUILD_OUTPUT_DIR:
            return False
        try:
            return entry.is_dir() and not entry.is_symlink()
        except OSError:
            return False
