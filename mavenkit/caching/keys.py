"""
Dependency cache key derivation.

The cache key is a SHA-256 digest over the host OS, the Java and Maven
requirement strings and the raw bytes of every manifest, in discovery
order. Any byte change in any manifest, or a changed requirement, yields
a new key. The restore chain lists progressively broader key prefixes so a
miss on the exact key can still warm the dependency store.

Example:
    >>> context = CacheContext(os="linux", runtime_requirement="17",
    ...                        build_tool_requirement="3.9.5")
    >>> deriver = CacheKeyDeriver()
    >>> key = deriver.derive_for_directory(Path("my-project"), context)
    >>> deriver.derive_restore_chain(context)
    ['maven-deps-linux-17-3.9.5', 'maven-deps-linux-17', 'maven-deps-linux', 'maven-deps']
"""

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from mavenkit.caching.scanner import ManifestScanner

logger = logging.getLogger(__name__)

KEY_PREFIX = "maven-deps"


@dataclass(frozen=True)
class ManifestFile:
    """A manifest and its raw content at derivation time."""

    absolute_path: Path
    raw_bytes: bytes

    @classmethod
    def read(cls, path: Path) -> "ManifestFile":
        path = Path(path).absolute()
        return cls(absolute_path=path, raw_bytes=path.read_bytes())


@dataclass(frozen=True)
class CacheContext:
    """
    Inputs besides manifests that scope a cache key.

    Attributes:
        os: Host OS identifier ('linux', 'macos', 'windows')
        runtime_requirement: Required Java version ('17')
        build_tool_requirement: Required Maven version ('3.9.6')
    """

    os: str
    runtime_requirement: str
    build_tool_requirement: str


@dataclass(frozen=True)
class CacheKey:
    """A derived cache key: ``prefix`` followed by the hex digest."""

    digest_hex: str
    prefix: str = f"{KEY_PREFIX}-"

    @property
    def value(self) -> str:
        return f"{self.prefix}{self.digest_hex}"

    def __str__(self) -> str:
        return self.value


class CacheKeyDeriver:
    """
    Derive cache keys and restore chains.

    Example:
        >>> deriver = CacheKeyDeriver()
        >>> manifests = [ManifestFile(Path("/p/pom.xml"), b"<project/>")]
        >>> key = deriver.derive_key(manifests, context)
        >>> key.value.startswith("maven-deps-")
        True
    """

    def __init__(self, scanner: Optional[ManifestScanner] = None):
        self.scanner = scanner or ManifestScanner()

    def derive_key(
        self, manifests: Sequence[ManifestFile], context: CacheContext
    ) -> CacheKey:
        """Digest requirements and manifest bytes, in order, without delimiters."""
        hasher = hashlib.sha256()
        hasher.update(context.os.encode("utf-8"))
        hasher.update(context.runtime_requirement.encode("utf-8"))
        hasher.update(context.build_tool_requirement.encode("utf-8"))
        for manifest in manifests:
            hasher.update(manifest.raw_bytes)

        key = CacheKey(digest_hex=hasher.hexdigest())
        logger.debug(f"Derived cache key {key} from {len(manifests)} manifest(s)")
        return key

    def derive_restore_chain(self, context: CacheContext) -> List[str]:
        """Fallback keys, most specific first."""
        os_key = f"{KEY_PREFIX}-{context.os}"
        runtime_key = f"{os_key}-{context.runtime_requirement}"
        return [
            f"{runtime_key}-{context.build_tool_requirement}",
            runtime_key,
            os_key,
            KEY_PREFIX,
        ]

    def read_manifests(self, paths: Iterable[Path]) -> List[ManifestFile]:
        """Read manifests, skipping any that cannot be read."""
        manifests = []
        for path in paths:
            try:
                manifests.append(ManifestFile.read(path))
            except OSError as e:
                logger.warning(f"Could not read {path}: {e}")
        return manifests

    def derive_for_directory(self, root: Path, context: CacheContext) -> CacheKey:
        """Scan ``root`` for manifests and derive the key from their content."""
        manifests = self.read_manifests(self.scanner.scan(root))
        return self.derive_key(manifests, context)
