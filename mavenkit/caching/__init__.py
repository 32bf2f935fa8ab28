"""
Content-addressed dependency caching for MavenKit.

Scans a project for manifests, derives a cache key and restore chain from
their content, and restores/saves the local Maven repository through a
cache backend.
"""

from .scanner import ManifestScanner
from .keys import CacheContext, CacheKey, CacheKeyDeriver, ManifestFile
from .backend import CacheBackend, LocalCacheBackend
from .store import CacheKeyStore, RestoreResult, format_bytes

__all__ = [
    "ManifestScanner",
    "CacheContext",
    "CacheKey",
    "CacheKeyDeriver",
    "ManifestFile",
    "CacheBackend",
    "LocalCacheBackend",
    "CacheKeyStore",
    "RestoreResult",
    "format_bytes",
]
