"""
Core functionality for MavenKit.

This package contains the collaborators the toolchain and caching layers
depend on: platform detection, process execution, environment registration,
downloads, archives and run state.
"""

from .exceptions import (
    MavenKitError,
    ConfigurationError,
    ToolchainError,
    InstallationFailure,
    VerificationFailure,
    CacheError,
    CacheRestoreFailure,
    CacheSaveFailure,
    StateError,
)

from .platform import (
    PlatformInfo,
    detect_platform,
    clear_platform_cache,
)

from .process import (
    ProcessResult,
    ProcessRunner,
)

from .environment import EnvironmentRegistrar

from .state import (
    CACHE_KEY_STATE,
    RunCacheState,
    RunStateStore,
)

__all__ = [
    "MavenKitError",
    "ConfigurationError",
    "ToolchainError",
    "InstallationFailure",
    "VerificationFailure",
    "CacheError",
    "CacheRestoreFailure",
    "CacheSaveFailure",
    "StateError",
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
    "ProcessResult",
    "ProcessRunner",
    "EnvironmentRegistrar",
    "CACHE_KEY_STATE",
    "RunCacheState",
    "RunStateStore",
]
