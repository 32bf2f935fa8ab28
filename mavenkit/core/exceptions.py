"""
Centralized exception hierarchy for MavenKit.

Fatal errors (configuration, installation, verification) abort the build
step. Cache errors are raised by backend adapters and recovered by
CacheKeyStore, so they never fail a build.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class MavenKitError(Exception):
    """Base exception for all MavenKit errors."""

    pass


class ConfigurationError(MavenKitError):
    """Raised when a requested tool version or variant is not supported."""

    pass


# ============================================================================
# Toolchain Exceptions
# ============================================================================


class ToolchainError(MavenKitError):
    """Base exception for toolchain resolution errors."""

    pass


class InstallationFailure(ToolchainError):
    """Raised when downloading, extracting or registering a tool fails."""

    def __init__(self, tool_name: str, message: str):
        self.tool_name = tool_name
        super().__init__(f"{tool_name} installation failed: {message}")


class VerificationFailure(ToolchainError):
    """Raised when a tool is still undetectable after setup."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(
            f"{tool_name} verification failed - not available after setup"
        )


# ============================================================================
# Cache Exceptions
# ============================================================================


class CacheError(MavenKitError):
    """Base exception for dependency cache errors."""

    pass


class CacheRestoreFailure(CacheError):
    """Raised by a cache backend when a restore call fails."""

    pass


class CacheSaveFailure(CacheError):
    """Raised by a cache backend when a save call fails."""

    pass


# ============================================================================
# Run State Exceptions
# ============================================================================


class StateError(MavenKitError):
    """Raised when run state cannot be read or written."""

    pass
