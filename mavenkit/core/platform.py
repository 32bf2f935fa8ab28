"""
Host platform detection for MavenKit.

Provides the normalized OS and architecture names used to pick tool
downloads and to scope dependency cache keys.

Usage:
    from mavenkit.core.platform import detect_platform

    platform_info = detect_platform()
    print(platform_info.platform_string())  # e.g. 'linux-x64'
"""

import functools
import platform
from dataclasses import dataclass


@dataclass(frozen=True)
class PlatformInfo:
    """
    Host platform information.

    Attributes:
        os: Operating system ('windows', 'linux', 'macos')
        arch: CPU architecture ('x64', 'arm64', 'x86', 'arm')
    """

    os: str
    arch: str

    def platform_string(self) -> str:
        """
        Get canonical platform string (e.g., 'linux-x64', 'macos-arm64').

        Example:
            >>> PlatformInfo('linux', 'x64').platform_string()
            'linux-x64'
        """
        return f"{self.os}-{self.arch}"

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def archive_extension(self) -> str:
        """Archive format tool vendors publish for this OS."""
        return "zip" if self.is_windows else "tar.gz"

    def __str__(self) -> str:
        return self.platform_string()


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current platform information.

    This function is cached - it only runs detection once per process.

    Returns:
        PlatformInfo instance for the running host
    """
    return PlatformInfo(os=_detect_os(), arch=_detect_architecture())


def clear_platform_cache() -> None:
    """Clear the cached platform detection result (used by tests)."""
    detect_platform.cache_clear()


# platform.system() / platform.machine() values, lowercased
_OS_NAMES = {
    "windows": "windows",
    "linux": "linux",
    "darwin": "macos",
}

_ARCH_NAMES = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "x86",
    "i686": "x86",
    "x86": "x86",
}


def _detect_os() -> str:
    """
    Detect operating system.

    Raises:
        RuntimeError: If OS is not Windows, Linux or macOS
    """
    system = platform.system().lower()
    try:
        return _OS_NAMES[system]
    except KeyError:
        raise RuntimeError(f"Unsupported operating system: {system}") from None


def _detect_architecture() -> str:
    machine = platform.machine().lower()
    if machine in _ARCH_NAMES:
        return _ARCH_NAMES[machine]
    if machine.startswith("arm"):
        return "arm"
    # Unknown architectures are passed through unchanged
    return machine
