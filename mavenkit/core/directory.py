"""
Default directory locations for MavenKit.

Directory Structure:
    Global Cache (~/.mavenkit/ or %USERPROFILE%\\.mavenkit\\):
        - tools/      : Installed JDK and Maven versions (local tool cache)
        - cache/      : Local dependency cache backend store
        - downloads/  : Temporary archive downloads

    Project-Local (<project-root>/.mavenkit/):
        - state-<run>-<attempt>.json : Run state shared between the restore
                                       and save steps of one CI run
"""

import os
from pathlib import Path

from mavenkit.core.exceptions import MavenKitError


class DirectoryError(MavenKitError):
    """Raised when a default directory cannot be determined."""

    pass


def get_global_cache_dir() -> Path:
    """
    Get the platform-specific global cache directory path.

    Returns:
        Path: ``%USERPROFILE%\\.mavenkit`` on Windows, ``~/.mavenkit`` elsewhere.
    """
    if os.name == "nt":  # Windows
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise DirectoryError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine global cache directory."
            )
        return Path(user_profile) / ".mavenkit"
    else:  # Linux/macOS
        return Path.home() / ".mavenkit"


def get_tool_cache_dir() -> Path:
    """Directory holding installed tool versions."""
    return get_global_cache_dir() / "tools"


def get_dependency_cache_dir() -> Path:
    """Directory used by the local dependency cache backend."""
    return get_global_cache_dir() / "cache"


def get_maven_repository_dir() -> Path:
    """Local Maven repository (the dependency store saved to cache)."""
    return Path.home() / ".m2" / "repository"


def get_project_local_dir(project_root: Path) -> Path:
    """
    Get the project-local .mavenkit directory path.

    Example:
        >>> get_project_local_dir(Path('/path/to/project'))
        PosixPath('/path/to/project/.mavenkit')
    """
    return Path(project_root) / ".mavenkit"
