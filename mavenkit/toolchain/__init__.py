"""
Toolchain resolution for MavenKit.

Detects the Java runtime and Maven on PATH, installs them when absent and
verifies the result.
"""

from .kinds import KindStrategy, ToolKind
from .requirements import (
    DetectedTool,
    ResolutionAction,
    ResolutionOutcome,
    ToolRequirement,
)
from .compatibility import is_compatible
from .detector import ToolDetector
from .tool_cache import LocalToolCache
from .installer import ToolInstaller
from .resolver import EnvironmentSetup, ToolchainResolver

__all__ = [
    "KindStrategy",
    "ToolKind",
    "DetectedTool",
    "ResolutionAction",
    "ResolutionOutcome",
    "ToolRequirement",
    "is_compatible",
    "ToolDetector",
    "LocalToolCache",
    "ToolInstaller",
    "EnvironmentSetup",
    "ToolchainResolver",
]
