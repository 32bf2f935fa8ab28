"""
Toolchain requirement and resolution types.

ToolRequirement comes from configuration and never changes. DetectedTool
and ResolutionOutcome are produced per resolver call and discarded after.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from mavenkit.core.exceptions import ConfigurationError
from mavenkit.toolchain.kinds import ToolKind


@dataclass(frozen=True)
class ToolRequirement:
    """
    A required tool version.

    Attributes:
        kind: Runtime or build-automation tool
        required_version: Requested version ('17', '3.9.6')
        required_variant: Runtime distribution ('temurin'); None for Maven
    """

    kind: ToolKind
    required_version: str
    required_variant: Optional[str] = None

    @classmethod
    def runtime(cls, version: str, distribution: str) -> "ToolRequirement":
        return cls(ToolKind.RUNTIME, str(version), distribution)

    @classmethod
    def build_tool(cls, version: str) -> "ToolRequirement":
        return cls(ToolKind.BUILD_AUTOMATION, str(version))

    @property
    def tool_name(self) -> str:
        return self.kind.display_name

    def validate(self) -> None:
        """
        Check the requirement against the kind's allow-lists.

        Raises:
            ConfigurationError: If the version or variant is not supported
        """
        strategy = self.kind.strategy

        if self.required_version not in strategy.supported_versions:
            raise ConfigurationError(
                f"Unsupported {strategy.display_name} version: {self.required_version}. "
                f"Supported: {', '.join(strategy.supported_versions)}"
            )

        if strategy.has_variants:
            if self.required_variant not in strategy.supported_variants:
                raise ConfigurationError(
                    f"Unsupported {strategy.display_name} distribution: "
                    f"{self.required_variant}. "
                    f"Supported: {', '.join(strategy.supported_variants)}"
                )
        elif self.required_variant is not None:
            raise ConfigurationError(
                f"{strategy.display_name} does not take a distribution "
                f"(got {self.required_variant})"
            )

    def __str__(self) -> str:
        if self.required_variant:
            return f"{self.tool_name} {self.required_version} ({self.required_variant})"
        return f"{self.tool_name} {self.required_version}"


@dataclass(frozen=True)
class DetectedTool:
    """
    Result of one detection attempt.

    Attributes:
        present: Whether a usable tool answered the version query
        version: Comparable version ('17' for Java, '3.9.6' for Maven)
        variant: Recognised distribution id, if any
        home: Tool home directory, if it could be determined
        full_version: Version exactly as printed ('17.0.9')
    """

    present: bool
    version: Optional[str] = None
    variant: Optional[str] = None
    home: Optional[str] = None
    full_version: Optional[str] = None

    @classmethod
    def absent(cls) -> "DetectedTool":
        return cls(present=False)


class ResolutionAction(Enum):
    """What the resolver did for a requirement."""

    REUSED = "existing"
    REUSED_WITH_WARNING = "warning"
    INSTALLED = "installed"


@dataclass(frozen=True)
class ResolutionOutcome:
    """
    Outcome of resolving one requirement.

    A successful outcome always carries a version and a home; neither may
    be omitted.
    """

    kind: ToolKind
    action: ResolutionAction
    version: str
    home: str
    variant: Optional[str] = None
    warning: Optional[str] = None

    def __post_init__(self):
        if not self.version:
            raise ValueError("ResolutionOutcome requires a version")
        if not self.home:
            raise ValueError("ResolutionOutcome requires a home")
        if isinstance(self.home, Path):
            object.__setattr__(self, "home", str(self.home))

    @property
    def tool_name(self) -> str:
        return self.kind.display_name

    def to_summary(self) -> Dict[str, Any]:
        """Summary entry as reported in build outputs."""
        return {
            "version": self.version,
            "action": self.action.value,
            "warning": self.warning,
        }
