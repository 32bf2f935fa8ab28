"""
Toolchain resolution.

Decides for each required tool whether the copy already on PATH can be
reused or a new one must be installed, and verifies afterwards that every
resolved tool is actually usable.

A present tool is never replaced: a version or distribution mismatch is
reported as a warning and the existing tool is kept.

Usage:
    from mavenkit.toolchain.resolver import ToolchainResolver
    from mavenkit.toolchain.requirements import ToolRequirement

    resolver = ToolchainResolver()
    setup = resolver.setup_environment(
        ToolRequirement.runtime("17", "temurin"),
        ToolRequirement.build_tool("3.9.6"),
    )
    print(resolver.summarize(setup))
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from mavenkit.core.exceptions import VerificationFailure
from mavenkit.toolchain.compatibility import is_compatible
from mavenkit.toolchain.detector import ToolDetector
from mavenkit.toolchain.installer import ToolInstaller
from mavenkit.toolchain.requirements import (
    DetectedTool,
    ResolutionAction,
    ResolutionOutcome,
    ToolRequirement,
)

logger = logging.getLogger(__name__)


@dataclass
class EnvironmentSetup:
    """
    Resolved build environment.

    Attributes:
        runtime: Outcome for the Java runtime
        build_tool: Outcome for Maven
        verified: Detections made during verification, keyed by tool name
    """

    runtime: ResolutionOutcome
    build_tool: ResolutionOutcome
    verified: Dict[str, DetectedTool] = field(default_factory=dict)

    @property
    def outcomes(self) -> List[ResolutionOutcome]:
        return [self.runtime, self.build_tool]

    @property
    def warnings(self) -> List[str]:
        return [o.warning for o in self.outcomes if o.warning]


class ToolchainResolver:
    """
    Resolve required tools against what is installed.

    Example:
        >>> resolver = ToolchainResolver()
        >>> outcome = resolver.resolve(ToolRequirement.build_tool("3.9.6"))
        >>> outcome.action
        <ResolutionAction.REUSED: 'existing'>
    """

    def __init__(
        self,
        detector: Optional[ToolDetector] = None,
        installer: Optional[ToolInstaller] = None,
    ):
        """
        Initialize resolver.

        Args:
            detector: Tool detector (default: ToolDetector())
            installer: Tool installer (default: ToolInstaller())
        """
        self.detector = detector or ToolDetector()
        self._installer = installer

    @property
    def installer(self) -> ToolInstaller:
        # Created on first use so that pure reuse never touches the tool cache
        if self._installer is None:
            self._installer = ToolInstaller()
        return self._installer

    def resolve(self, requirement: ToolRequirement) -> ResolutionOutcome:
        """
        Resolve one requirement.

        Returns:
            ResolutionOutcome describing whether the tool was reused or installed

        Raises:
            ConfigurationError: If the version or variant is not supported
            InstallationFailure: If the tool was absent and could not be installed
        """
        requirement.validate()

        name = requirement.tool_name
        logger.info(f"Setting up {requirement}")

        detected = self.detector.detect(requirement.kind)

        if not detected.present:
            logger.info(f"{name} not found, installing {requirement.required_version}")
            return self.installer.install(requirement)

        if (
            detected.version == requirement.required_version
            and detected.variant == requirement.required_variant
        ):
            logger.info(f"Using existing {name} {detected.version}")
            return ResolutionOutcome(
                kind=requirement.kind,
                action=ResolutionAction.REUSED,
                version=detected.version,
                home=detected.home,
                variant=detected.variant,
            )

        warning = self._mismatch_warning(requirement, detected)
        logger.warning(warning)

        return ResolutionOutcome(
            kind=requirement.kind,
            action=ResolutionAction.REUSED_WITH_WARNING,
            version=detected.version,
            home=detected.home,
            variant=detected.variant,
            warning=warning,
        )

    @staticmethod
    def _mismatch_warning(requirement: ToolRequirement, detected: DetectedTool) -> str:
        name = requirement.tool_name
        required = requirement.required_version
        found = detected.version

        if found != required:
            if is_compatible(found, required, requirement.kind):
                return f"{name} version mismatch: found {found}, required {required}"
            return (
                f"{name} version incompatible: found {found}, required {required}; "
                f"using existing installation"
            )

        return (
            f"{name} distribution mismatch: found {detected.variant or 'unknown'}, "
            f"required {requirement.required_variant} (version {found})"
        )

    def verify(self, outcomes: Sequence[ResolutionOutcome]) -> Dict[str, DetectedTool]:
        """
        Re-detect every resolved tool.

        Returns:
            Detections keyed by tool name

        Raises:
            VerificationFailure: If a tool is no longer detectable
        """
        verified = {}
        for outcome in outcomes:
            detected = self.detector.detect(outcome.kind)
            if not detected.present:
                logger.error(f"{outcome.tool_name} is not available after setup")
                raise VerificationFailure(outcome.tool_name)

            logger.info(f"Verified {outcome.tool_name} {detected.full_version}")
            verified[outcome.tool_name] = detected

        return verified

    def setup_environment(
        self, runtime: ToolRequirement, build_tool: ToolRequirement
    ) -> EnvironmentSetup:
        """
        Resolve the runtime, then the build tool, then verify both.

        Raises:
            ConfigurationError: If a requirement is not supported
            InstallationFailure: If a required tool could not be installed
            VerificationFailure: If a tool is unusable after setup
        """
        runtime_outcome = self.resolve(runtime)
        build_tool_outcome = self.resolve(build_tool)
        verified = self.verify([runtime_outcome, build_tool_outcome])

        return EnvironmentSetup(
            runtime=runtime_outcome,
            build_tool=build_tool_outcome,
            verified=verified,
        )

    @staticmethod
    def summarize(setup: EnvironmentSetup) -> Dict[str, Dict[str, Any]]:
        """
        Environment summary keyed by tool ('java', 'maven').

        Example:
            >>> ToolchainResolver.summarize(setup)
            {'java': {'version': '17', 'action': 'existing', 'warning': None},
             'maven': {'version': '3.9.6', 'action': 'installed', 'warning': None}}
        """
        return {
            outcome.kind.strategy.name: outcome.to_summary()
            for outcome in setup.outcomes
        }
