"""
Tool detection through version-query commands.

Detection never raises. A tool counts as absent when its executable is
missing or fails, when its output cannot be parsed, or when no home
directory can be found for it. The home is taken from the environment or
the tool itself, falling back to the directory above `bin/` of the
executable found on PATH.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Mapping, Optional

from mavenkit.core.process import ProcessRunner
from mavenkit.toolchain.kinds import KindStrategy, ToolKind
from mavenkit.toolchain.requirements import DetectedTool

logger = logging.getLogger(__name__)


class ToolDetector:
    """
    Detect installed tools by running their version query.

    Example:
        >>> detector = ToolDetector()
        >>> java = detector.detect(ToolKind.RUNTIME)
        >>> if java.present:
        ...     print(f"Java {java.version} ({java.variant}) at {java.home}")
    """

    def __init__(
        self,
        runner: Optional[ProcessRunner] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialize detector.

        Args:
            runner: Process runner (default: ProcessRunner())
            environ: Environment consulted for home variables (default: os.environ)
        """
        self.runner = runner or ProcessRunner()
        self.environ = os.environ if environ is None else environ

    def detect(self, kind: ToolKind) -> DetectedTool:
        """
        Detect the tool of the given kind on the current PATH.

        Returns:
            DetectedTool; ``present`` is False when the tool is unusable
        """
        strategy = kind.strategy
        result = self.runner.invoke(strategy.executable, list(strategy.version_args))

        if not result.succeeded:
            logger.debug(
                f"{strategy.display_name} not detected "
                f"({strategy.executable} exited with {result.exit_code})"
            )
            return DetectedTool.absent()

        parsed = strategy.parse_output(result.output)
        if parsed is None:
            logger.debug(
                f"{strategy.display_name} not detected (unrecognised version output)"
            )
            return DetectedTool.absent()

        home = (
            self._detect_home(strategy)
            or parsed.home
            or self._home_from_executable(strategy)
        )
        if not home:
            logger.debug(
                f"{strategy.display_name} not detected (home directory unknown)"
            )
            return DetectedTool.absent()

        logger.debug(
            f"Detected {strategy.display_name} {parsed.full_version}"
            f" variant={parsed.variant} home={home}"
        )

        return DetectedTool(
            present=True,
            version=parsed.version,
            variant=parsed.variant,
            home=home,
            full_version=parsed.full_version,
        )

    def _detect_home(self, strategy: KindStrategy) -> Optional[str]:
        """Home from the kind's environment variable, else its home query."""
        if strategy.home_env_var:
            value = self.environ.get(strategy.home_env_var)
            if value:
                return value

        if strategy.home_query_args and strategy.parse_home:
            result = self.runner.invoke(
                strategy.executable, list(strategy.home_query_args)
            )
            if result.succeeded:
                return strategy.parse_home(result.output)

        return None

    def _home_from_executable(self, strategy: KindStrategy) -> Optional[str]:
        """Parent of the ``bin`` directory holding the executable on PATH."""
        executable = shutil.which(strategy.executable, path=self.environ.get("PATH"))
        if not executable:
            return None
        return str(Path(executable).resolve().parent.parent)
