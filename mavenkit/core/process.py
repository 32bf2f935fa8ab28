"""
Process execution collaborator.

Runs version-query commands and the external build step. Launch failures
(missing executable, timeout) are reported as a non-zero exit code so that
callers can treat them as tool absence instead of handling exceptions.
"""

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

# Exit code reported when the executable cannot be found or started
LAUNCH_FAILURE_EXIT_CODE = 127


@dataclass(frozen=True)
class ProcessResult:
    """Result of a finished process."""

    exit_code: int
    stdout: str
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr (``java -version`` prints to stderr)."""
        return self.stdout + self.stderr


class ProcessRunner:
    """
    Runs executables found on the current PATH.

    The executable is looked up against ``os.environ["PATH"]`` at call time,
    so directories registered by EnvironmentRegistrar.prepend_path() are
    honoured by the next invocation.

    Example:
        >>> runner = ProcessRunner()
        >>> result = runner.invoke("mvn", ["-version"])
        >>> result.exit_code
        0
    """

    def __init__(self, timeout: Optional[float] = 60):
        """
        Initialize process runner.

        Args:
            timeout: Timeout in seconds for captured invocations (None disables)
        """
        self.timeout = timeout

    def invoke(
        self,
        executable: str,
        args: Sequence[str],
        cwd: Optional[Path] = None,
    ) -> ProcessResult:
        """
        Run an executable and capture its output.

        Args:
            executable: Executable name or path
            args: Command-line arguments
            cwd: Working directory (default: current directory)

        Returns:
            ProcessResult with exit code and captured output
        """
        command = self._build_command(executable, args)
        if command is None:
            logger.debug(f"Executable not found on PATH: {executable}")
            return ProcessResult(LAUNCH_FAILURE_EXIT_CODE, "", "")

        logger.debug(f"Running: {' '.join(command)}")

        try:
            result = subprocess.run(
                command,
                cwd=str(cwd) if cwd else None,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.debug(f"Timeout running {executable}")
            return ProcessResult(LAUNCH_FAILURE_EXIT_CODE, "", "")
        except OSError as e:
            logger.debug(f"Failed to run {executable}: {e}")
            return ProcessResult(LAUNCH_FAILURE_EXIT_CODE, "", "")

        return ProcessResult(
            result.returncode, result.stdout or "", result.stderr or ""
        )

    def run_streaming(self, command: Sequence[str], cwd: Optional[Path] = None) -> int:
        """
        Run a command with output going straight to the console.

        Used for the build step itself, which may run far longer than a
        version query and whose output belongs in the CI log.

        Returns:
            Process exit code
        """
        if not command:
            raise ValueError("Command cannot be empty")

        resolved = self._build_command(command[0], list(command[1:]))
        if resolved is None:
            logger.error(f"Executable not found on PATH: {command[0]}")
            return LAUNCH_FAILURE_EXIT_CODE

        logger.info(f"Running: {' '.join(resolved)}")
        try:
            completed = subprocess.run(
                resolved, cwd=str(cwd) if cwd else None, check=False
            )
            return completed.returncode
        except OSError as e:
            logger.error(f"Failed to run {command[0]}: {e}")
            return LAUNCH_FAILURE_EXIT_CODE

    @staticmethod
    def _build_command(executable: str, args: Sequence[str]) -> Optional[List[str]]:
        """Resolve executable against the live PATH."""
        resolved = shutil.which(executable, path=os.environ.get("PATH"))
        if resolved is None:
            return None
        return [resolved, *args]
