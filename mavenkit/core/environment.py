"""
Environment registration collaborator.

Makes installed tools visible to later process invocations. Changes are
applied to ``os.environ`` for the current process and, on GitHub Actions,
appended to the ``$GITHUB_ENV`` / ``$GITHUB_PATH`` files so that subsequent
workflow steps see them too.
"""

import logging
import os
import uuid
from pathlib import Path
from typing import Dict, List, MutableMapping, Optional

logger = logging.getLogger(__name__)


class EnvironmentRegistrar:
    """
    Export variables and prepend PATH entries.

    Example:
        >>> registrar = EnvironmentRegistrar()
        >>> registrar.prepend_path(Path("/opt/jdk-17/bin"))
        >>> registrar.export_variable("JAVA_HOME", "/opt/jdk-17")
    """

    def __init__(self, environ: Optional[MutableMapping[str, str]] = None):
        """
        Initialize registrar.

        Args:
            environ: Environment mapping to update (default: os.environ)
        """
        self.environ = os.environ if environ is None else environ
        self.exported: Dict[str, str] = {}
        self.prepended: List[str] = []

    def export_variable(self, name: str, value: str) -> None:
        """Set an environment variable for this and subsequent steps."""
        value = str(value)
        self.environ[name] = value
        self.exported[name] = value

        env_file = self.environ.get("GITHUB_ENV")
        if env_file:
            # Heredoc form tolerates newlines in values
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            self._append_line(env_file, f"{name}<<{delimiter}\n{value}\n{delimiter}")

        logger.debug(f"Exported {name}={value}")

    def prepend_path(self, directory: Path) -> None:
        """Put a directory in front of PATH for this and subsequent steps."""
        directory = str(directory)
        current = self.environ.get("PATH", "")
        self.environ["PATH"] = (
            f"{directory}{os.pathsep}{current}" if current else directory
        )
        self.prepended.append(directory)

        path_file = self.environ.get("GITHUB_PATH")
        if path_file:
            self._append_line(path_file, directory)

        logger.debug(f"Prepended to PATH: {directory}")

    @staticmethod
    def _append_line(file_path: str, text: str) -> None:
        with open(Path(file_path), "a", encoding="utf-8") as f:
            f.write(f"{text}\n")
