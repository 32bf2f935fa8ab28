"""
Shared utilities for CLI commands.

Builds the configuration, run state and build session from parsed
arguments, and formats command output.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from mavenkit.config.parser import MavenKitConfig, load_config
from mavenkit.core.directory import get_project_local_dir
from mavenkit.core.state import RunStateStore
from mavenkit.session import BuildSession

logger = logging.getLogger(__name__)

# Run state file of one GitHub Actions workflow run attempt
STATE_FILE_TEMPLATE = "state-{run_id}-{attempt}.json"


def resolve_project_root(path: Optional[Path] = None) -> Path:
    """
    Resolve project root directory.

    Args:
        path: Optional path (defaults to current directory)

    Returns:
        Resolved absolute path
    """
    if path is None:
        path = Path.cwd()
    return Path(path).resolve()


def load_cli_config(args) -> MavenKitConfig:
    """
    Load configuration and apply command-line overrides.

    Raises:
        ConfigError: If the configuration file is invalid
    """
    project_root = resolve_project_root(args.project_root)
    config = load_config(args.config, project_root)

    if args.java_version:
        config.java.version = args.java_version
    if args.java_distribution:
        config.java.distribution = args.java_distribution
    if args.maven_version:
        config.maven.version = args.maven_version
    if args.no_cache:
        config.cache.enabled = False

    logger.debug(f"Configuration: {config}")
    return config


def create_state_store(args) -> RunStateStore:
    """
    Run state for the current build invocation.

    ``--state-file`` is used as given. On GitHub Actions the state lives in
    a project-local file keyed by the workflow run and attempt, so the
    ``restore`` and ``save`` steps of one run share it and the next run
    starts clean. Otherwise each command is an invocation of its own and
    the state is kept in memory.
    """
    if args.state_file is not None:
        return RunStateStore(Path(args.state_file))

    run_id = os.environ.get("GITHUB_RUN_ID")
    if run_id:
        attempt = os.environ.get("GITHUB_RUN_ATTEMPT", "1")
        project_root = resolve_project_root(args.project_root)
        state_file = get_project_local_dir(project_root) / STATE_FILE_TEMPLATE.format(
            run_id=run_id, attempt=attempt
        )
        return RunStateStore(state_file)

    return RunStateStore()


def create_session(args, state_store: Optional[RunStateStore] = None) -> BuildSession:
    """Build session for the parsed command line."""
    if state_store is None:
        state_store = create_state_store(args)
    return BuildSession(
        load_cli_config(args),
        project_root=resolve_project_root(args.project_root),
        state_store=state_store,
    )


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def format_environment_summary(summary: Dict[str, Dict[str, Any]]) -> str:
    """
    Format an environment summary, one line per tool.

    Example:
        >>> print(format_environment_summary(
        ...     {"java": {"version": "17", "action": "existing", "warning": None}}))
        java: 17 (existing)
    """
    lines = []
    for tool, entry in summary.items():
        lines.append(f"{tool}: {entry['version']} ({entry['action']})")
        if entry.get("warning"):
            lines.append(f"  warning: {entry['warning']}")
    return "\n".join(lines)


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)
