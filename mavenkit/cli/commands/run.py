"""
Run command implementation.

Runs a build command inside a full session: toolchain setup, cache
restore, the build itself, cache save.
"""

import logging

from mavenkit.cli.utils import create_session, format_environment_summary, print_error
from mavenkit.core.process import ProcessRunner
from mavenkit.core.state import RunStateStore

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the run command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 when the build succeeded)
    """
    command = list(args.build_command)
    if command and command[0] == "--":
        command = command[1:]

    if not command:
        print_error("No build command given", "Usage: mvnkit run -- mvn -B verify")
        return 1

    # Restore and save both happen in this process
    session = create_session(args, state_store=RunStateStore())
    runner = ProcessRunner(timeout=None)

    result = session.run(
        lambda: runner.run_streaming(command, cwd=session.working_directory)
    )

    if result.environment:
        print(format_environment_summary(result.environment))
    print(f"build-status: {result.status}")
    print(f"build-time: {result.build_time}s")

    if not result.succeeded:
        print_error(result.error)
        return 1

    return 0
