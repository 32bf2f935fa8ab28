"""
Setup command implementation.

Resolves Java and Maven, installing what is missing, and verifies both.
"""

import logging

from mavenkit.cli.utils import create_session, format_environment_summary

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the setup command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    session = create_session(args)
    environment = session.setup_environment()

    print(format_environment_summary(session.resolver.summarize(environment)))

    return 0
