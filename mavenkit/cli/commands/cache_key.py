"""
Cache-key command implementation.

Prints the dependency cache key followed by its restore chain.
"""

import logging

from mavenkit.cli.utils import create_session

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the cache-key command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    session = create_session(args)
    key = session.derive_key()

    print(key.value)
    for fallback in session.deriver.derive_restore_chain(session.cache_context):
        print(fallback)

    return 0
