"""
Save command implementation.

Saves the local Maven repository to the dependency cache. Within one run
(one state file) the same key is saved only once.
"""

import logging

from mavenkit.cli.utils import create_session

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the save command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success; a skipped save is not an error)
    """
    session = create_session(args)
    saved = session.finalize()

    stats = session.cache_store.get_cache_stats()
    print(f"cache-saved: {'true' if saved else 'false'}")
    print(f"repository: {stats['size_formatted']} in {stats['files']} files")

    return 0
