"""
Restore command implementation.

Restores the local Maven repository from the dependency cache. A miss is
not an error. Restoring starts a build invocation, so run state left by an
earlier invocation is discarded first.
"""

import logging

from mavenkit.cli.utils import create_session, create_state_store
from mavenkit.core.exceptions import StateError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the restore command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    state_store = create_state_store(args)
    try:
        state_store.clear()
    except StateError as e:
        logger.warning(f"Could not reset run state: {e}")

    session = create_session(args, state_store=state_store)
    result = session.restore_cache()

    if not result.hit:
        print("cache-hit: false")
    elif result.exact:
        print(f"cache-hit: true ({result.matched_key})")
    else:
        print(f"cache-hit: partial ({result.matched_key})")

    return 0
