"""
Run state for a single build invocation.

A build invocation may span several processes (``mvnkit restore`` before the
build, ``mvnkit save`` after it). RunStateStore carries named string values
between those steps. It is an explicit object handed to whoever needs it;
there is no module-level state.

Example:
    >>> from pathlib import Path
    >>> from mavenkit.core.state import RunStateStore, RunCacheState
    >>>
    >>> store = RunStateStore(Path('.mavenkit/state.json'))
    >>> state = RunCacheState.load(store)
    >>> state.last_saved_digest is None
    True
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from filelock import FileLock, Timeout

from mavenkit.core.exceptions import StateError
from mavenkit.core.filesystem import atomic_write

logger = logging.getLogger(__name__)

# State name under which the last saved cache digest is recorded
CACHE_KEY_STATE = "cache-key"


class RunStateStore:
    """
    Named string values scoped to one build invocation.

    Without a path the store lives in memory only. With a path, values are
    persisted as JSON (atomic writes under a file lock) so that separate
    processes of the same invocation share them.

    Attributes:
        state_file: JSON file backing the store, or None for in-memory
    """

    def __init__(self, state_file: Optional[Path] = None, lock_timeout: int = 30):
        """
        Initialize run state store.

        Args:
            state_file: Optional JSON file for cross-process persistence
            lock_timeout: Timeout in seconds for acquiring the file lock
        """
        self.state_file = Path(state_file) if state_file is not None else None
        self.lock_timeout = lock_timeout
        self._values: Dict[str, str] = {}

    def get_state(self, name: str) -> str:
        """
        Read a state value.

        Returns:
            The stored value, or an empty string if it was never saved
        """
        if self.state_file is None:
            return self._values.get(name, "")
        return self._load().get(name, "")

    def save_state(self, name: str, value: str) -> None:
        """Record a state value for later steps of this invocation."""
        if self.state_file is None:
            self._values[name] = value
            return

        lock_path = self.state_file.with_name(self.state_file.name + ".lock")

        try:
            lock_path.parent.mkdir(parents=True, exist_ok=True)
            with FileLock(lock_path, timeout=self.lock_timeout):
                data = self._load()
                data[name] = value
                atomic_write(self.state_file, json.dumps(data, indent=2))
        except Timeout as e:
            raise StateError(
                f"Could not acquire state lock within {self.lock_timeout} seconds"
            ) from e
        except OSError as e:
            raise StateError(f"Failed to save state to {self.state_file}: {e}") from e

        logger.debug(f"Saved state {name}={value}")

    def clear(self) -> None:
        """Discard all values so that a new build invocation starts clean."""
        self._values.clear()
        if self.state_file is None:
            return

        try:
            self.state_file.unlink(missing_ok=True)
        except OSError as e:
            raise StateError(
                f"Failed to clear state file {self.state_file}: {e}"
            ) from e

    def _load(self) -> Dict[str, str]:
        if not self.state_file.exists():
            return {}

        try:
            with open(self.state_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Invalid state file {self.state_file}, ignoring: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Invalid state file {self.state_file}, ignoring")
            return {}

        return {str(k): str(v) for k, v in data.items()}


@dataclass
class RunCacheState:
    """
    Dependency-cache state of the current run.

    Attributes:
        last_saved_digest: Digest of the last cache key saved in this run
    """

    last_saved_digest: Optional[str] = None

    @classmethod
    def load(cls, store: RunStateStore) -> "RunCacheState":
        return cls(last_saved_digest=store.get_state(CACHE_KEY_STATE) or None)

    def persist(self, store: RunStateStore) -> None:
        store.save_state(CACHE_KEY_STATE, self.last_saved_digest or "")
