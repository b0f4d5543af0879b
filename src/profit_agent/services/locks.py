"""Per-athlete mutual exclusion for schedule mutations."""

from contextlib import contextmanager
from typing import Dict, Iterator, Optional
import threading


class AthleteLockRegistry:
    """
    Process-wide map of athlete id to ``threading.Lock``.

    Log matching, coach change application, refresh and skip/unskip take
    the athlete's lock so they never interleave for the same athlete.
    Locks are not reentrant: a holder must not call another locked path.
    """

    def __init__(self) -> None:
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def lock_for(self, athlete_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(athlete_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[athlete_id] = lock
            return lock

    @contextmanager
    def hold(self, athlete_id: str) -> Iterator[None]:
        with self.lock_for(athlete_id):
            yield


# Singleton shared by every service in the process
_registry_lock = threading.Lock()
_registry: Optional[AthleteLockRegistry] = None


def get_lock_registry() -> AthleteLockRegistry:
    """Get or create the process-wide lock registry (thread-safe)."""
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = AthleteLockRegistry()
    return _registry
