# council/orchestration/state.py
"""
In-flight run registry.

One registry is injected into each CouncilAction; tests create their own.
"""
import threading
from contextlib import contextmanager
from typing import Iterator, List, Set


class RunRegistry:
    """Tracks which targets currently have a council run in flight."""

    def __init__(self) -> None:
        self._running: Set[str] = set()
        self._lock = threading.Lock()

    def try_acquire(self, target: str) -> bool:
        """Atomically check-and-insert. False when target is already running."""
        with self._lock:
            if target in self._running:
                return False
            self._running.add(target)
            return True

    def release(self, target: str) -> None:
        with self._lock:
            self._running.discard(target)

    def is_running(self, target: str) -> bool:
        with self._lock:
            return target in self._running

    def active(self) -> List[str]:
        with self._lock:
            return sorted(self._running)

    @contextmanager
    def hold(self, target: str) -> Iterator[bool]:
        """
        Acquire target for the duration of the block.

        Yields whether the target was acquired; only an acquired target is
        released on exit (normal or exceptional).
        """
        acquired = self.try_acquire(target)
        try:
            yield acquired
        finally:
            if acquired:
                self.release(target)
