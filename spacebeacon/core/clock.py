"""Clock abstraction: expiry logic reads instants through this, never time.time() directly."""

import threading
import time


class Clock:
    """Supplies the current instant as unix seconds (float)."""

    def now(self) -> float:
        raise NotImplementedError


class SystemClock(Clock):
    """Wall clock. Backward jumps are passed through unchanged."""

    def now(self) -> float:
        return time.time()


class ManualClock(Clock):
    """Clock that only moves when told to. Used by tests and replay scripts."""

    def __init__(self, start: float = 0.0):
        self._lock = threading.Lock()
        self._now = float(start)

    def now(self) -> float:
        with self._lock:
            return self._now

    def set(self, t: float) -> None:
        with self._lock:
            self._now = float(t)

    def advance(self, seconds: float) -> float:
        """Move forward by seconds and return the new instant."""
        with self._lock:
            self._now += seconds
            return self._now
