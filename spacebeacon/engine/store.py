"""In-memory space status store: open flag, open reason, keep-open deadline, last change."""

import logging
from dataclasses import dataclass
from typing import Optional

from spacebeacon.core.clock import Clock, SystemClock
from spacebeacon.core.logging_utils import log_status_transition
from spacebeacon.core.metrics import Metrics
from spacebeacon.core.rwlock import ReadWriteLock
from spacebeacon.engine.state_machine import (
    OpenReason,
    SpaceState,
    StatusEvent,
    derive_state,
    is_expired,
    next_state,
)

logger = logging.getLogger(__name__)

DEFAULT_KEEP_OPEN_WINDOW_SEC = 300.0


@dataclass(frozen=True)
class StatusSnapshot:
    """Consistent point-in-time view of the store."""

    is_open: bool
    reason: OpenReason
    open_till: Optional[float]
    last_change: float

    @property
    def state(self) -> SpaceState:
        return derive_state(self.is_open, self.reason)


class StatusStore:
    """Thread-safe owner of the single space status.

    Mutations take the write side of one ReadWriteLock; reads take the read side.
    Expiry is applied only by check_expiry (driven by the scheduler), never on read.
    """

    def __init__(
        self,
        keep_open_window: float = DEFAULT_KEEP_OPEN_WINDOW_SEC,
        clock: Optional[Clock] = None,
        metrics: Optional[Metrics] = None,
    ):
        if keep_open_window < 0:
            raise ValueError("keep_open_window must be >= 0")
        self._lock = ReadWriteLock()
        self._clock = clock or SystemClock()
        self._metrics = metrics or Metrics()
        self._keep_open_window = float(keep_open_window)

        self._open = False
        self._reason = OpenReason.INDEFINITE
        self._open_till: Optional[float] = None
        self._last_change = self._clock.now()

    @property
    def keep_open_window(self) -> float:
        return self._keep_open_window

    @property
    def metrics(self) -> Metrics:
        return self._metrics

    def _apply(self, event: StatusEvent, is_open: bool, reason: OpenReason, open_till: Optional[float]) -> None:
        """Write new fields. Caller holds the write lock."""
        before = derive_state(self._open, self._reason)
        was_open = self._open
        self._open = is_open
        self._reason = reason
        self._open_till = open_till
        if was_open != is_open:
            self._last_change = self._clock.now()
        after = next_state(before, event) or before
        extra = {"open_till": open_till} if open_till is not None else None
        log_status_transition(before.value, after.value, event.value, extra=extra)

    def open(self) -> None:
        """Open indefinitely; only close() ends it."""
        with self._lock.write():
            self._apply(StatusEvent.OPEN, True, OpenReason.INDEFINITE, None)
        self._metrics.inc_opened()

    def close(self) -> None:
        """Close unconditionally. Idempotent."""
        with self._lock.write():
            if not self._open:
                return
            self._apply(StatusEvent.CLOSE, False, self._reason, self._open_till)
        self._metrics.inc_closed()

    def keep_open(self, now: float) -> float:
        """Open until now + keep_open_window and return that deadline. Each call replaces the previous deadline."""
        open_till = now + self._keep_open_window
        with self._lock.write():
            self._apply(StatusEvent.KEEP_OPEN, True, OpenReason.TIMED, open_till)
        self._metrics.inc_kept_open()
        logger.debug("Space will stay open till %s", open_till)
        return open_till

    def is_open(self) -> bool:
        with self._lock.read():
            return self._open

    @property
    def state(self) -> SpaceState:
        with self._lock.read():
            return derive_state(self._open, self._reason)

    @property
    def open_till(self) -> Optional[float]:
        """Keep-open deadline while open on a timer, else None."""
        with self._lock.read():
            if self._open and self._reason == OpenReason.TIMED:
                return self._open_till
            return None

    @property
    def last_change(self) -> float:
        with self._lock.read():
            return self._last_change

    def snapshot(self) -> StatusSnapshot:
        with self._lock.read():
            return StatusSnapshot(
                is_open=self._open,
                reason=self._reason,
                open_till=self._open_till if self._open and self._reason == OpenReason.TIMED else None,
                last_change=self._last_change,
            )

    def check_expiry(self, now: float) -> bool:
        """Close if a keep-open deadline has passed (now > open_till). Returns True if it closed.

        The decision is made under the read lock, which is released before the
        write lock is taken. The deadline is checked again under the write lock
        so a keep_open() that landed in between is not overridden.
        """
        with self._lock.read():
            if not is_expired(self._open, self._reason, self._open_till, now):
                return False
            deadline = self._open_till

        with self._lock.write():
            if not is_expired(self._open, self._reason, self._open_till, now) or self._open_till != deadline:
                return False
            self._apply(StatusEvent.TICK, False, self._reason, self._open_till)
        self._metrics.inc_expired()
        self._metrics.inc_closed()
        logger.info("Keep-open window lapsed at %s (now=%s); space closed", deadline, now)
        return True
