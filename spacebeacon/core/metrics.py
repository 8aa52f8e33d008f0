"""Simple in-memory counters for status transitions and rejected admin calls."""

import logging
import threading
from typing import Dict

logger = logging.getLogger(__name__)


class Metrics:
    """In-memory counters; log a snapshot on demand (e.g. at shutdown)."""

    def __init__(self):
        self._lock = threading.Lock()
        self._opened = 0
        self._closed = 0
        self._kept_open = 0
        self._expired = 0
        self._unauthorized = 0

    def inc_opened(self) -> int:
        with self._lock:
            self._opened += 1
            return self._opened

    def inc_closed(self) -> int:
        with self._lock:
            self._closed += 1
            return self._closed

    def inc_kept_open(self) -> int:
        with self._lock:
            self._kept_open += 1
            return self._kept_open

    def inc_expired(self) -> int:
        with self._lock:
            self._expired += 1
            return self._expired

    def inc_unauthorized(self) -> int:
        with self._lock:
            self._unauthorized += 1
            return self._unauthorized

    @property
    def expired(self) -> int:
        with self._lock:
            return self._expired

    @property
    def unauthorized(self) -> int:
        with self._lock:
            return self._unauthorized

    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            return {
                "opened": self._opened,
                "closed": self._closed,
                "kept_open": self._kept_open,
                "expired": self._expired,
                "unauthorized": self._unauthorized,
            }

    def log_snapshot(self) -> None:
        """Log current metrics snapshot."""
        parts = [f"{k}={v}" for k, v in self.snapshot().items()]
        logger.info("metrics " + " ".join(parts))
