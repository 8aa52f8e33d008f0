"""Core utilities: clock, reader-writer lock, metrics, structured logging."""

from spacebeacon.core.clock import Clock, ManualClock, SystemClock
from spacebeacon.core.metrics import Metrics
from spacebeacon.core.rwlock import ReadWriteLock

__all__ = ["Clock", "ManualClock", "SystemClock", "Metrics", "ReadWriteLock"]
