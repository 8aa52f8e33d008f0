"""Status engine: status store, state machine, and expiry scheduler."""

from .store import StatusSnapshot, StatusStore
from .state_machine import OpenReason, SpaceState, StatusEvent
from .scheduler import ExpiryScheduler

__all__ = ["StatusStore", "StatusSnapshot", "SpaceState", "OpenReason", "StatusEvent", "ExpiryScheduler"]
