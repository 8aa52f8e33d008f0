"""Space status state machine: CLOSED <-> OPEN_INDEFINITE / OPEN_UNTIL, auto-close on tick past deadline."""

import enum
from typing import Optional


class SpaceState(str, enum.Enum):
    """Observable space states."""

    CLOSED = "closed"
    OPEN_INDEFINITE = "open_indefinite"
    OPEN_UNTIL = "open_until"


class OpenReason(str, enum.Enum):
    """Why the space is open. Ignored while closed."""

    INDEFINITE = "indefinite"
    TIMED = "timed"


class StatusEvent(str, enum.Enum):
    OPEN = "open"
    KEEP_OPEN = "keep_open"
    CLOSE = "close"
    TICK = "tick"


# open / keep_open / close are accepted from every state; tick only leaves OPEN_UNTIL.
_TRANSITIONS: dict[StatusEvent, dict[SpaceState, SpaceState]] = {
    StatusEvent.OPEN: {s: SpaceState.OPEN_INDEFINITE for s in SpaceState},
    StatusEvent.KEEP_OPEN: {s: SpaceState.OPEN_UNTIL for s in SpaceState},
    StatusEvent.CLOSE: {s: SpaceState.CLOSED for s in SpaceState},
    StatusEvent.TICK: {SpaceState.OPEN_UNTIL: SpaceState.CLOSED},
}


def derive_state(is_open: bool, reason: OpenReason) -> SpaceState:
    if not is_open:
        return SpaceState.CLOSED
    if reason == OpenReason.TIMED:
        return SpaceState.OPEN_UNTIL
    return SpaceState.OPEN_INDEFINITE


def next_state(current: SpaceState, event: StatusEvent) -> Optional[SpaceState]:
    """Target state for event from current, or None if the event does not apply."""
    return _TRANSITIONS[event].get(current)


def is_expired(is_open: bool, reason: OpenReason, open_till: Optional[float], now: float) -> bool:
    """True only for a timed open whose deadline lies strictly before now."""
    if not is_open or reason != OpenReason.TIMED or open_till is None:
        return False
    return now > open_till
