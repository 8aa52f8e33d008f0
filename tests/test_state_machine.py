"""Transition table for the space status state machine."""

from spacebeacon.engine.state_machine import (
    OpenReason,
    SpaceState,
    StatusEvent,
    derive_state,
    is_expired,
    next_state,
)


def test_open_keep_open_close_apply_from_every_state():
    for state in SpaceState:
        assert next_state(state, StatusEvent.OPEN) == SpaceState.OPEN_INDEFINITE
        assert next_state(state, StatusEvent.KEEP_OPEN) == SpaceState.OPEN_UNTIL
        assert next_state(state, StatusEvent.CLOSE) == SpaceState.CLOSED


def test_tick_only_leaves_open_until():
    assert next_state(SpaceState.OPEN_UNTIL, StatusEvent.TICK) == SpaceState.CLOSED
    assert next_state(SpaceState.OPEN_INDEFINITE, StatusEvent.TICK) is None
    assert next_state(SpaceState.CLOSED, StatusEvent.TICK) is None


def test_derive_state_ignores_reason_when_closed():
    assert derive_state(False, OpenReason.TIMED) == SpaceState.CLOSED
    assert derive_state(False, OpenReason.INDEFINITE) == SpaceState.CLOSED
    assert derive_state(True, OpenReason.TIMED) == SpaceState.OPEN_UNTIL
    assert derive_state(True, OpenReason.INDEFINITE) == SpaceState.OPEN_INDEFINITE


def test_is_expired_strictly_after_deadline():
    assert is_expired(True, OpenReason.TIMED, 100.0, 100.0) is False
    assert is_expired(True, OpenReason.TIMED, 100.0, 100.0001) is True
    assert is_expired(True, OpenReason.INDEFINITE, None, 1e12) is False
    assert is_expired(False, OpenReason.TIMED, 100.0, 200.0) is False
