from __future__ import annotations

from typing import Iterable

from ..core.enums import DayState, EventType
from ..core.exceptions import InvalidSequenceError
from .model import AttendanceEvent

# Legal source states and resulting state for each event type.
_TRANSITIONS = {
    EventType.CHECK_IN: ({DayState.NONE}, DayState.CHECKED_IN),
    EventType.BREAK_START: ({DayState.CHECKED_IN}, DayState.ON_BREAK),
    EventType.BREAK_END: ({DayState.ON_BREAK}, DayState.CHECKED_IN),
    EventType.CHECK_OUT: ({DayState.CHECKED_IN}, DayState.CHECKED_OUT),
}

_REFUSALS = {
    (EventType.CHECK_IN, DayState.CHECKED_IN): "already checked in today",
    (EventType.CHECK_IN, DayState.ON_BREAK): "already checked in today",
    (EventType.CHECK_IN, DayState.CHECKED_OUT): "already checked out today",
    (EventType.BREAK_START, DayState.NONE): "must check in before starting a break",
    (EventType.BREAK_START, DayState.ON_BREAK): "a break is already in progress",
    (EventType.BREAK_START, DayState.CHECKED_OUT): "cannot start a break after checking out",
    (EventType.BREAK_END, DayState.NONE): "no break in progress to end",
    (EventType.BREAK_END, DayState.CHECKED_IN): "no break in progress to end",
    (EventType.BREAK_END, DayState.CHECKED_OUT): "no break in progress to end",
    (EventType.CHECK_OUT, DayState.NONE): "must check in before checking out",
    (EventType.CHECK_OUT, DayState.ON_BREAK): "must end the break before checking out",
    (EventType.CHECK_OUT, DayState.CHECKED_OUT): "already checked out today",
}


class EventSequencer:
    """State machine of one employee-day: NONE -> CHECKED_IN <-> ON_BREAK -> CHECKED_OUT."""

    def state_of(self, events: Iterable[AttendanceEvent]) -> DayState:
        state = DayState.NONE
        for event in sorted(events, key=lambda e: e.timestamp):
            if state == DayState.CHECKED_OUT:
                break
            state = _TRANSITIONS[event.event_type][1]
        return state

    def allows(self, events: Iterable[AttendanceEvent], event_type: EventType) -> bool:
        sources, _ = _TRANSITIONS[event_type]
        return self.state_of(events) in sources

    def validate(self, events: Iterable[AttendanceEvent], event_type: EventType) -> DayState:
        """Return the state after ``event_type`` or raise ``InvalidSequenceError``."""
        state = self.state_of(events)
        sources, target = _TRANSITIONS[event_type]
        if state not in sources:
            reason = _REFUSALS.get((event_type, state), "event not allowed now")
            raise InvalidSequenceError(f"{event_type.value} refused: {reason}")
        return target
