from enum import Enum, auto


class SessionState(Enum):
    """
    Defines the distinct operational states of a heatmap session.

    Transitions only move forward through calibration, tracking and review;
    a new cycle starts from review (reset or recalibrate) or from idle.
    """
    IDLE = auto()  # No store exists, nothing is running.
    CALIBRATING = auto() # Gaze estimation is being calibrated externally.
    TRACKING = auto() # Samples are accumulated, decay and render are scheduled.
    REVIEWING = auto() # Tracking stopped, a snapshot is available for analysis.


TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.IDLE: frozenset({SessionState.CALIBRATING}),
    SessionState.CALIBRATING: frozenset({SessionState.TRACKING}),
    SessionState.TRACKING: frozenset({SessionState.REVIEWING}),
    SessionState.REVIEWING: frozenset({SessionState.TRACKING, SessionState.CALIBRATING}),
}


def can_transition(current: SessionState, target: SessionState) -> bool:
    return target in TRANSITIONS[current]
