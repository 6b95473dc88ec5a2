"""Session lifecycle state and the values that describe how a session ended.

State transitions:
    PRE_START -> ACTIVE -> SUBMITTED
                        -> TERMINATED

SUBMITTED and TERMINATED are terminal. Only the SessionController changes
the state; guards and the clock propose transitions through signals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SessionState(Enum):
    """Lifecycle state of a proctored session."""

    PRE_START = "pre_start"
    ACTIVE = "active"
    SUBMITTED = "submitted"
    TERMINATED = "terminated"

    def is_terminal(self) -> bool:
        return self in (SessionState.SUBMITTED, SessionState.TERMINATED)


class TerminationReason(Enum):
    """Why a session was forcibly ended."""

    VIOLATION_THRESHOLD = "violation_threshold"
    FOCUS_GRACE_EXPIRED = "focus_grace_expired"
    FULLSCREEN_GRACE_EXPIRED = "fullscreen_grace_expired"

    @property
    def final_message(self) -> str:
        """Explanation shown to the candidate before navigating away."""
        return _FINAL_MESSAGES[self]


_FINAL_MESSAGES: dict[TerminationReason, str] = {
    TerminationReason.VIOLATION_THRESHOLD: (
        "Your session has been terminated: too many integrity violations "
        "were detected."
    ),
    TerminationReason.FOCUS_GRACE_EXPIRED: (
        "Your session has been terminated: you were away from the session "
        "window for too long."
    ),
    TerminationReason.FULLSCREEN_GRACE_EXPIRED: (
        "Your session has been terminated: fullscreen mode was not restored "
        "in time."
    ),
}


class SubmissionTrigger(Enum):
    """What caused a normal (non-punitive) submission."""

    CANDIDATE = "candidate"
    CLOCK_EXPIRED = "clock_expired"


class Destination(Enum):
    """Where the host application navigates once a session ends."""

    DASHBOARD = "dashboard"
    RESULTS = "results"


@dataclass(frozen=True)
class Question:
    """A question handed to the session by the backend.

    Rendering and grading are the host application's concern; the
    controller only passes questions through.
    """

    question_id: str
    prompt: str
    section: str | None = None


@dataclass(frozen=True)
class SessionResult:
    """Result returned by the backend after a successful submission.

    Attributes:
        session_id: Identifier of the submitted session.
        accepted: Whether the backend accepted the submission.
        details: Backend-specific extras (score summary, feedback id, ...).
    """

    session_id: str
    accepted: bool = True
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SessionTransition:
    """One recorded lifecycle transition.

    Attributes:
        from_state: State before the transition.
        to_state: State after the transition.
        cause: Short machine-readable cause (e.g. "start", a termination
            reason value, a submission trigger value).
        at: Monotonic time of the transition.
    """

    from_state: SessionState
    to_state: SessionState
    cause: str
    at: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "from_state": self.from_state.value,
            "to_state": self.to_state.value,
            "cause": self.cause,
            "at": self.at,
        }
