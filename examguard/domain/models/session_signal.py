"""Signals emitted by guards, the tracker and the clock.

Components never change session state themselves; they hand a SessionSignal
to the controller's single dispatch point, which decides the transition.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

from examguard.domain.models.session_state import (
    SubmissionTrigger,
    TerminationReason,
)


class SignalKind(Enum):
    THRESHOLD_REACHED = "threshold_reached"
    TERMINATE_REQUESTED = "terminate_requested"
    CLOCK_EXPIRED = "clock_expired"
    SUBMIT_REQUESTED = "submit_requested"


@dataclass(frozen=True)
class SessionSignal:
    """A proposed lifecycle transition.

    Attributes:
        kind: What is being proposed.
        source: Name of the emitting component (for logs).
        reason: Termination reason; set for the two terminating kinds.
    """

    kind: SignalKind
    source: str
    reason: TerminationReason | None = None

    @classmethod
    def threshold_reached(cls, source: str = "violation_tracker") -> SessionSignal:
        return cls(
            kind=SignalKind.THRESHOLD_REACHED,
            source=source,
            reason=TerminationReason.VIOLATION_THRESHOLD,
        )

    @classmethod
    def terminate_requested(
        cls, source: str, reason: TerminationReason
    ) -> SessionSignal:
        return cls(kind=SignalKind.TERMINATE_REQUESTED, source=source, reason=reason)

    @classmethod
    def clock_expired(cls, source: str = "session_clock") -> SessionSignal:
        return cls(kind=SignalKind.CLOCK_EXPIRED, source=source)

    @classmethod
    def submit_requested(cls, source: str = "candidate") -> SessionSignal:
        return cls(kind=SignalKind.SUBMIT_REQUESTED, source=source)

    @property
    def is_terminating(self) -> bool:
        return self.kind in (SignalKind.THRESHOLD_REACHED, SignalKind.TERMINATE_REQUESTED)

    @property
    def submission_trigger(self) -> SubmissionTrigger:
        if self.kind is SignalKind.CLOCK_EXPIRED:
            return SubmissionTrigger.CLOCK_EXPIRED
        return SubmissionTrigger.CANDIDATE


SignalSink = Callable[[SessionSignal], Awaitable[None]]
