"""Domain models for session integrity monitoring."""

from examguard.domain.models.countdown import format_clock
from examguard.domain.models.grace_period import GracePeriod
from examguard.domain.models.key_combination import (
    KeyCombination,
    classify_key_combination,
)
from examguard.domain.models.notice import Notice, NoticeLevel, NoticeSlot
from examguard.domain.models.session_signal import (
    SessionSignal,
    SignalKind,
    SignalSink,
)
from examguard.domain.models.session_state import (
    Destination,
    Question,
    SessionResult,
    SessionState,
    SessionTransition,
    SubmissionTrigger,
    TerminationReason,
)
from examguard.domain.models.violation import (
    CooldownState,
    OutcomeKind,
    ViolationCategory,
    ViolationEvent,
    ViolationLedger,
    ViolationOutcome,
)

__all__: list[str] = [
    "CooldownState",
    "Destination",
    "GracePeriod",
    "KeyCombination",
    "Notice",
    "NoticeLevel",
    "NoticeSlot",
    "OutcomeKind",
    "Question",
    "SessionResult",
    "SessionSignal",
    "SessionState",
    "SessionTransition",
    "SignalKind",
    "SignalSink",
    "SubmissionTrigger",
    "TerminationReason",
    "ViolationCategory",
    "ViolationEvent",
    "ViolationLedger",
    "ViolationOutcome",
    "classify_key_combination",
    "format_clock",
]
