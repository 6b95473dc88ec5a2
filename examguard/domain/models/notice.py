"""User-visible notices produced by the session monitor.

Rendering belongs to the host UI. Each notice targets a slot; a slot shows at
most one notice at a time, so a new notice replaces the old one instead of
stacking on top of it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from uuid import uuid4


class NoticeSlot(Enum):
    VIOLATION = "violation"
    FOCUS = "focus"
    FULLSCREEN = "fullscreen"
    SESSION = "session"


class NoticeLevel(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _new_notice_id() -> str:
    return str(uuid4())


@dataclass(frozen=True)
class Notice:
    """A message for the candidate.

    Attributes:
        slot: Display slot; one live notice per slot.
        level: Severity used for styling.
        message: Text to display.
        persistent: True if the notice must not auto-dismiss.
        countdown_seconds: Live countdown value, for grace-period notices.
        action_label: Label of a one-click corrective action, if any.
        notice_id: Unique id used to dismiss this exact notice.
    """

    slot: NoticeSlot
    level: NoticeLevel
    message: str
    persistent: bool = False
    countdown_seconds: int | None = None
    action_label: str | None = None
    notice_id: str = field(default_factory=_new_notice_id)

    def with_countdown(self, countdown_seconds: int, message: str) -> Notice:
        """Return a fresh notice (new id) with an updated countdown."""
        return replace(
            self,
            countdown_seconds=countdown_seconds,
            message=message,
            notice_id=_new_notice_id(),
        )
