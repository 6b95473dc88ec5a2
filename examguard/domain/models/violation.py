"""Violation categories, events, the per-session ledger and cooldown state.

A violation is a discrete detected action that breaches exam-integrity rules.
Raw signals become ViolationEvent instances which the ViolationTracker either
drops (cooldown, session closed) or counts into the ViolationLedger.

Ledger invariants:
- total == sum(per_category counts), always
- counts only ever increase during a session
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class ViolationCategory(Enum):
    """Closed set of violation categories.

    Extensible only by adding a new member; ``ViolationCategory("bogus")``
    raises ValueError, which is a programming error rather than a runtime
    failure.
    """

    TAB_SWITCH = "tab-switch"
    WINDOW_FOCUS = "window-focus"
    KEYBOARD_SHORTCUT = "keyboard-shortcut"
    RIGHT_CLICK = "right-click"
    DEV_TOOLS = "dev-tools"

    @property
    def warning_text(self) -> str:
        """Short description used in the user-facing warning."""
        return _WARNING_TEXT[self]


_WARNING_TEXT: dict[ViolationCategory, str] = {
    ViolationCategory.TAB_SWITCH: "Switching tabs detected",
    ViolationCategory.WINDOW_FOCUS: "Window focus lost",
    ViolationCategory.KEYBOARD_SHORTCUT: "Restricted keyboard shortcut used",
    ViolationCategory.RIGHT_CLICK: "Right-click detected",
    ViolationCategory.DEV_TOOLS: "Developer tools detected",
}


@dataclass(frozen=True, eq=True)
class ViolationEvent:
    """A single raw violation signal.

    Ephemeral: created for each raw signal and consumed immediately by the
    tracker. Never persisted beyond the session.

    Attributes:
        category: Which rule was breached.
        timestamp: Monotonic clock reading when the signal arrived.
    """

    category: ViolationCategory
    timestamp: float


class OutcomeKind(Enum):
    """Result of recording one violation event."""

    IGNORED_COOLDOWN = "ignored_cooldown"
    IGNORED_CLOSED = "ignored_closed"
    COUNTED = "counted"
    THRESHOLD_REACHED = "threshold_reached"


@dataclass(frozen=True)
class ViolationOutcome:
    """What ``ViolationTracker.record`` decided for an event.

    Attributes:
        kind: Ignored, counted, or counted-and-reached-threshold.
        category: Category of the recorded event.
        total: Ledger total after the decision.
        message: User-facing warning text; None when the event was ignored.
    """

    kind: OutcomeKind
    category: ViolationCategory
    total: int
    message: str | None = None

    @property
    def counted(self) -> bool:
        """True when the event increased the ledger."""
        return self.kind in (OutcomeKind.COUNTED, OutcomeKind.THRESHOLD_REACHED)

    @property
    def threshold_reached(self) -> bool:
        return self.kind is OutcomeKind.THRESHOLD_REACHED


@dataclass
class CooldownState:
    """Per-category record of when the last event was accepted.

    A new event for a category is accepted only if at least ``window_seconds``
    have passed since the last accepted one. Categories never share a window.

    Attributes:
        window_seconds: Minimum spacing between accepted events per category.
        last_accepted_at: Monotonic time of the last accepted event per category.
    """

    window_seconds: float
    last_accepted_at: dict[ViolationCategory, float] = field(default_factory=dict)

    def accepts(self, category: ViolationCategory, now: float) -> bool:
        """Check whether an event at ``now`` falls outside the cooldown."""
        last = self.last_accepted_at.get(category)
        return last is None or now - last >= self.window_seconds

    def mark_accepted(self, category: ViolationCategory, now: float) -> None:
        self.last_accepted_at[category] = now


class ViolationLedger:
    """Append-only violation counts for one session.

    Owned exclusively by the ViolationTracker; ``record`` is the only mutator.
    """

    def __init__(self) -> None:
        self._per_category: dict[ViolationCategory, int] = {
            category: 0 for category in ViolationCategory
        }
        self._total = 0

    def record(self, category: ViolationCategory) -> int:
        """Count one violation and return the new total.

        Args:
            category: Category of the accepted event.

        Returns:
            The ledger total after counting.
        """
        self._per_category[category] += 1
        self._total += 1
        return self._total

    @property
    def total(self) -> int:
        return self._total

    @property
    def per_category(self) -> Mapping[ViolationCategory, int]:
        """Read-only view of the per-category counts."""
        return MappingProxyType(self._per_category)

    def count_for(self, category: ViolationCategory) -> int:
        return self._per_category[category]

    def to_dict(self) -> dict[str, object]:
        """Serialize the ledger for logs and reports."""
        return {
            "total": self._total,
            "per_category": {
                category.value: count for category, count in self._per_category.items()
            },
        }
