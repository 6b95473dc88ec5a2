"""Violation tracker - cooldown, counting and escalation.

Accepts raw violation signals for the five categories, drops repeats that
fall inside the per-category cooldown, counts the rest into the session's
ledger and reports when the aggregate count reaches the escalation threshold.

The tracker is a pure counter: it never raises for runtime input, never
renders anything and never changes session state. It returns a
ViolationOutcome carrying the user-facing message; the SessionController
decides what to do with it.

Usage:
    tracker = ViolationTracker(clock=clock, threshold=10, cooldown_seconds=3)

    outcome = tracker.record(ViolationCategory.RIGHT_CLICK)
    if outcome.threshold_reached:
        await controller.dispatch(SessionSignal.threshold_reached())
"""

from __future__ import annotations

import structlog

from examguard.application.ports.clock_source import ClockSourceProtocol
from examguard.domain.models.violation import (
    CooldownState,
    OutcomeKind,
    ViolationCategory,
    ViolationEvent,
    ViolationLedger,
    ViolationOutcome,
)

log = structlog.get_logger()

THRESHOLD_MESSAGE = "Multiple violations detected. Your exam will be terminated."


class ViolationTracker:
    """Per-category debounced violation counter with an escalation threshold.

    The threshold outcome fires exactly once, on the edge where the total
    becomes equal to the threshold. The ledger is append-only, so later
    events (if any arrive before the tracker is closed) are counted but
    never re-trigger escalation.

    Attributes:
        _clock: Monotonic time source.
        _threshold: Total count that triggers escalation.
        _cooldown: Per-category last-accepted timestamps.
        _ledger: Counts for this session.
        _closed: True once the session has ended.
    """

    def __init__(
        self,
        clock: ClockSourceProtocol,
        threshold: int,
        cooldown_seconds: float,
    ) -> None:
        """Initialize the tracker.

        Args:
            clock: Monotonic time source.
            threshold: Aggregate violation count that forces termination.
            cooldown_seconds: Minimum spacing between counted violations of
                the same category.
        """
        self._clock = clock
        self._threshold = threshold
        self._cooldown = CooldownState(window_seconds=cooldown_seconds)
        self._ledger = ViolationLedger()
        self._closed = False
        self._log = log.bind(service="violation_tracker")

    @property
    def ledger(self) -> ViolationLedger:
        return self._ledger

    @property
    def threshold(self) -> int:
        return self._threshold

    @property
    def is_closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Stop accepting violations; every later event is ignored."""
        if not self._closed:
            self._closed = True
            self._log.debug("violation_tracker_closed", **self._ledger.to_dict())

    def record(self, category: ViolationCategory) -> ViolationOutcome:
        """Record one raw violation signal.

        Args:
            category: Category of the detected action.

        Returns:
            IGNORED_CLOSED if the session has ended, IGNORED_COOLDOWN if the
            same category was accepted less than the cooldown window ago,
            THRESHOLD_REACHED on the event that brings the total to the
            threshold, COUNTED otherwise.
        """
        event = ViolationEvent(category=category, timestamp=self._clock.now())

        if self._closed:
            return ViolationOutcome(
                kind=OutcomeKind.IGNORED_CLOSED,
                category=category,
                total=self._ledger.total,
            )

        if not self._cooldown.accepts(category, event.timestamp):
            self._log.debug(
                "violation_ignored_cooldown",
                category=category.value,
                total=self._ledger.total,
            )
            return ViolationOutcome(
                kind=OutcomeKind.IGNORED_COOLDOWN,
                category=category,
                total=self._ledger.total,
            )

        self._cooldown.mark_accepted(category, event.timestamp)
        total = self._ledger.record(category)
        message = self.format_warning(category, total)

        if total == self._threshold:
            self._log.warning(
                "violation_threshold_reached",
                category=category.value,
                total=total,
                threshold=self._threshold,
            )
            return ViolationOutcome(
                kind=OutcomeKind.THRESHOLD_REACHED,
                category=category,
                total=total,
                message=message,
            )

        self._log.info(
            "violation_counted",
            category=category.value,
            total=total,
            threshold=self._threshold,
        )
        return ViolationOutcome(
            kind=OutcomeKind.COUNTED,
            category=category,
            total=total,
            message=message,
        )

    def format_warning(self, category: ViolationCategory, total: int) -> str:
        """Build the warning shown for a counted violation."""
        return f"Warning: {category.warning_text} ({total}/{self._threshold})"
