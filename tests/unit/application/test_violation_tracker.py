"""Unit tests for ViolationTracker.

Tests cover:
- Per-category cooldown (events inside the window are dropped)
- Counting and warning text
- Threshold escalation fires on the edge only
- Closed tracker ignores everything
"""

from __future__ import annotations

import pytest

from examguard.application.services.violation_tracker import ViolationTracker
from examguard.domain.models.violation import OutcomeKind, ViolationCategory
from examguard.infrastructure.adapters.virtual_time import VirtualClock


@pytest.fixture
def tracker(virtual_clock: VirtualClock) -> ViolationTracker:
    return ViolationTracker(clock=virtual_clock, threshold=10, cooldown_seconds=3.0)


class TestCounting:
    def test_first_violation_counted_with_warning(self, tracker: ViolationTracker) -> None:
        outcome = tracker.record(ViolationCategory.RIGHT_CLICK)

        assert outcome.kind is OutcomeKind.COUNTED
        assert outcome.total == 1
        assert outcome.message == "Warning: Right-click detected (1/10)"

    def test_total_matches_category_sum(
        self, tracker: ViolationTracker, virtual_clock: VirtualClock
    ) -> None:
        for category in ViolationCategory:
            tracker.record(category)
        virtual_clock.advance(3)
        tracker.record(ViolationCategory.DEV_TOOLS)

        ledger = tracker.ledger
        assert ledger.total == 6
        assert ledger.total == sum(ledger.per_category.values())


class TestCooldown:
    def test_repeat_inside_window_ignored(
        self, tracker: ViolationTracker, virtual_clock: VirtualClock
    ) -> None:
        tracker.record(ViolationCategory.RIGHT_CLICK)
        for _ in range(5):
            virtual_clock.advance(0.5)
            outcome = tracker.record(ViolationCategory.RIGHT_CLICK)
            assert outcome.kind is OutcomeKind.IGNORED_COOLDOWN
            assert outcome.message is None

        assert tracker.ledger.total == 1

    def test_repeat_at_window_edge_counted(
        self, tracker: ViolationTracker, virtual_clock: VirtualClock
    ) -> None:
        tracker.record(ViolationCategory.RIGHT_CLICK)
        virtual_clock.advance(3.0)

        assert tracker.record(ViolationCategory.RIGHT_CLICK).counted

    def test_window_measured_from_last_accepted_event(
        self, tracker: ViolationTracker, virtual_clock: VirtualClock
    ) -> None:
        tracker.record(ViolationCategory.RIGHT_CLICK)
        virtual_clock.advance(2.0)
        tracker.record(ViolationCategory.RIGHT_CLICK)  # ignored, does not extend
        virtual_clock.advance(1.0)

        assert tracker.record(ViolationCategory.RIGHT_CLICK).counted

    def test_cooldown_is_per_category(self, tracker: ViolationTracker) -> None:
        tracker.record(ViolationCategory.RIGHT_CLICK)

        assert tracker.record(ViolationCategory.DEV_TOOLS).counted
        assert tracker.ledger.total == 2

    def test_zero_cooldown_counts_everything(self, virtual_clock: VirtualClock) -> None:
        tracker = ViolationTracker(clock=virtual_clock, threshold=10, cooldown_seconds=0)

        for _ in range(3):
            tracker.record(ViolationCategory.KEYBOARD_SHORTCUT)

        assert tracker.ledger.total == 3


class TestThreshold:
    def test_threshold_reached_on_exact_total(self, virtual_clock: VirtualClock) -> None:
        tracker = ViolationTracker(clock=virtual_clock, threshold=3, cooldown_seconds=0)

        kinds = [tracker.record(ViolationCategory.RIGHT_CLICK).kind for _ in range(3)]

        assert kinds == [
            OutcomeKind.COUNTED,
            OutcomeKind.COUNTED,
            OutcomeKind.THRESHOLD_REACHED,
        ]

    def test_threshold_fires_once(self, virtual_clock: VirtualClock) -> None:
        tracker = ViolationTracker(clock=virtual_clock, threshold=2, cooldown_seconds=0)

        outcomes = [tracker.record(ViolationCategory.RIGHT_CLICK) for _ in range(4)]

        assert sum(o.threshold_reached for o in outcomes) == 1
        assert outcomes[-1].kind is OutcomeKind.COUNTED

    def test_threshold_of_one(self, virtual_clock: VirtualClock) -> None:
        tracker = ViolationTracker(clock=virtual_clock, threshold=1, cooldown_seconds=3)

        assert tracker.record(ViolationCategory.DEV_TOOLS).threshold_reached


class TestClose:
    def test_closed_tracker_ignores_events(self, tracker: ViolationTracker) -> None:
        tracker.record(ViolationCategory.RIGHT_CLICK)
        tracker.close()

        outcome = tracker.record(ViolationCategory.DEV_TOOLS)

        assert tracker.is_closed
        assert outcome.kind is OutcomeKind.IGNORED_CLOSED
        assert outcome.total == 1
        assert tracker.ledger.count_for(ViolationCategory.DEV_TOOLS) == 0

    def test_close_is_idempotent(self, tracker: ViolationTracker) -> None:
        tracker.close()
        tracker.close()

        assert tracker.is_closed
