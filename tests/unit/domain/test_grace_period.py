"""Unit tests for the GracePeriod model."""

from __future__ import annotations

import pytest

from examguard.domain.models.grace_period import TIME_EPSILON, GracePeriod


class TestGracePeriodCreation:
    def test_begin_sets_start_and_duration(self) -> None:
        grace = GracePeriod.begin(5.0, 10.0)

        assert grace.started_at == 5.0
        assert grace.duration_seconds == 10.0
        assert grace.active

    @pytest.mark.parametrize("duration", [0.0, -1.0])
    def test_non_positive_duration_rejected(self, duration: float) -> None:
        with pytest.raises(ValueError, match="duration_seconds must be positive"):
            GracePeriod(started_at=0.0, duration_seconds=duration)


class TestGracePeriodTiming:
    """Elapsed time is always now - started_at."""

    def test_remaining_counts_down_from_start(self) -> None:
        grace = GracePeriod.begin(100.0, 10.0)

        assert grace.remaining(100.0) == 10.0
        assert grace.remaining(104.0) == 6.0
        assert grace.remaining(130.0) == 0.0

    def test_elapsed_never_negative(self) -> None:
        grace = GracePeriod.begin(100.0, 10.0)

        assert grace.elapsed(99.0) == 0.0

    @pytest.mark.parametrize(
        ("now", "expected"),
        [(0.0, 10), (0.5, 10), (1.0, 9), (9.2, 1), (9.9, 1), (10.0, 0), (15.0, 0)],
    )
    def test_remaining_display_rounds_up(self, now: float, expected: int) -> None:
        grace = GracePeriod.begin(0.0, 10.0)

        assert grace.remaining_display(now) == expected

    def test_has_elapsed_at_deadline(self) -> None:
        grace = GracePeriod.begin(0.0, 10.0)

        assert not grace.has_elapsed(9.9)
        assert grace.has_elapsed(10.0)

    def test_has_elapsed_absorbs_float_drift(self) -> None:
        grace = GracePeriod.begin(0.0, 10.0)

        assert grace.has_elapsed(10.0 - TIME_EPSILON / 10)


class TestGracePeriodDeactivation:
    def test_deactivated_returns_inactive_copy(self) -> None:
        grace = GracePeriod.begin(3.0, 10.0)

        inactive = grace.deactivated()

        assert not inactive.active
        assert inactive.started_at == 3.0
        assert grace.active
