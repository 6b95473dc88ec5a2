"""Grace period model shared by the focus and fullscreen guards.

A grace period is the bounded window in which a candidate may self-correct
(return focus, re-enter fullscreen) before the session is terminated.
Elapsed time is always ``now - started_at``; ticks observed are never counted.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

# Absorbs float drift from summing tick delays on a monotonic clock.
TIME_EPSILON = 1e-6


@dataclass(frozen=True, eq=True)
class GracePeriod:
    """Immutable snapshot of one guard's grace period.

    Attributes:
        started_at: Monotonic time the triggering condition was first seen.
        duration_seconds: Length of the window.
        active: False once cancelled or expired. An inactive grace period can
            never schedule a termination.
    """

    started_at: float
    duration_seconds: float
    active: bool = True

    def __post_init__(self) -> None:
        if self.duration_seconds <= 0:
            raise ValueError(
                f"duration_seconds must be positive, got {self.duration_seconds}"
            )

    @classmethod
    def begin(cls, now: float, duration_seconds: float) -> GracePeriod:
        return cls(started_at=now, duration_seconds=duration_seconds)

    def elapsed(self, now: float) -> float:
        return max(0.0, now - self.started_at)

    def remaining(self, now: float) -> float:
        """Seconds left before the window closes (never negative)."""
        return max(0.0, self.duration_seconds - self.elapsed(now))

    def remaining_display(self, now: float) -> int:
        """Whole seconds to show on a countdown (rounded up)."""
        return max(0, math.ceil(self.remaining(now) - TIME_EPSILON))

    def has_elapsed(self, now: float) -> bool:
        return self.remaining(now) <= TIME_EPSILON

    def deactivated(self) -> GracePeriod:
        """Return a copy marked inactive."""
        return replace(self, active=False)
