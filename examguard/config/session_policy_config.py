"""Session integrity policy configuration.

Every exam policy constant is configurable: total duration, escalation
threshold, per-category cooldown and the two grace periods. Values can be
overridden via environment variables for deployment tuning.

Environment Variables:
- EXAM_TOTAL_DURATION_SECONDS: Session length (default: 7200, min: 60, max: 43200)
- EXAM_VIOLATION_THRESHOLD: Violations before termination (default: 10, min: 1, max: 100)
- EXAM_COOLDOWN_SECONDS: Per-category cooldown (default: 3, min: 0, max: 60)
- EXAM_FOCUS_GRACE_SECONDS: Time allowed away from the window (default: 10, min: 1, max: 120)
- EXAM_FULLSCREEN_GRACE_SECONDS: Time allowed outside fullscreen (default: 10, min: 1, max: 120)
- EXAM_TERMINATION_NOTICE_SECONDS: Delay before navigating after termination (default: 0, min: 0, max: 30)
- EXAM_COUNT_FOCUS_LOSS: "true" to also count focus loss as a violation (default: false)
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed float value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_int_env(key: str, default: int) -> int:
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_bool_env(key: str, default: bool) -> bool:
    value = os.environ.get(key)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


# =============================================================================
# Session Duration
# =============================================================================

# Default session length: 2 hours
DEFAULT_TOTAL_DURATION_SECONDS = 7200
MIN_TOTAL_DURATION_SECONDS = 60
MAX_TOTAL_DURATION_SECONDS = 43200

# Interview lengths offered when scheduling (minutes)
INTERVIEW_DURATION_MINUTES = (15, 30, 45, 60, 90, 120)

# =============================================================================
# Violation Escalation
# =============================================================================

DEFAULT_VIOLATION_THRESHOLD = 10
MIN_VIOLATION_THRESHOLD = 1
MAX_VIOLATION_THRESHOLD = 100

DEFAULT_COOLDOWN_SECONDS = 3.0
MIN_COOLDOWN_SECONDS = 0.0
MAX_COOLDOWN_SECONDS = 60.0

# =============================================================================
# Grace Periods
# =============================================================================

DEFAULT_FOCUS_GRACE_SECONDS = 10.0
DEFAULT_FULLSCREEN_GRACE_SECONDS = 10.0
MIN_GRACE_SECONDS = 1.0
MAX_GRACE_SECONDS = 120.0

# =============================================================================
# Clock and Termination
# =============================================================================

DEFAULT_CLOCK_TICK_SECONDS = 1.0

DEFAULT_TERMINATION_NOTICE_SECONDS = 0.0
MAX_TERMINATION_NOTICE_SECONDS = 30.0


@dataclass(frozen=True)
class SessionPolicyConfig:
    """Configuration for one proctored session.

    All values can be overridden via environment variables.

    Attributes:
        total_duration_seconds: Length of the session countdown.
        violation_threshold: Aggregate violations that force termination.
        per_category_cooldown_seconds: Minimum spacing between two counted
            violations of the same category.
        focus_grace_seconds: Time the candidate may be away from the window.
        fullscreen_grace_seconds: Time the candidate may stay out of
            fullscreen.
        clock_tick_seconds: Interval between clock and countdown refreshes.
        termination_notice_seconds: How long the termination message stays
            up before navigating away. Zero navigates immediately.
        count_focus_loss_as_violation: Also record a tab-switch/window-focus
            violation when focus is lost.
    """

    total_duration_seconds: int = DEFAULT_TOTAL_DURATION_SECONDS
    violation_threshold: int = DEFAULT_VIOLATION_THRESHOLD
    per_category_cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS
    focus_grace_seconds: float = DEFAULT_FOCUS_GRACE_SECONDS
    fullscreen_grace_seconds: float = DEFAULT_FULLSCREEN_GRACE_SECONDS
    clock_tick_seconds: float = DEFAULT_CLOCK_TICK_SECONDS
    termination_notice_seconds: float = DEFAULT_TERMINATION_NOTICE_SECONDS
    count_focus_loss_as_violation: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if (
            not MIN_TOTAL_DURATION_SECONDS
            <= self.total_duration_seconds
            <= MAX_TOTAL_DURATION_SECONDS
        ):
            raise ValueError(
                f"total_duration_seconds must be between {MIN_TOTAL_DURATION_SECONDS} "
                f"and {MAX_TOTAL_DURATION_SECONDS}, got {self.total_duration_seconds}"
            )
        if (
            not MIN_VIOLATION_THRESHOLD
            <= self.violation_threshold
            <= MAX_VIOLATION_THRESHOLD
        ):
            raise ValueError(
                f"violation_threshold must be between {MIN_VIOLATION_THRESHOLD} "
                f"and {MAX_VIOLATION_THRESHOLD}, got {self.violation_threshold}"
            )
        if (
            not MIN_COOLDOWN_SECONDS
            <= self.per_category_cooldown_seconds
            <= MAX_COOLDOWN_SECONDS
        ):
            raise ValueError(
                f"per_category_cooldown_seconds must be between {MIN_COOLDOWN_SECONDS} "
                f"and {MAX_COOLDOWN_SECONDS}, got {self.per_category_cooldown_seconds}"
            )
        for name in ("focus_grace_seconds", "fullscreen_grace_seconds"):
            value = getattr(self, name)
            if not MIN_GRACE_SECONDS <= value <= MAX_GRACE_SECONDS:
                raise ValueError(
                    f"{name} must be between {MIN_GRACE_SECONDS} "
                    f"and {MAX_GRACE_SECONDS}, got {value}"
                )
        if self.clock_tick_seconds <= 0:
            raise ValueError(
                f"clock_tick_seconds must be positive, got {self.clock_tick_seconds}"
            )
        if not 0 <= self.termination_notice_seconds <= MAX_TERMINATION_NOTICE_SECONDS:
            raise ValueError(
                "termination_notice_seconds must be between 0 "
                f"and {MAX_TERMINATION_NOTICE_SECONDS}, "
                f"got {self.termination_notice_seconds}"
            )

    @classmethod
    def from_environment(cls) -> SessionPolicyConfig:
        """Create config from environment variables with defaults.

        Unparsable values fall back to defaults; numeric values are clamped
        into their valid range.

        Returns:
            SessionPolicyConfig with values from environment or defaults.
        """
        total = int(
            _clamp(
                _get_int_env(
                    "EXAM_TOTAL_DURATION_SECONDS", DEFAULT_TOTAL_DURATION_SECONDS
                ),
                MIN_TOTAL_DURATION_SECONDS,
                MAX_TOTAL_DURATION_SECONDS,
            )
        )
        threshold = int(
            _clamp(
                _get_int_env("EXAM_VIOLATION_THRESHOLD", DEFAULT_VIOLATION_THRESHOLD),
                MIN_VIOLATION_THRESHOLD,
                MAX_VIOLATION_THRESHOLD,
            )
        )
        cooldown = _clamp(
            _get_float_env("EXAM_COOLDOWN_SECONDS", DEFAULT_COOLDOWN_SECONDS),
            MIN_COOLDOWN_SECONDS,
            MAX_COOLDOWN_SECONDS,
        )
        focus_grace = _clamp(
            _get_float_env("EXAM_FOCUS_GRACE_SECONDS", DEFAULT_FOCUS_GRACE_SECONDS),
            MIN_GRACE_SECONDS,
            MAX_GRACE_SECONDS,
        )
        fullscreen_grace = _clamp(
            _get_float_env(
                "EXAM_FULLSCREEN_GRACE_SECONDS", DEFAULT_FULLSCREEN_GRACE_SECONDS
            ),
            MIN_GRACE_SECONDS,
            MAX_GRACE_SECONDS,
        )
        notice = _clamp(
            _get_float_env(
                "EXAM_TERMINATION_NOTICE_SECONDS", DEFAULT_TERMINATION_NOTICE_SECONDS
            ),
            0.0,
            MAX_TERMINATION_NOTICE_SECONDS,
        )

        return cls(
            total_duration_seconds=total,
            violation_threshold=threshold,
            per_category_cooldown_seconds=cooldown,
            focus_grace_seconds=focus_grace,
            fullscreen_grace_seconds=fullscreen_grace,
            termination_notice_seconds=notice,
            count_focus_loss_as_violation=_get_bool_env("EXAM_COUNT_FOCUS_LOSS", False),
        )

    @classmethod
    def for_interview(cls, minutes: int = 30) -> SessionPolicyConfig:
        """Config for a live interview of one of the offered lengths.

        Raises:
            ValueError: If ``minutes`` is not an offered interview length.
        """
        if minutes not in INTERVIEW_DURATION_MINUTES:
            raise ValueError(
                f"Interview length must be one of {INTERVIEW_DURATION_MINUTES}, "
                f"got {minutes}"
            )
        return cls(total_duration_seconds=minutes * 60)


# Pre-defined configurations for common use cases

# Two-hour aptitude exam with the standard integrity policy
DEFAULT_SESSION_POLICY = SessionPolicyConfig()

# Short session for tests; policy constants keep their standard values
TEST_SESSION_POLICY = SessionPolicyConfig(total_duration_seconds=MIN_TOTAL_DURATION_SECONDS)

# Thirty-minute interview
INTERVIEW_SESSION_POLICY = SessionPolicyConfig.for_interview(30)
