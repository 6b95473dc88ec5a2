"""Application services for session integrity monitoring."""

from examguard.application.services.focus_guard import FocusGuard, FocusSource
from examguard.application.services.fullscreen_guard import FullscreenGuard
from examguard.application.services.grace_period_guard import (
    GracePeriodGuard,
    GuardPhase,
)
from examguard.application.services.notice_board import NoticeBoard
from examguard.application.services.session_clock import ClockPhase, SessionClock
from examguard.application.services.session_controller import SessionController
from examguard.application.services.violation_tracker import ViolationTracker

__all__: list[str] = [
    "ClockPhase",
    "FocusGuard",
    "FocusSource",
    "FullscreenGuard",
    "GracePeriodGuard",
    "GuardPhase",
    "NoticeBoard",
    "SessionClock",
    "SessionController",
    "ViolationTracker",
]
