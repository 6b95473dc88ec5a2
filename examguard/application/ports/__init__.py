"""Ports (interfaces) the application layer depends on."""

from examguard.application.ports.clock_source import ClockSourceProtocol
from examguard.application.ports.display_mode import DisplayModeProtocol
from examguard.application.ports.navigator import NavigatorProtocol
from examguard.application.ports.notice_presenter import NoticePresenterProtocol
from examguard.application.ports.session_backend import SessionBackendProtocol
from examguard.application.ports.timer_scheduler import (
    TimerCallback,
    TimerHandle,
    TimerSchedulerProtocol,
)

__all__: list[str] = [
    "ClockSourceProtocol",
    "DisplayModeProtocol",
    "NavigatorProtocol",
    "NoticePresenterProtocol",
    "SessionBackendProtocol",
    "TimerCallback",
    "TimerHandle",
    "TimerSchedulerProtocol",
]
