"""Adapters implementing the clock and timer ports."""

from examguard.infrastructure.adapters.asyncio_timer_scheduler import (
    AsyncioTimerScheduler,
)
from examguard.infrastructure.adapters.system_clock import SystemClockSource
from examguard.infrastructure.adapters.virtual_time import (
    VirtualClock,
    VirtualTimerScheduler,
)

__all__: list[str] = [
    "AsyncioTimerScheduler",
    "SystemClockSource",
    "VirtualClock",
    "VirtualTimerScheduler",
]
