"""Timer scheduler port.

All waiting in the monitor is expressed as scheduled callbacks, never as
blocking waits: cooldown expiry, grace-period countdowns and the session
clock tick. Every scheduled timer must be cancellable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

TimerCallback = Callable[[], Awaitable[None]]


class TimerHandle(ABC):
    """Handle to one scheduled callback."""

    @abstractmethod
    def cancel(self) -> bool:
        """Cancel the callback if it has not run yet.

        Returns:
            True only for the call that actually cancelled the timer; False if
            it was already cancelled or has already fired.
        """
        ...

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        ...


class TimerSchedulerProtocol(ABC):
    """Abstract interface for scheduling coroutine callbacks after a delay.

    For production:
        Use AsyncioTimerScheduler from examguard/infrastructure/adapters/

    For testing and replay:
        Use VirtualTimerScheduler from examguard/infrastructure/adapters/
    """

    @abstractmethod
    def call_later(
        self,
        delay_seconds: float,
        callback: TimerCallback,
        *,
        name: str,
    ) -> TimerHandle:
        """Schedule ``callback`` to be awaited after ``delay_seconds``.

        Args:
            delay_seconds: Delay from now; negative values are treated as 0.
            callback: Coroutine function taking no arguments.
            name: Timer name used in logs.

        Returns:
            A handle that can cancel the timer.
        """
        ...
