"""Virtual clock and timer scheduler for deterministic runs.

Simulated time only moves when ``advance`` or ``run_until`` is called. Due
timers fire in due-time order (ties in scheduling order), and the clock is
moved to each timer's due time before its callback runs, so callbacks that
read the clock see exactly the time they were scheduled for.

Used by the test-suite and by the session replay script.

Usage:
    clock = VirtualClock()
    scheduler = VirtualTimerScheduler(clock)
    controller = SessionController(..., clock=clock, scheduler=scheduler)

    await controller.start()
    await controller.focus_guard.on_window_blur()
    await scheduler.advance(10)   # grace period elapses here
"""

from __future__ import annotations

import heapq
import itertools

from examguard.application.ports.clock_source import ClockSourceProtocol
from examguard.application.ports.timer_scheduler import (
    TimerCallback,
    TimerHandle,
    TimerSchedulerProtocol,
)


class VirtualClock(ClockSourceProtocol):
    """Manually advanced monotonic clock.

    Attributes:
        _now: Current simulated time in seconds.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        """Move time forward by ``seconds``.

        Raises:
            ValueError: If ``seconds`` is negative.
        """
        if seconds < 0:
            raise ValueError(f"Cannot advance time backwards. Got {seconds} seconds.")
        self._now += seconds

    def advance_to(self, when: float) -> None:
        """Move time forward to ``when``; earlier values are ignored."""
        if when > self._now:
            self._now = when

    def __repr__(self) -> str:
        return f"VirtualClock(now={self._now:.3f})"


class VirtualTimerHandle(TimerHandle):
    def __init__(self, name: str, due_at: float, callback: TimerCallback) -> None:
        self._name = name
        self.due_at = due_at
        self.callback = callback
        self._cancelled = False
        self._fired = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def fired(self) -> bool:
        return self._fired

    def cancel(self) -> bool:
        if self._cancelled or self._fired:
            return False
        self._cancelled = True
        return True


class VirtualTimerScheduler(TimerSchedulerProtocol):
    """Timer scheduler driven by a VirtualClock.

    Callback exceptions propagate out of ``advance`` so tests fail loudly.
    """

    def __init__(self, clock: VirtualClock) -> None:
        self._clock = clock
        self._queue: list[tuple[float, int, VirtualTimerHandle]] = []
        self._sequence = itertools.count()
        self._fired_names: list[str] = []

    @property
    def clock(self) -> VirtualClock:
        return self._clock

    @property
    def fired_names(self) -> list[str]:
        """Names of every timer that fired, in firing order."""
        return list(self._fired_names)

    def pending(self) -> list[VirtualTimerHandle]:
        """Live (not cancelled, not fired) timers ordered by due time."""
        return [
            handle
            for _, _, handle in sorted(self._queue)
            if not handle.cancelled and not handle.fired
        ]

    def call_later(
        self,
        delay_seconds: float,
        callback: TimerCallback,
        *,
        name: str,
    ) -> TimerHandle:
        handle = VirtualTimerHandle(
            name=name,
            due_at=self._clock.now() + max(0.0, delay_seconds),
            callback=callback,
        )
        heapq.heappush(self._queue, (handle.due_at, next(self._sequence), handle))
        return handle

    async def advance(self, seconds: float) -> None:
        """Advance simulated time, firing every timer that comes due."""
        if seconds < 0:
            raise ValueError(f"Cannot advance time backwards. Got {seconds} seconds.")
        await self.run_until(self._clock.now() + seconds)

    async def run_until(self, when: float) -> None:
        """Fire due timers up to and including ``when``, then move the clock."""
        while self._queue and self._queue[0][0] <= when:
            due_at, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._clock.advance_to(due_at)
            handle._fired = True
            self._fired_names.append(handle.name)
            await handle.callback()
        self._clock.advance_to(when)
