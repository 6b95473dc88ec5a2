"""Session clock - the total-duration countdown.

Counts down from the configured session length, refreshing the display once
per tick, independently of violation state. Reaching zero proposes a normal
submission, the only non-punitive way a session ends on its own.

Remaining time is ``total - (now - started_at)``, recomputed on every tick;
the clock never trusts a decrement counter. ``stop()`` cancels the pending
tick exactly once so no dangling tick can fire after the session ended.
"""

from __future__ import annotations

import math
from enum import Enum

import structlog

from examguard.application.ports.clock_source import ClockSourceProtocol
from examguard.application.ports.timer_scheduler import (
    TimerHandle,
    TimerSchedulerProtocol,
)
from examguard.application.services.notice_board import NoticeBoard
from examguard.domain.models.countdown import format_clock
from examguard.domain.models.grace_period import TIME_EPSILON
from examguard.domain.models.session_signal import SessionSignal, SignalSink

log = structlog.get_logger()


class ClockPhase(Enum):
    IDLE = "idle"
    RUNNING = "running"
    EXPIRED = "expired"
    STOPPED = "stopped"


class SessionClock:
    """Countdown for the whole session.

    Attributes:
        _total_seconds: Configured session length.
        _tick_seconds: Display refresh interval.
        _started_at: Monotonic start time, None until started.
        _timer: Pending tick, if any.
    """

    source_name = "session_clock"

    def __init__(
        self,
        clock: ClockSourceProtocol,
        scheduler: TimerSchedulerProtocol,
        notices: NoticeBoard,
        signal_sink: SignalSink,
        total_duration_seconds: float,
        tick_seconds: float = 1.0,
    ) -> None:
        self._clock = clock
        self._scheduler = scheduler
        self._notices = notices
        self._signal_sink = signal_sink
        self._total_seconds = float(total_duration_seconds)
        self._tick_seconds = tick_seconds
        self._phase = ClockPhase.IDLE
        self._started_at: float | None = None
        self._timer: TimerHandle | None = None
        self._log = log.bind(service=self.source_name)

    @property
    def phase(self) -> ClockPhase:
        return self._phase

    @property
    def is_running(self) -> bool:
        return self._phase is ClockPhase.RUNNING

    def remaining(self) -> float:
        """Seconds left; the full duration before start, zero once expired."""
        if self._started_at is None:
            return self._total_seconds
        if self._phase is ClockPhase.EXPIRED:
            return 0.0
        elapsed = self._clock.now() - self._started_at
        return max(0.0, self._total_seconds - elapsed)

    def remaining_display(self) -> int:
        return max(0, math.ceil(self.remaining() - TIME_EPSILON))

    def start(self) -> None:
        """Start the countdown. Only effective from IDLE."""
        if self._phase is not ClockPhase.IDLE:
            self._log.debug("clock_start_ignored", phase=self._phase.value)
            return
        self._started_at = self._clock.now()
        self._phase = ClockPhase.RUNNING
        self._log.info("session_clock_started", total_seconds=self._total_seconds)
        self._publish()
        self._schedule_tick()

    def stop(self) -> bool:
        """Cancel the countdown.

        Returns:
            True on the call that actually stopped a running clock; False on
            every later call, or if the clock never ran or already expired.
        """
        if self._phase is not ClockPhase.RUNNING:
            return False
        self._phase = ClockPhase.STOPPED
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._log.info(
            "session_clock_stopped", remaining_seconds=round(self.remaining(), 3)
        )
        return True

    def _schedule_tick(self) -> None:
        delay = min(self._tick_seconds, self.remaining())
        self._timer = self._scheduler.call_later(
            delay, self._on_tick, name="session_clock_tick"
        )

    async def _on_tick(self) -> None:
        self._timer = None
        if self._phase is not ClockPhase.RUNNING:
            return
        if self.remaining() <= TIME_EPSILON:
            self._phase = ClockPhase.EXPIRED
            self._notices.render_time_remaining(0, format_clock(0))
            self._log.info("session_clock_expired")
            await self._signal_sink(SessionSignal.clock_expired(source=self.source_name))
            return
        self._publish()
        self._schedule_tick()

    def _publish(self) -> None:
        remaining = self.remaining_display()
        self._notices.render_time_remaining(remaining, format_clock(remaining))
