"""Shared grace-period machinery for the focus and fullscreen guards.

A guard watches one condition (window focus, fullscreen mode). When the
condition breaks it opens a grace period, shows a persistent countdown
notice refreshed once per tick, and either closes the grace period when the
condition is restored or proposes termination when the window elapses.

Guard phases:
    IDLE -> WATCHING -> GRACE_PENDING -> WATCHING
                                      -> TERMINATE_REQUESTED
    any -> STOPPED (teardown; every later event is ignored)

Timing is wall-clock relative: each tick recomputes the remaining time from
``now - started_at``, so a delayed or skipped tick never stretches the
window. Each guard owns its own grace period; the two guards share code,
not state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

import structlog

from examguard.application.ports.clock_source import ClockSourceProtocol
from examguard.application.ports.timer_scheduler import (
    TimerHandle,
    TimerSchedulerProtocol,
)
from examguard.application.services.notice_board import NoticeBoard
from examguard.domain.models.grace_period import GracePeriod
from examguard.domain.models.notice import Notice, NoticeSlot
from examguard.domain.models.session_signal import SessionSignal, SignalSink
from examguard.domain.models.session_state import TerminationReason

log = structlog.get_logger()


class GuardPhase(Enum):
    IDLE = "idle"
    WATCHING = "watching"
    GRACE_PENDING = "grace_pending"
    TERMINATE_REQUESTED = "terminate_requested"
    STOPPED = "stopped"


class GracePeriodGuard(ABC):
    """Base class for guards that enforce a bounded self-correction window.

    Subclasses set ``source_name``, ``termination_reason`` and
    ``notice_slot`` and build the countdown notice.

    Attributes:
        _clock: Monotonic time source.
        _scheduler: Timer scheduler for the countdown tick.
        _notices: Single-slot notice board.
        _signal_sink: Controller dispatch point.
        _grace_seconds: Length of the grace period.
        _tick_seconds: Countdown refresh interval.
        _grace: Current grace period, or None if none was opened yet.
        _timer: Pending countdown tick, if any.
    """

    source_name: str = "guard"
    termination_reason: TerminationReason
    notice_slot: NoticeSlot

    def __init__(
        self,
        clock: ClockSourceProtocol,
        scheduler: TimerSchedulerProtocol,
        notices: NoticeBoard,
        signal_sink: SignalSink,
        grace_seconds: float,
        tick_seconds: float = 1.0,
    ) -> None:
        self._clock = clock
        self._scheduler = scheduler
        self._notices = notices
        self._signal_sink = signal_sink
        self._grace_seconds = grace_seconds
        self._tick_seconds = tick_seconds
        self._phase = GuardPhase.IDLE
        self._grace: GracePeriod | None = None
        self._timer: TimerHandle | None = None
        self._log = log.bind(service=self.source_name)

    @property
    def phase(self) -> GuardPhase:
        return self._phase

    @property
    def grace_period(self) -> GracePeriod | None:
        return self._grace

    @property
    def is_grace_pending(self) -> bool:
        return self._phase is GuardPhase.GRACE_PENDING

    def start(self) -> None:
        """Begin watching. Only effective from IDLE."""
        if self._phase is not GuardPhase.IDLE:
            self._log.debug("guard_start_ignored", phase=self._phase.value)
            return
        self._phase = GuardPhase.WATCHING
        self._log.info("guard_started", grace_seconds=self._grace_seconds)

    def stop(self) -> None:
        """Tear the guard down: cancel the tick, deactivate, dismiss the notice.

        Safe to call repeatedly.
        """
        if self._phase is GuardPhase.STOPPED:
            return
        self._cancel_timer()
        if self._grace is not None and self._grace.active:
            self._grace = self._grace.deactivated()
        self._notices.dismiss(self.notice_slot)
        previous = self._phase
        self._phase = GuardPhase.STOPPED
        self._log.info("guard_stopped", previous_phase=previous.value)

    @abstractmethod
    def build_notice(self, remaining_seconds: int) -> Notice:
        """Build the countdown notice for the current remaining time."""
        ...

    def _open_grace(self) -> bool:
        """Open a grace period if currently watching.

        Returns:
            True if a new grace period was opened; False if one is already
            running or the guard is not watching.
        """
        if self._phase is not GuardPhase.WATCHING:
            return False
        now = self._clock.now()
        self._grace = GracePeriod.begin(now, self._grace_seconds)
        self._phase = GuardPhase.GRACE_PENDING
        self._log.warning(
            "grace_period_started",
            started_at=now,
            grace_seconds=self._grace_seconds,
        )
        self._refresh_notice(now)
        self._schedule_tick(now)
        return True

    async def _close_grace(self) -> None:
        """Handle the condition being restored.

        The decision rests on elapsed time, not on event order: if the window
        has already elapsed when the restore event arrives, this is a timeout.
        """
        if self._phase is not GuardPhase.GRACE_PENDING or self._grace is None:
            return
        now = self._clock.now()
        if self._grace.has_elapsed(now):
            await self._expire(now)
            return
        self._cancel_timer()
        elapsed = self._grace.elapsed(now)
        self._grace = self._grace.deactivated()
        self._notices.dismiss(self.notice_slot)
        self._phase = GuardPhase.WATCHING
        self._log.info("grace_period_cancelled", elapsed_seconds=round(elapsed, 3))

    def _schedule_tick(self, now: float) -> None:
        assert self._grace is not None
        delay = min(self._tick_seconds, self._grace.remaining(now))
        self._timer = self._scheduler.call_later(
            delay, self._on_tick, name=f"{self.source_name}_grace_tick"
        )

    async def _on_tick(self) -> None:
        self._timer = None
        if (
            self._phase is not GuardPhase.GRACE_PENDING
            or self._grace is None
            or not self._grace.active
        ):
            return
        now = self._clock.now()
        if self._grace.has_elapsed(now):
            await self._expire(now)
            return
        self._refresh_notice(now)
        self._schedule_tick(now)

    async def _expire(self, now: float) -> None:
        assert self._grace is not None
        self._cancel_timer()
        elapsed = self._grace.elapsed(now)
        self._grace = self._grace.deactivated()
        self._phase = GuardPhase.TERMINATE_REQUESTED
        self._log.warning(
            "grace_period_elapsed",
            elapsed_seconds=round(elapsed, 3),
            reason=self.termination_reason.value,
        )
        await self._signal_sink(
            SessionSignal.terminate_requested(
                source=self.source_name, reason=self.termination_reason
            )
        )

    def _refresh_notice(self, now: float) -> None:
        assert self._grace is not None
        self._notices.show(self.build_notice(self._grace.remaining_display(now)))

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
