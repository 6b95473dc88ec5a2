"""Focus guard - keeps the candidate on the session window.

Two browser signals report the same real-world condition: the page becoming
hidden (tab switch) and the window losing focus (switching applications).
They can both fire for one action, in either order. The guard collapses them
into a single focus-loss episode keyed on one ``focus_lost_at`` timestamp, so
a double fire never starts two competing countdowns.

Brief focus loss is not itself a counted violation. If the candidate returns
before the grace period elapses the warning is cleared and nothing is
recorded; otherwise termination is proposed.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import Enum

from examguard.application.ports.clock_source import ClockSourceProtocol
from examguard.application.ports.timer_scheduler import TimerSchedulerProtocol
from examguard.application.services.grace_period_guard import GracePeriodGuard
from examguard.application.services.notice_board import NoticeBoard
from examguard.domain.models.notice import Notice, NoticeLevel, NoticeSlot
from examguard.domain.models.session_signal import SignalSink
from examguard.domain.models.session_state import TerminationReason
from examguard.domain.models.violation import ViolationCategory, ViolationOutcome

FocusLossReporter = Callable[[ViolationCategory], Awaitable[ViolationOutcome]]


class FocusSource(Enum):
    """Which client API reported the focus change."""

    VISIBILITY = "visibility"
    WINDOW = "window"

    @property
    def violation_category(self) -> ViolationCategory:
        if self is FocusSource.VISIBILITY:
            return ViolationCategory.TAB_SWITCH
        return ViolationCategory.WINDOW_FOCUS


class FocusGuard(GracePeriodGuard):
    """Enforces a bounded grace period for returning to the session window.

    Example:
        >>> guard = FocusGuard(clock, scheduler, notices, controller.dispatch, 10)
        >>> guard.start()
        >>> await guard.on_visibility_hidden()   # opens the grace period
        >>> await guard.on_window_blur()         # same episode, ignored
        >>> await guard.on_visibility_visible()  # back within 10s: cancelled
    """

    source_name = "focus_guard"
    termination_reason = TerminationReason.FOCUS_GRACE_EXPIRED
    notice_slot = NoticeSlot.FOCUS

    def __init__(
        self,
        clock: ClockSourceProtocol,
        scheduler: TimerSchedulerProtocol,
        notices: NoticeBoard,
        signal_sink: SignalSink,
        grace_seconds: float,
        tick_seconds: float = 1.0,
        focus_loss_reporter: FocusLossReporter | None = None,
    ) -> None:
        """Initialize the focus guard.

        Args:
            clock: Monotonic time source.
            scheduler: Timer scheduler for the countdown.
            notices: Single-slot notice board.
            signal_sink: Controller dispatch point.
            grace_seconds: Time allowed away from the window.
            tick_seconds: Countdown refresh interval.
            focus_loss_reporter: When set, called once per focus-loss episode
                with the category of the source that opened it.
        """
        super().__init__(
            clock=clock,
            scheduler=scheduler,
            notices=notices,
            signal_sink=signal_sink,
            grace_seconds=grace_seconds,
            tick_seconds=tick_seconds,
        )
        self._focus_loss_reporter = focus_loss_reporter
        self._lost_via: FocusSource | None = None

    @property
    def focus_lost_at(self) -> float | None:
        """Start of the current focus-loss episode, None while focused."""
        if self.is_grace_pending and self._grace is not None:
            return self._grace.started_at
        return None

    @property
    def lost_via(self) -> FocusSource | None:
        return self._lost_via if self.is_grace_pending else None

    async def focus_lost(self, source: FocusSource) -> None:
        """Record that focus was lost, from either client API."""
        if not self._open_grace():
            self._log.debug("focus_loss_deduplicated", source=source.value)
            return
        self._lost_via = source
        self._log.info("focus_lost", source=source.value)
        if self._focus_loss_reporter is not None:
            await self._focus_loss_reporter(source.violation_category)

    async def focus_regained(self, source: FocusSource) -> None:
        """Record that focus returned, from either client API."""
        if not self.is_grace_pending:
            return
        self._log.info("focus_regained", source=source.value)
        await self._close_grace()

    async def on_visibility_hidden(self) -> None:
        await self.focus_lost(FocusSource.VISIBILITY)

    async def on_visibility_visible(self) -> None:
        await self.focus_regained(FocusSource.VISIBILITY)

    async def on_window_blur(self) -> None:
        await self.focus_lost(FocusSource.WINDOW)

    async def on_window_focus(self) -> None:
        await self.focus_regained(FocusSource.WINDOW)

    def build_notice(self, remaining_seconds: int) -> Notice:
        return Notice(
            slot=NoticeSlot.FOCUS,
            level=NoticeLevel.WARNING,
            message=(
                "You have left the session window. Return within "
                f"{remaining_seconds} seconds or your session will be terminated."
            ),
            persistent=True,
            countdown_seconds=remaining_seconds,
        )
