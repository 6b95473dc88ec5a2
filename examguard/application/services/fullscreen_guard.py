"""Fullscreen guard - requires fullscreen mode for the whole active session.

Leaving fullscreen opens a modal with a live countdown and a one-click
"Return to fullscreen" action. Re-entering fullscreen before the countdown
reaches zero closes the modal; reaching zero proposes termination.

Monitoring starts only when the session leaves PRE_START, because the
guidelines screen is legitimately not fullscreen. Exiting fullscreen while
keeping focus is still a breach; this guard is independent of FocusGuard.
"""

from __future__ import annotations

from examguard.application.ports.clock_source import ClockSourceProtocol
from examguard.application.ports.display_mode import DisplayModeProtocol
from examguard.application.ports.timer_scheduler import TimerSchedulerProtocol
from examguard.application.services.grace_period_guard import (
    GracePeriodGuard,
    GuardPhase,
)
from examguard.application.services.notice_board import NoticeBoard
from examguard.domain.models.notice import Notice, NoticeLevel, NoticeSlot
from examguard.domain.models.session_signal import SignalSink
from examguard.domain.models.session_state import TerminationReason

RETURN_TO_FULLSCREEN_LABEL = "Return to fullscreen"


class FullscreenGuard(GracePeriodGuard):
    """Enforces re-entry into fullscreen within a bounded window.

    Attributes:
        _display: Window display-mode collaborator used by the one-click
            return action.
    """

    source_name = "fullscreen_guard"
    termination_reason = TerminationReason.FULLSCREEN_GRACE_EXPIRED
    notice_slot = NoticeSlot.FULLSCREEN

    def __init__(
        self,
        clock: ClockSourceProtocol,
        scheduler: TimerSchedulerProtocol,
        notices: NoticeBoard,
        signal_sink: SignalSink,
        display: DisplayModeProtocol,
        grace_seconds: float,
        tick_seconds: float = 1.0,
    ) -> None:
        super().__init__(
            clock=clock,
            scheduler=scheduler,
            notices=notices,
            signal_sink=signal_sink,
            grace_seconds=grace_seconds,
            tick_seconds=tick_seconds,
        )
        self._display = display

    def start(self, *, initially_fullscreen: bool = True) -> None:
        """Begin watching.

        Args:
            initially_fullscreen: Display state at session start. If the
                window is not fullscreen the countdown opens immediately.
        """
        super().start()
        if self._phase is GuardPhase.WATCHING and not initially_fullscreen:
            self._log.warning("session_started_outside_fullscreen")
            self._open_grace()

    async def on_fullscreen_exited(self) -> None:
        if self._open_grace():
            self._log.info("fullscreen_exited")

    async def on_fullscreen_entered(self) -> None:
        if not self.is_grace_pending:
            return
        self._log.info("fullscreen_entered")
        await self._close_grace()

    async def on_fullscreen_change(self, is_fullscreen: bool) -> None:
        """Adapter for a single change event carrying the new state."""
        if is_fullscreen:
            await self.on_fullscreen_entered()
        else:
            await self.on_fullscreen_exited()

    async def return_to_fullscreen(self) -> bool:
        """The one-click corrective action from the countdown modal.

        Returns:
            True if fullscreen was re-entered and the countdown cancelled.
        """
        if not self.is_grace_pending:
            return False
        try:
            entered = await self._display.request_fullscreen()
        except Exception as e:
            self._log.warning("fullscreen_request_failed", error=str(e))
            return False
        if not entered:
            self._log.info("fullscreen_request_refused")
            return False
        await self.on_fullscreen_entered()
        return self._phase is GuardPhase.WATCHING

    def build_notice(self, remaining_seconds: int) -> Notice:
        return Notice(
            slot=NoticeSlot.FULLSCREEN,
            level=NoticeLevel.WARNING,
            message=(
                "Fullscreen mode is required. Return to fullscreen within "
                f"{remaining_seconds} seconds or your session will be terminated."
            ),
            persistent=True,
            countdown_seconds=remaining_seconds,
            action_label=RETURN_TO_FULLSCREEN_LABEL,
        )
