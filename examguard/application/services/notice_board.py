"""Single-slot notice policy in front of the notice presenter.

Visibility-change and blur events, countdown refreshes and violation warnings
can all want to put something on screen at nearly the same moment. Each slot
holds at most one live notice: showing a new one dismisses the previous one
first, so notices are replaced rather than stacked.
"""

from __future__ import annotations

import structlog

from examguard.application.ports.notice_presenter import NoticePresenterProtocol
from examguard.domain.models.notice import Notice, NoticeSlot

log = structlog.get_logger()


class NoticeBoard:
    """Tracks the live notice per slot and enforces dismiss-before-show.

    Attributes:
        _presenter: UI collaborator that renders notices.
        _live: Currently shown notice for each occupied slot.
    """

    def __init__(self, presenter: NoticePresenterProtocol) -> None:
        self._presenter = presenter
        self._live: dict[NoticeSlot, Notice] = {}
        self._log = log.bind(service="notice_board")

    def show(self, notice: Notice) -> Notice:
        """Show ``notice`` in its slot, dismissing whatever was there."""
        self.dismiss(notice.slot)
        self._live[notice.slot] = notice
        self._presenter.show_notice(notice)
        self._log.debug(
            "notice_shown",
            slot=notice.slot.value,
            level=notice.level.value,
            countdown_seconds=notice.countdown_seconds,
        )
        return notice

    def dismiss(self, slot: NoticeSlot) -> bool:
        """Dismiss the live notice in ``slot``.

        Returns:
            True if a notice was dismissed.
        """
        current = self._live.pop(slot, None)
        if current is None:
            return False
        self._presenter.dismiss_notice(current.notice_id)
        return True

    def clear(self) -> None:
        """Dismiss every live notice."""
        for slot in list(self._live):
            self.dismiss(slot)

    def current(self, slot: NoticeSlot) -> Notice | None:
        return self._live.get(slot)

    def render_time_remaining(self, remaining_seconds: int, display: str) -> None:
        self._presenter.render_time_remaining(remaining_seconds, display)
