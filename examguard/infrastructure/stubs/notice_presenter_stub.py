"""Notice presenter stub that keeps rendered notices in memory."""

from __future__ import annotations

from examguard.application.ports.notice_presenter import NoticePresenterProtocol
from examguard.domain.models.notice import Notice, NoticeSlot


class NoticePresenterStub(NoticePresenterProtocol):
    """In-memory presenter.

    Attributes:
        history: Every notice ever shown, in order.
        dismissed: Ids of dismissed notices, in order.
        time_renders: Every (remaining_seconds, display) pair rendered.
    """

    def __init__(self) -> None:
        self.history: list[Notice] = []
        self.dismissed: list[str] = []
        self.time_renders: list[tuple[int, str]] = []
        self._visible: dict[str, Notice] = {}

    def show_notice(self, notice: Notice) -> None:
        self.history.append(notice)
        self._visible[notice.notice_id] = notice

    def dismiss_notice(self, notice_id: str) -> None:
        if self._visible.pop(notice_id, None) is not None:
            self.dismissed.append(notice_id)

    def render_time_remaining(self, remaining_seconds: int, display: str) -> None:
        self.time_renders.append((remaining_seconds, display))

    @property
    def visible(self) -> list[Notice]:
        """Notices currently on screen, in the order they were shown."""
        return list(self._visible.values())

    def visible_in(self, slot: NoticeSlot) -> list[Notice]:
        return [notice for notice in self._visible.values() if notice.slot is slot]

    def shown_in(self, slot: NoticeSlot) -> list[Notice]:
        return [notice for notice in self.history if notice.slot is slot]

    @property
    def last_time_display(self) -> str | None:
        return self.time_renders[-1][1] if self.time_renders else None
