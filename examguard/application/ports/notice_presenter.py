"""Notice presenter port - the UI surface that renders notices.

The monitor decides *what* to show; the presenter only draws it. Calls are
synchronous because rendering never waits on I/O.
"""

from __future__ import annotations

from typing import Protocol

from examguard.domain.models.notice import Notice


class NoticePresenterProtocol(Protocol):
    """Protocol for rendering notices and the remaining-time display."""

    def show_notice(self, notice: Notice) -> None:
        """Render a notice (toast, banner or modal depending on its slot)."""
        ...

    def dismiss_notice(self, notice_id: str) -> None:
        """Remove a previously shown notice. Unknown ids are ignored."""
        ...

    def render_time_remaining(self, remaining_seconds: int, display: str) -> None:
        """Refresh the session countdown display.

        Args:
            remaining_seconds: Whole seconds left.
            display: The same value formatted as HH:MM:SS.
        """
        ...
