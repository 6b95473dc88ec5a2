"""Display mode port - fullscreen control of the candidate's window."""

from __future__ import annotations

from typing import Protocol


class DisplayModeProtocol(Protocol):
    """Protocol for querying and changing fullscreen mode."""

    def is_fullscreen(self) -> bool:
        ...

    async def request_fullscreen(self) -> bool:
        """Ask the window to enter fullscreen.

        Returns:
            True if fullscreen was entered, False if the request was refused.
        """
        ...

    async def exit_fullscreen(self) -> None:
        """Leave fullscreen. No-op when not fullscreen."""
        ...
