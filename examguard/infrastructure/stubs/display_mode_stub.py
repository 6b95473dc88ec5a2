"""Display mode stub simulating a window's fullscreen state.

Like a browser, changing the mode through the stub also emits a change event
to the registered listener. This reproduces the loop where leaving
fullscreen during termination reports a fullscreen exit back to the guard.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from examguard.application.ports.display_mode import DisplayModeProtocol

FullscreenListener = Callable[[bool], Awaitable[None]]


class DisplayModeStub(DisplayModeProtocol):
    """In-memory fullscreen state.

    Attributes:
        refuse_requests: If True, request_fullscreen is refused.
        request_calls: Number of request_fullscreen invocations.
        exit_calls: Number of exit_fullscreen invocations.
        events_emitted: Every change event sent to the listener.
    """

    def __init__(self, *, fullscreen: bool = True, refuse_requests: bool = False) -> None:
        self._fullscreen = fullscreen
        self.refuse_requests = refuse_requests
        self.request_calls = 0
        self.exit_calls = 0
        self.events_emitted: list[bool] = []
        self._listener: FullscreenListener | None = None

    def set_listener(self, listener: FullscreenListener | None) -> None:
        """Register the callback receiving fullscreen change events."""
        self._listener = listener

    def is_fullscreen(self) -> bool:
        return self._fullscreen

    async def request_fullscreen(self) -> bool:
        self.request_calls += 1
        if self.refuse_requests:
            return False
        await self._change(True)
        return True

    async def exit_fullscreen(self) -> None:
        self.exit_calls += 1
        await self._change(False)

    async def user_exits_fullscreen(self) -> None:
        """Simulate the candidate pressing Esc."""
        await self._change(False)

    async def _change(self, fullscreen: bool) -> None:
        if self._fullscreen == fullscreen:
            return
        self._fullscreen = fullscreen
        self.events_emitted.append(fullscreen)
        if self._listener is not None:
            await self._listener(fullscreen)
