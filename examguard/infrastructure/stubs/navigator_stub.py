"""Navigator stub that records destinations instead of routing."""

from __future__ import annotations

from examguard.application.ports.navigator import NavigatorProtocol
from examguard.domain.models.session_state import Destination


class NavigatorStub(NavigatorProtocol):
    """Records every successful navigation.

    Attributes:
        destinations: Destinations navigated to, in order.
        attempts: Every attempt, including failed ones.
        failures_remaining: navigate_away raises while this is > 0.
    """

    def __init__(self, *, failures: int = 0) -> None:
        self.destinations: list[Destination] = []
        self.attempts: list[Destination] = []
        self.failures_remaining = failures

    async def navigate_away(self, destination: Destination) -> None:
        self.attempts.append(destination)
        if self.failures_remaining > 0:
            self.failures_remaining -= 1
            raise RuntimeError(f"Navigation to {destination.value} failed")
        self.destinations.append(destination)
