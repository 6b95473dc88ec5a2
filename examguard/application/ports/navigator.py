"""Navigator port - routing away from a finished session."""

from __future__ import annotations

from typing import Protocol

from examguard.domain.models.session_state import Destination


class NavigatorProtocol(Protocol):
    """Protocol for the host application's router."""

    async def navigate_away(self, destination: Destination) -> None:
        """Leave the session page.

        Args:
            destination: DASHBOARD after termination, RESULTS after submission.
        """
        ...
