"""Clock source port - the single source of time for every timer.

Services MUST inject a ClockSourceProtocol instead of calling time.monotonic()
directly, so that grace periods, cooldowns and the session countdown can be
driven by virtual time in tests and replays.
"""

from abc import ABC, abstractmethod


class ClockSourceProtocol(ABC):
    """Abstract interface for a monotonic clock.

    Example usage:
        class MyGuard:
            def __init__(self, clock: ClockSourceProtocol) -> None:
                self._clock = clock

            def on_event(self) -> None:
                started_at = self._clock.now()  # NOT time.monotonic()

    For production:
        Use SystemClockSource from examguard/infrastructure/adapters/

    For testing:
        Use VirtualClock from examguard/infrastructure/adapters/virtual_time.py
    """

    @abstractmethod
    def now(self) -> float:
        """Return the current monotonic time in seconds.

        Note:
            Values never decrease. The reference point is arbitrary; only
            differences are meaningful.
        """
        ...
