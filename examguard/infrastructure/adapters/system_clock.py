"""Production clock source backed by ``time.monotonic``."""

from __future__ import annotations

import time

from examguard.application.ports.clock_source import ClockSourceProtocol


class SystemClockSource(ClockSourceProtocol):
    """Monotonic wall-clock time of the running process."""

    def now(self) -> float:
        return time.monotonic()
