"""Timer scheduler running on the asyncio event loop.

Each timer is one task that sleeps for the delay and then awaits the
callback. All callbacks run on the same loop, one at a time between
suspension points, which is what lets the session controller do without
locks.
"""

from __future__ import annotations

import asyncio
import contextlib

import structlog

from examguard.application.ports.timer_scheduler import (
    TimerCallback,
    TimerHandle,
    TimerSchedulerProtocol,
)

log = structlog.get_logger()


class AsyncioTimerHandle(TimerHandle):
    """Handle for a timer task.

    Once the callback has started the handle counts as fired and ``cancel``
    becomes a no-op, so a callback that tears down its own owner cannot
    cancel the task it is running in.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._task: asyncio.Task[None] | None = None
        self._cancelled = False
        self._fired = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def fired(self) -> bool:
        return self._fired

    def cancel(self) -> bool:
        if self._cancelled or self._fired:
            return False
        self._cancelled = True
        if self._task is not None:
            self._task.cancel()
        return True


class AsyncioTimerScheduler(TimerSchedulerProtocol):
    """Schedules coroutine callbacks with ``asyncio.sleep``.

    Must be used from inside a running event loop.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[None]] = set()
        self._log = log.bind(service="asyncio_timer_scheduler")

    @property
    def pending_count(self) -> int:
        return len(self._tasks)

    def call_later(
        self,
        delay_seconds: float,
        callback: TimerCallback,
        *,
        name: str,
    ) -> TimerHandle:
        handle = AsyncioTimerHandle(name)
        loop = asyncio.get_running_loop()
        task = loop.create_task(
            self._run(handle, max(0.0, delay_seconds), callback), name=name
        )
        handle._task = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return handle

    async def _run(
        self,
        handle: AsyncioTimerHandle,
        delay_seconds: float,
        callback: TimerCallback,
    ) -> None:
        await asyncio.sleep(delay_seconds)
        if handle.cancelled:
            return
        handle._fired = True
        try:
            await callback()
        except Exception as e:
            self._log.error(
                "timer_callback_failed",
                timer=handle.name,
                error=str(e),
                exc_info=True,
            )

    async def shutdown(self) -> None:
        """Cancel every outstanding timer and wait for the tasks to finish."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._log.debug("timer_scheduler_shutdown", cancelled=len(tasks))
