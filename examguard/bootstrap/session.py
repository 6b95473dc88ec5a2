"""Bootstrap wiring for one proctored session.

Builds a SessionController with its collaborators. Anything not supplied
falls back to the production clock/scheduler and the in-memory stubs.
"""

from __future__ import annotations

from collections.abc import Callable

from examguard.application.ports.clock_source import ClockSourceProtocol
from examguard.application.ports.display_mode import DisplayModeProtocol
from examguard.application.ports.navigator import NavigatorProtocol
from examguard.application.ports.notice_presenter import NoticePresenterProtocol
from examguard.application.ports.session_backend import SessionBackendProtocol
from examguard.application.ports.timer_scheduler import TimerSchedulerProtocol
from examguard.application.services.session_controller import SessionController
from examguard.config.session_policy_config import SessionPolicyConfig
from examguard.infrastructure.adapters.asyncio_timer_scheduler import (
    AsyncioTimerScheduler,
)
from examguard.infrastructure.adapters.system_clock import SystemClockSource
from examguard.infrastructure.observability.correlation import (
    generate_session_id,
    set_session_id,
)
from examguard.infrastructure.observability.logging import get_logger_for_service
from examguard.infrastructure.stubs.display_mode_stub import DisplayModeStub
from examguard.infrastructure.stubs.navigator_stub import NavigatorStub
from examguard.infrastructure.stubs.notice_presenter_stub import NoticePresenterStub
from examguard.infrastructure.stubs.session_backend_stub import SessionBackendStub


def build_session_controller(
    session_id: str | None = None,
    *,
    config: SessionPolicyConfig | None = None,
    backend: SessionBackendProtocol | None = None,
    navigator: NavigatorProtocol | None = None,
    presenter: NoticePresenterProtocol | None = None,
    display: DisplayModeProtocol | None = None,
    clock: ClockSourceProtocol | None = None,
    scheduler: TimerSchedulerProtocol | None = None,
    on_violation_count: Callable[[int], None] | None = None,
) -> SessionController:
    """Create a controller for one session.

    Also sets the session id used to correlate log entries. When the display
    is a DisplayModeStub its change events are routed to the controller's
    fullscreen guard, the way a browser adapter would route
    ``fullscreenchange``.

    Args:
        session_id: Session identifier; generated if not provided.
        config: Session policy; read from the environment if not provided.
        backend: Persistence collaborator (default: SessionBackendStub).
        navigator: Router (default: NavigatorStub).
        presenter: Notice UI (default: NoticePresenterStub).
        display: Fullscreen control (default: DisplayModeStub).
        clock: Time source (default: SystemClockSource).
        scheduler: Timer scheduler (default: AsyncioTimerScheduler).
        on_violation_count: Called with the total after each counted violation.

    Returns:
        A SessionController in PRE_START.
    """
    resolved_id = session_id or generate_session_id()
    set_session_id(resolved_id)

    resolved_config = config or SessionPolicyConfig.from_environment()
    resolved_display = display or DisplayModeStub()

    controller = SessionController(
        session_id=resolved_id,
        backend=backend or SessionBackendStub(session_id=resolved_id),
        navigator=navigator or NavigatorStub(),
        presenter=presenter or NoticePresenterStub(),
        display=resolved_display,
        clock=clock or SystemClockSource(),
        scheduler=scheduler or AsyncioTimerScheduler(),
        config=resolved_config,
        on_violation_count=on_violation_count,
    )

    if isinstance(resolved_display, DisplayModeStub):
        resolved_display.set_listener(controller.fullscreen_guard.on_fullscreen_change)

    get_logger_for_service("session_bootstrap").info(
        "session_controller_built",
        session_id=resolved_id,
        total_duration_seconds=resolved_config.total_duration_seconds,
        violation_threshold=resolved_config.violation_threshold,
        focus_grace_seconds=resolved_config.focus_grace_seconds,
        fullscreen_grace_seconds=resolved_config.fullscreen_grace_seconds,
    )
    return controller
