"""
Pytest configuration and shared fixtures for examguard tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Time-dependent tests run on VirtualClock/VirtualTimerScheduler, never on sleep
- Use AsyncMock for async collaborator mocking
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

import pytest

from examguard.application.services.notice_board import NoticeBoard
from examguard.config.session_policy_config import DEFAULT_SESSION_POLICY
from examguard.infrastructure.adapters.virtual_time import (
    VirtualClock,
    VirtualTimerScheduler,
)
from examguard.infrastructure.observability.correlation import set_session_id
from examguard.infrastructure.stubs.notice_presenter_stub import NoticePresenterStub
from tests.helpers.recording_signal_sink import RecordingSignalSink
from tests.helpers.session_harness import SessionHarness, build_harness


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from examguard import __version__

    return __version__


@pytest.fixture(autouse=True)
def reset_session_id() -> None:
    """Keep the log correlation id from leaking between tests."""
    set_session_id("")


@pytest.fixture
def virtual_clock() -> VirtualClock:
    return VirtualClock()


@pytest.fixture
def scheduler(virtual_clock: VirtualClock) -> VirtualTimerScheduler:
    return VirtualTimerScheduler(virtual_clock)


@pytest.fixture
def presenter() -> NoticePresenterStub:
    return NoticePresenterStub()


@pytest.fixture
def notices(presenter: NoticePresenterStub) -> NoticeBoard:
    return NoticeBoard(presenter)


@pytest.fixture
def signal_sink() -> RecordingSignalSink:
    return RecordingSignalSink()


@pytest.fixture
def harness() -> SessionHarness:
    """A controller on virtual time with the standard two-hour policy."""
    return build_harness(config=DEFAULT_SESSION_POLICY)
