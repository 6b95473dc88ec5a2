"""In-memory stub implementations of the external collaborator ports.

Stubs are for development, testing and replays only.
"""

from examguard.infrastructure.stubs.display_mode_stub import DisplayModeStub
from examguard.infrastructure.stubs.navigator_stub import NavigatorStub
from examguard.infrastructure.stubs.notice_presenter_stub import NoticePresenterStub
from examguard.infrastructure.stubs.session_backend_stub import SessionBackendStub

__all__: list[str] = [
    "DisplayModeStub",
    "NavigatorStub",
    "NoticePresenterStub",
    "SessionBackendStub",
]
