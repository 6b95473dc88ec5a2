"""Session lifecycle domain errors.

Guards, the violation tracker and the session clock never raise at runtime;
they resolve to an outcome or a signal. The errors here cover the two places
that can genuinely fail: misuse of the lifecycle API by the host application,
and external collaborators that keep failing after a retry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from examguard.domain.exceptions import ExamGuardError

if TYPE_CHECKING:
    from examguard.domain.models.session_state import SessionState


class SessionError(ExamGuardError):
    """Base class for session lifecycle errors."""

    pass


class InvalidSessionTransitionError(SessionError):
    """Raised when a lifecycle call is made from the wrong state.

    Only ``start()`` raises this: starting a session twice, or starting one
    that already ended, is a programming error in the host application.
    Terminal requests (terminate/submit) are idempotent and never raise.

    Attributes:
        current_state: State the session was in.
        attempted: Name of the transition that was attempted.
    """

    def __init__(self, current_state: SessionState, attempted: str) -> None:
        """Initialize InvalidSessionTransitionError.

        Args:
            current_state: State the session was in.
            attempted: Name of the transition that was attempted.
        """
        self.current_state = current_state
        self.attempted = attempted
        super().__init__(
            f"Cannot {attempted} a session in state {current_state.value}"
        )


class SessionCollaboratorError(SessionError):
    """An external collaborator failed on both the first call and the retry.

    Never raised out of the controller's terminal sequence; it is recorded on
    ``SessionController.collaborator_failures`` so the host can inspect it.

    Attributes:
        operation: Collaborator operation that failed (e.g. "submit_session").
        cause: The exception raised by the final attempt.
    """

    def __init__(self, operation: str, cause: BaseException) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed after retry: {cause!r}")
