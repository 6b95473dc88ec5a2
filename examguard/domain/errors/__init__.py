"""Domain errors for examguard.

All exceptions inherit from ExamGuardError.
"""

from examguard.domain.errors.session import (
    InvalidSessionTransitionError,
    SessionCollaboratorError,
    SessionError,
)

__all__: list[str] = [
    "InvalidSessionTransitionError",
    "SessionCollaboratorError",
    "SessionError",
]
