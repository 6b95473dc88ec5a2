"""Session backend port - persistence and question retrieval.

The backend is an external collaborator: it loads questions, stores answers,
persists the final submission and clears session-scoped cached data. Only the
SessionController calls it.
"""

from __future__ import annotations

from typing import Any, Protocol

from examguard.domain.models.session_state import Question, SessionResult


class SessionBackendProtocol(Protocol):
    """Protocol for the session's persistence collaborator.

    Methods:
        load_session_questions: Fetch the questions for this session
        record_answer: Store the candidate's answer to one question
        submit_session: Persist answers/feedback and finish the session
        cleanup_session_state: Clear cached question sets and in-progress answers
    """

    async def load_session_questions(self) -> list[Question]:
        """Fetch the questions for the session."""
        ...

    async def record_answer(self, question_index: int, value: Any) -> None:
        """Store an answer.

        Args:
            question_index: Zero-based index into the loaded questions.
            value: The answer as entered; None clears it.
        """
        ...

    async def submit_session(self) -> SessionResult:
        """Persist the session and return the backend's result.

        Raises:
            Exception: Any I/O failure; the controller retries once.
        """
        ...

    async def cleanup_session_state(self) -> None:
        """Clear session-scoped cached data."""
        ...
