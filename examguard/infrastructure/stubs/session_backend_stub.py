"""Session backend stub implementation.

In-memory implementation of SessionBackendProtocol for development and
testing. It is NOT suitable for production use.
"""

from __future__ import annotations

from typing import Any

from examguard.application.ports.session_backend import SessionBackendProtocol
from examguard.domain.models.session_state import Question, SessionResult


def _default_questions() -> list[Question]:
    """Two ten-question sections, as on the aptitude exam."""
    questions: list[Question] = []
    for section, title in (("math", "Math"), ("logical", "Logical")):
        for number in range(1, 11):
            questions.append(
                Question(
                    question_id=f"{section}-{number}",
                    prompt=f"{title} Question {number}",
                    section=section,
                )
            )
    return questions


class SessionBackendStub(SessionBackendProtocol):
    """In-memory session backend.

    Attributes:
        answers: Stored answers by question index.
        submit_calls: Number of submit_session invocations (including failures).
        cleanup_calls: Number of cleanup_session_state invocations.
        submit_failures_remaining: submit_session raises while this is > 0.
        cleanup_failures_remaining: cleanup_session_state raises while > 0.
    """

    def __init__(
        self,
        session_id: str = "session-stub",
        questions: list[Question] | None = None,
        *,
        submit_failures: int = 0,
        cleanup_failures: int = 0,
    ) -> None:
        self._session_id = session_id
        self._questions = list(questions) if questions is not None else _default_questions()
        self.answers: dict[int, Any] = {}
        self.load_calls = 0
        self.submit_calls = 0
        self.cleanup_calls = 0
        self.submit_failures_remaining = submit_failures
        self.cleanup_failures_remaining = cleanup_failures
        self.submitted_answers: dict[int, Any] | None = None

    async def load_session_questions(self) -> list[Question]:
        self.load_calls += 1
        return list(self._questions)

    async def record_answer(self, question_index: int, value: Any) -> None:
        if not 0 <= question_index < len(self._questions):
            raise IndexError(f"No question at index {question_index}")
        if value is None:
            self.answers.pop(question_index, None)
        else:
            self.answers[question_index] = value

    async def submit_session(self) -> SessionResult:
        self.submit_calls += 1
        if self.submit_failures_remaining > 0:
            self.submit_failures_remaining -= 1
            raise ConnectionError("Session backend unavailable")
        self.submitted_answers = dict(self.answers)
        return SessionResult(
            session_id=self._session_id,
            accepted=True,
            details={
                "answered": len(self.answers),
                "total": len(self._questions),
            },
        )

    async def cleanup_session_state(self) -> None:
        self.cleanup_calls += 1
        if self.cleanup_failures_remaining > 0:
            self.cleanup_failures_remaining -= 1
            raise ConnectionError("Session cache unavailable")
        self.answers.clear()

    def clear(self) -> None:
        """Reset recorded calls (for testing)."""
        self.answers.clear()
        self.load_calls = 0
        self.submit_calls = 0
        self.cleanup_calls = 0
        self.submitted_answers = None
