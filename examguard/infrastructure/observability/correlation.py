"""Session correlation for structured logs.

Every log entry emitted while a session is being monitored carries that
session's id, including entries from timer callbacks: tasks created by the
asyncio scheduler copy the current context, so the id set when the controller
is built follows every guard and clock callback.

Usage:
    set_session_id("exam-42")
    processors = [..., session_id_processor, ...]
"""

from contextvars import ContextVar
from typing import Any
from uuid import uuid4

_session_id: ContextVar[str] = ContextVar("session_id", default="")


def generate_session_id() -> str:
    """Generate a new session id (UUID4)."""
    return str(uuid4())


def get_session_id() -> str:
    """Get the session id from context, or an empty string if unset."""
    return _session_id.get()


def set_session_id(session_id: str) -> None:
    """Set the session id in the current context."""
    _session_id.set(session_id)


def session_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding ``session_id`` to every log entry.

    An id already bound on the logger wins over the context value.

    Args:
        logger: The logger instance (unused, required by structlog).
        method_name: The logging method name (unused, required by structlog).
        event_dict: The event dictionary to modify.

    Returns:
        The event dictionary with session_id added.
    """
    session_id = get_session_id()
    if session_id:
        event_dict.setdefault("session_id", session_id)
    return event_dict
