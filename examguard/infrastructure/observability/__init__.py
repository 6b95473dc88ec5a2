"""Observability infrastructure: structured logging and session correlation.

Usage:
    from examguard.infrastructure.observability import (
        configure_structlog,
        set_session_id,
    )

    configure_structlog(environment="production")
    set_session_id("exam-42")
"""

from examguard.infrastructure.observability.correlation import (
    generate_session_id,
    get_session_id,
    session_id_processor,
    set_session_id,
)
from examguard.infrastructure.observability.logging import (
    configure_structlog,
    get_logger_for_service,
)

__all__: list[str] = [
    "configure_structlog",
    "generate_session_id",
    "get_logger_for_service",
    "get_session_id",
    "session_id_processor",
    "set_session_id",
]
