"""Composition root for wiring dependencies.

This package centralizes infrastructure-aware wiring so the application
layer can depend on ports without importing infrastructure directly.
"""

from examguard.bootstrap.session import build_session_controller

__all__: list[str] = ["build_session_controller"]
