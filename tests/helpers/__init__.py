"""Test helpers for examguard tests.

This package contains reusable test utilities:
- RecordingSignalSink: Collects signals a guard or clock dispatches
- SessionHarness: A controller on virtual time with every stub exposed
"""

from tests.helpers.recording_signal_sink import RecordingSignalSink
from tests.helpers.session_harness import SessionHarness, build_harness

__all__ = ["RecordingSignalSink", "SessionHarness", "build_harness"]
