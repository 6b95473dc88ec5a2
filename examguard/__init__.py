"""
examguard - integrity monitoring for proctored exam and interview sessions.

Watches a timed session for tab switches, lost focus, fullscreen exits and
forbidden keyboard/mouse actions, runs the session countdown, and drives the
session to exactly one terminal outcome: submitted or terminated.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
