"""Formatting helpers for countdown displays."""

from __future__ import annotations


def format_clock(seconds: int) -> str:
    """Format a whole number of seconds as ``HH:MM:SS``.

    Negative values are shown as zero.

    >>> format_clock(7200)
    '02:00:00'
    >>> format_clock(61)
    '00:01:01'
    """
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
