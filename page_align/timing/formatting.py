"""Human-readable time formatting for reports and error messages."""

from __future__ import annotations


def format_duration(seconds: float) -> str:
    """Format a duration as ``M:SS`` (whole seconds, truncated)."""

    total_seconds = int(seconds)
    minutes, secs = divmod(total_seconds, 60)
    return f"{minutes}:{secs:02d}"


def format_timestamp(seconds: float) -> str:
    """Format a position as ``MM:SS``, or ``HH:MM:SS`` past the first hour."""

    total_seconds = int(seconds)
    hours, rem = divmod(total_seconds, 3600)
    minutes, secs = divmod(rem, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"
