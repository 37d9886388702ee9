"""Align edited transcript pages with time-coded transcription segments."""

__version__ = "0.1.0"
