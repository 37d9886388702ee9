"""Input ingestion: edited transcripts and cached transcription segments."""

from .segments import TimeSegment, load_time_segments, parse_time_segments
from .transcript_parser import FormatError, PageDefinition, load_transcript, parse_transcript_text

__all__ = [
    "FormatError",
    "PageDefinition",
    "TimeSegment",
    "load_time_segments",
    "load_transcript",
    "parse_time_segments",
    "parse_transcript_text",
]
