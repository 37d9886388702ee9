"""One alignment run: pages -> matched segment groups -> derived timestamps."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from page_align.ingest.segments import TimeSegment
from page_align.ingest.transcript_parser import PageDefinition, parse_transcript_text
from page_align.match.config import MatchingConfig
from page_align.match.engine import MatchedSegmentGroup, match_pages
from page_align.timing.derive import DerivedTimestamp, derive_timestamps


@dataclass(frozen=True)
class AlignmentResult:
    """In-memory output of one story's alignment run."""

    pages: list[PageDefinition]
    groups: list[MatchedSegmentGroup]
    timestamps: list[DerivedTimestamp]


def align_pages(
    pages: Sequence[PageDefinition],
    segments: Sequence[TimeSegment],
    *,
    config: MatchingConfig | None = None,
    log_callback: Callable[[str], None] | None = None,
) -> AlignmentResult:
    """Match pages in order and derive their timestamps; the first failure propagates."""

    groups = match_pages(pages, segments, config=config, log_callback=log_callback)
    timestamps = derive_timestamps(groups)
    return AlignmentResult(pages=list(pages), groups=groups, timestamps=timestamps)


def align_transcript_text(
    transcript_text: str,
    segments: Sequence[TimeSegment],
    *,
    config: MatchingConfig | None = None,
    log_callback: Callable[[str], None] | None = None,
) -> AlignmentResult:
    pages = parse_transcript_text(transcript_text, log_callback=log_callback)
    return align_pages(pages, segments, config=config, log_callback=log_callback)
