"""Sequential, forward-only matching of page text to time-coded segments."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from page_align.ingest.segments import TimeSegment
from page_align.ingest.transcript_parser import PageDefinition
from page_align.match.config import MatchingConfig
from page_align.match.normalization import normalize_text
from page_align.match.similarity import describe_word_diff, jaccard_similarity

_PREVIEW_CHARACTERS = 100


@dataclass(frozen=True)
class MatchedSegmentGroup:
    """Contiguous run of segments accepted as the spoken form of one page."""

    page_number: int
    segments: tuple[TimeSegment, ...]
    confidence: float


@dataclass(frozen=True)
class PageMatch:
    """Accepted group plus the segments still available to later pages."""

    group: MatchedSegmentGroup
    remaining: tuple[TimeSegment, ...]


def suggest_remedy(score: float) -> str:
    if score >= 0.85:
        return "Try matching mode 'tolerant' or revert minor edits."
    if score >= 0.60:
        return "Try matching mode 'fuzzy' or revert the text closer to the original transcript."
    return "Text heavily edited. Revert the text closer to the original transcript."


class MatchError(ValueError):
    """Raised when no forward window of segments satisfies the matching threshold."""

    def __init__(
        self,
        *,
        page_number: int,
        mode: str,
        threshold: float,
        best_score: float,
        best_candidate: str | None,
        page_text: str,
    ):
        self.page_number = page_number
        self.mode = mode
        self.threshold = threshold
        self.best_score = best_score
        self.best_candidate = best_candidate
        self.page_text = page_text
        self.diff = describe_word_diff(best_candidate, page_text) if best_candidate is not None else []
        self.suggestion = suggest_remedy(best_score)
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        if self.best_candidate is None:
            return (
                f"Page {self.page_number} text not found: all segments are already matched. "
                f"Page text: \"{_preview(self.page_text)}\""
            )
        return (
            f"Page {self.page_number} text not found in transcript segments. "
            f"Similarity {self.best_score:.1%} is below the {self.threshold:.0%} {self.mode} threshold. "
            f"{self.suggestion}"
        )


def _preview(text: str) -> str:
    if len(text) <= _PREVIEW_CHARACTERS:
        return text
    return text[:_PREVIEW_CHARACTERS] + "..."


def concatenate_segments(segments: Sequence[TimeSegment]) -> str:
    """Join segment texts with single spaces."""

    return " ".join(" ".join(segment.text.split()) for segment in segments).strip()


def _emit(log_callback: Callable[[str], None] | None, message: str) -> None:
    if log_callback is None:
        return
    log_callback(message)


def match_page(
    remaining_segments: Sequence[TimeSegment],
    page_text: str,
    *,
    page_number: int,
    config: MatchingConfig | None = None,
    log_callback: Callable[[str], None] | None = None,
) -> PageMatch:
    """Match one page against the unconsumed segments and return the new remainder.

    Windows of 1, 2, 3, ... segments starting at the head of
    ``remaining_segments`` are tried in order and the first one that satisfies
    the configured mode is accepted. Expansion stops once the candidate text
    grows past ``max_window_ratio`` times the page text.
    """

    effective_config = config or MatchingConfig()
    effective_config.validate()

    normalized_page = normalize_text(page_text)
    if not normalized_page:
        raise ValueError(f"Page {page_number} text must be non-empty for matching")

    remaining = tuple(remaining_segments)
    threshold = effective_config.effective_threshold
    if not remaining:
        raise MatchError(
            page_number=page_number,
            mode=effective_config.mode,
            threshold=threshold,
            best_score=0.0,
            best_candidate=None,
            page_text=normalized_page,
        )

    strict = effective_config.mode == "strict"
    length_limit = len(normalized_page) * effective_config.max_window_ratio
    best_score = -1.0
    best_candidate = ""

    for window_size in range(1, len(remaining) + 1):
        normalized_candidate = normalize_text(concatenate_segments(remaining[:window_size]))
        score = jaccard_similarity(normalized_page, normalized_candidate)

        if strict:
            accepted = normalized_candidate == normalized_page
            confidence = 1.0
        else:
            accepted = score >= threshold
            confidence = score

        if accepted:
            if confidence < 1.0:
                _emit(
                    log_callback,
                    f"page {page_number} matched {window_size} segment(s) with confidence "
                    f"{confidence:.1%} ({effective_config.mode} mode)",
                )
                for line in describe_word_diff(normalized_candidate, normalized_page):
                    _emit(log_callback, f"  {line}")
            group = MatchedSegmentGroup(
                page_number=page_number,
                segments=remaining[:window_size],
                confidence=confidence,
            )
            return PageMatch(group=group, remaining=remaining[window_size:])

        if score > best_score:
            best_score = score
            best_candidate = normalized_candidate

        if len(normalized_candidate) > length_limit:
            break

    raise MatchError(
        page_number=page_number,
        mode=effective_config.mode,
        threshold=threshold,
        best_score=best_score,
        best_candidate=best_candidate,
        page_text=normalized_page,
    )


def match_pages(
    pages: Sequence[PageDefinition],
    segments: Sequence[TimeSegment],
    *,
    config: MatchingConfig | None = None,
    log_callback: Callable[[str], None] | None = None,
) -> list[MatchedSegmentGroup]:
    """Match every page in document order, threading the unconsumed segments.

    Fails fast on the first page that cannot be matched.
    """

    remaining = tuple(segments)
    groups: list[MatchedSegmentGroup] = []
    previous_page_number = 0

    for page in pages:
        if page.page_number <= previous_page_number:
            raise ValueError(
                f"Pages must be matched in increasing page order "
                f"(page {page.page_number} follows page {previous_page_number})"
            )
        previous_page_number = page.page_number

        page_match = match_page(
            remaining,
            page.text,
            page_number=page.page_number,
            config=config,
            log_callback=log_callback,
        )
        groups.append(page_match.group)
        remaining = page_match.remaining

    return groups


class SegmentMatcher:
    """Cursor-holding matcher for one story.

    The cursor only moves forward, so each instance serves exactly one ordered
    sequence of pages. Create a fresh instance per story run; never share one
    between stories or threads.
    """

    def __init__(
        self,
        segments: Sequence[TimeSegment],
        config: MatchingConfig | None = None,
        *,
        log_callback: Callable[[str], None] | None = None,
    ):
        self._segments = tuple(segments)
        self._config = config or MatchingConfig()
        self._config.validate()
        self._log_callback = log_callback
        self._cursor = 0
        self._matched_pages = 0

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def remaining_segments(self) -> tuple[TimeSegment, ...]:
        return self._segments[self._cursor :]

    def match_page(self, page_text: str, *, page_number: int | None = None) -> MatchedSegmentGroup:
        """Match the next page; ``page_number`` defaults to the next ordinal."""

        effective_page_number = page_number if page_number is not None else self._matched_pages + 1
        page_match = match_page(
            self.remaining_segments,
            page_text,
            page_number=effective_page_number,
            config=self._config,
            log_callback=self._log_callback,
        )
        self._cursor += len(page_match.group.segments)
        self._matched_pages += 1
        return page_match.group
