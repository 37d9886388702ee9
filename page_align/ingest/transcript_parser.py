"""Edited transcript ingestion: page-break delimited text to page definitions."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from page_align.match.normalization import normalize_whitespace

PAGE_BREAK = "---"

_HEADING_RE = re.compile(r"^#\s*page\s+(\d+)\s*:?\s*(.*)$", re.IGNORECASE)
_SHORT_PAGE_CHARACTERS = 10


class FormatError(ValueError):
    """Raised when an edited transcript does not follow the page-break format."""

    def __init__(self, message: str, *, page_index: int | None = None):
        super().__init__(message)
        self.page_index = page_index


@dataclass(frozen=True)
class PageDefinition:
    page_number: int
    title: str
    text: str


@dataclass(frozen=True)
class _Heading:
    number: int
    title: str


def _split_blocks(text: str) -> tuple[list[list[str]], bool]:
    blocks: list[list[str]] = [[]]
    found_break = False
    for line in text.splitlines():
        if line.strip() == PAGE_BREAK:
            blocks.append([])
            found_break = True
            continue
        blocks[-1].append(line)
    return blocks, found_break


def _match_heading(line: str) -> _Heading | None:
    match = _HEADING_RE.match(line.strip())
    if match is None:
        return None
    return _Heading(number=int(match.group(1)), title=match.group(2).strip())


def _split_heading(lines: list[str]) -> tuple[_Heading | None, list[str]]:
    for idx, line in enumerate(lines):
        if not line.strip():
            continue
        heading = _match_heading(line)
        if heading is None:
            return None, lines
        return heading, lines[idx + 1 :]
    return None, lines


def _emit(log_callback: Callable[[str], None] | None, message: str) -> None:
    if log_callback is None:
        return
    log_callback(message)


def parse_transcript_text(
    text: str,
    *,
    log_callback: Callable[[str], None] | None = None,
) -> list[PageDefinition]:
    """Split an edited transcript on ``---`` lines into ordered page definitions.

    Each block may open with a ``# Page N: Title`` heading. Pages are always
    numbered by position (1-based); a heading number that disagrees with the
    position is reported through ``log_callback`` and ignored. A single empty
    block after the final delimiter is treated as a trailing delimiter.
    """

    blocks, found_break = _split_blocks(text)
    if not found_break:
        raise FormatError(
            f"No page breaks found in transcript. Add a '{PAGE_BREAK}' line between pages "
            f"(format: text, then a line with '{PAGE_BREAK}', then more text)."
        )

    if not "".join(blocks[-1]).strip():
        blocks = blocks[:-1]

    pages: list[PageDefinition] = []
    for position, lines in enumerate(blocks, start=1):
        heading, body_lines = _split_heading(lines)

        for line in body_lines:
            stray = _match_heading(line)
            if stray is not None:
                raise FormatError(
                    f"Page {position} contains a second page heading ('{line.strip()}'). "
                    f"Add a '{PAGE_BREAK}' line before it so it starts its own page.",
                    page_index=position,
                )

        page_text = normalize_whitespace("\n".join(body_lines))
        if not page_text:
            raise FormatError(
                f"Page {position} has no content between delimiters. Each page must have text content.",
                page_index=position,
            )

        title = f"Page {position}"
        if heading is not None:
            if heading.number != position:
                _emit(
                    log_callback,
                    f"page heading number {heading.number} does not match position {position}; "
                    f"using page {position}",
                )
            if heading.title:
                title = heading.title

        if len(page_text) < _SHORT_PAGE_CHARACTERS:
            _emit(
                log_callback,
                f"page {position} is very short ({len(page_text)} characters); "
                "consider combining with adjacent pages",
            )

        pages.append(PageDefinition(page_number=position, title=title, text=page_text))

    return pages


def load_transcript(
    transcript_path: Path,
    *,
    log_callback: Callable[[str], None] | None = None,
) -> list[PageDefinition]:
    """Read a UTF-8 edited transcript file and parse it into pages."""

    if not transcript_path.exists():
        raise ValueError(f"Transcript file not found: {transcript_path}")

    text = transcript_path.read_text(encoding="utf-8")
    return parse_transcript_text(text, log_callback=log_callback)
