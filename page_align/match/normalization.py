"""Text normalization utilities used for matching stages."""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")
_HORIZONTAL_WHITESPACE_RE = re.compile(r"[^\S\r\n]+")
_EXCESS_BLANK_LINES_RE = re.compile(r"\n{3,}")


def normalize_text(text: str) -> str:
    """Return a normalized form of text for matching.

    Rules:
    - lowercase
    - trim surrounding whitespace
    - collapse repeated whitespace (including newlines) to one space

    Letters and punctuation are left untouched, so diacritics survive.
    """

    lowered = text.lower()
    trimmed = lowered.strip()
    return _WHITESPACE_RE.sub(" ", trimmed)


def normalize_whitespace(text: str) -> str:
    """Normalize whitespace for display while keeping paragraph breaks.

    Horizontal whitespace runs become one space, each line is trimmed, and runs
    of blank lines collapse to a single blank line.
    """

    lines = [_HORIZONTAL_WHITESPACE_RE.sub(" ", line).strip() for line in text.splitlines()]
    joined = "\n".join(lines).strip()
    return _EXCESS_BLANK_LINES_RE.sub("\n\n", joined)


def tokenize(text: str) -> list[str]:
    stripped = text.strip()
    if not stripped:
        return []
    return stripped.split()
