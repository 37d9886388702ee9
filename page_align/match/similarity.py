"""Token-set similarity and word-level diff helpers."""

from __future__ import annotations

from difflib import SequenceMatcher

from page_align.match.normalization import tokenize


def jaccard_similarity(left: str, right: str) -> float:
    """Return the Jaccard index of the whitespace token sets of two texts.

    Inputs are expected to be normalized already. Duplicate tokens collapse,
    and two empty texts are considered identical (1.0).
    """

    left_tokens = set(tokenize(left))
    right_tokens = set(tokenize(right))
    union = left_tokens.union(right_tokens)
    if not union:
        return 1.0
    return len(left_tokens.intersection(right_tokens)) / float(len(union))


def describe_word_diff(original: str, edited: str) -> list[str]:
    """Describe how ``edited`` differs from ``original`` word by word.

    Returns one line per differing run, in reading order:
    ``- removed: ...``, ``+ added: ...`` or ``~ changed: ... -> ...``.
    An empty list means the token sequences are equal.
    """

    original_tokens = tokenize(original)
    edited_tokens = tokenize(edited)
    matcher = SequenceMatcher(None, original_tokens, edited_tokens, autojunk=False)

    lines: list[str] = []
    for tag, orig_start, orig_end, edit_start, edit_end in matcher.get_opcodes():
        removed = " ".join(original_tokens[orig_start:orig_end])
        added = " ".join(edited_tokens[edit_start:edit_end])
        if tag == "delete":
            lines.append(f"- removed: {removed}")
        elif tag == "insert":
            lines.append(f"+ added: {added}")
        elif tag == "replace":
            lines.append(f"~ changed: {removed} -> {added}")
    return lines
