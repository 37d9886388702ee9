"""Derive page start/end/duration from matched segment groups."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from page_align.match.engine import MatchedSegmentGroup

from .formatting import format_timestamp

_DURATION_TOLERANCE_SECONDS = 1.0


class ContractViolation(RuntimeError):
    """Raised when upstream matching output breaks its contract (a defect, not user error)."""


@dataclass(frozen=True)
class DerivedTimestamp:
    page_number: int
    start_time: float
    end_time: float
    duration: float


def derive_timestamp(group: MatchedSegmentGroup) -> DerivedTimestamp:
    if not group.segments:
        raise ContractViolation(
            f"Page {group.page_number} has no segments. "
            "Each matched group must contain at least one segment."
        )

    start_time = group.segments[0].start_time
    end_time = group.segments[-1].end_time
    if end_time <= start_time:
        raise ContractViolation(
            f"Page {group.page_number}: end time ({end_time}) must be greater than start time ({start_time})."
        )

    return DerivedTimestamp(
        page_number=group.page_number,
        start_time=start_time,
        end_time=end_time,
        duration=end_time - start_time,
    )


def derive_timestamps(groups: Sequence[MatchedSegmentGroup]) -> list[DerivedTimestamp]:
    """Map each matched group to its exact start, end and duration, in input order."""

    return [derive_timestamp(group) for group in groups]


def validate_timestamp_sequence(
    timestamps: Sequence[DerivedTimestamp],
    *,
    audio_duration: float | None = None,
) -> None:
    """Check timestamps are ready for audio splitting.

    Rules:
    - each page ends after it starts
    - a page never starts before the previous page ends
    - no page ends beyond ``audio_duration`` (1 second tolerance), when given
    """

    previous: DerivedTimestamp | None = None
    for timestamp in timestamps:
        if timestamp.end_time <= timestamp.start_time:
            raise ValueError(
                f"Page {timestamp.page_number}: end time ({format_timestamp(timestamp.end_time)}) "
                f"must be after start time ({format_timestamp(timestamp.start_time)})"
            )

        if audio_duration is not None and timestamp.end_time > audio_duration + _DURATION_TOLERANCE_SECONDS:
            raise ValueError(
                f"Page {timestamp.page_number}: end time ({format_timestamp(timestamp.end_time)}) "
                f"is beyond audio duration ({format_timestamp(audio_duration)})"
            )

        if previous is not None and previous.end_time > timestamp.start_time:
            raise ValueError(
                f"Page {previous.page_number} and {timestamp.page_number}: timestamps overlap. "
                f"Page {previous.page_number} ends at {previous.end_time}, "
                f"but page {timestamp.page_number} starts at {timestamp.start_time}"
            )
        previous = timestamp
