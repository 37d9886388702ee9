"""Time-coded transcription segments and cache loading."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class TimeSegment:
    """One machine-transcribed span of audio with its text."""

    start_time: float
    end_time: float
    text: str


def _require_string(value: Any, *, path: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{path} must be a string")
    return value


def _require_seconds(value: Any, *, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{path} must be numeric seconds")
    seconds = float(value)
    if math.isnan(seconds) or math.isinf(seconds):
        raise ValueError(f"{path} must be finite numeric seconds")
    if seconds < 0:
        raise ValueError(f"{path} must be non-negative")
    return seconds


def _first_present(raw: dict[str, Any], *keys: str) -> tuple[str, Any]:
    for key in keys:
        if key in raw:
            return key, raw[key]
    return keys[0], None


def parse_time_segments(raw_data: Any, *, source: str = "segments data") -> list[TimeSegment]:
    """Validate cached transcription output and return ordered ``TimeSegment``s.

    Accepted shapes:
    - a list of ``{"startTime", "endTime", "text"}`` objects
    - an object with a ``segments`` list of ``{"start", "end", "text"}`` objects

    Rules:
    - timestamps are numeric, finite and non-negative; values are kept exactly
    - start must be less than end
    - segment starts must be non-decreasing and never before the previous end
    """

    if isinstance(raw_data, dict):
        segments_raw = raw_data.get("segments")
        if not isinstance(segments_raw, list):
            raise ValueError(f"{source}: 'segments' must be a list")
    elif isinstance(raw_data, list):
        segments_raw = raw_data
    else:
        raise ValueError(f"{source}: root must be a list or an object with 'segments'")

    segments: list[TimeSegment] = []
    for idx, segment_raw in enumerate(segments_raw):
        segment_path = f"{source}: segments[{idx}]"
        if not isinstance(segment_raw, dict):
            raise ValueError(f"{segment_path} must be an object")

        start_key, start_raw = _first_present(segment_raw, "startTime", "start")
        end_key, end_raw = _first_present(segment_raw, "endTime", "end")
        start = _require_seconds(start_raw, path=f"{segment_path}.{start_key}")
        end = _require_seconds(end_raw, path=f"{segment_path}.{end_key}")
        if start >= end:
            raise ValueError(f"{segment_path}: start must be less than end ({start} >= {end})")

        if segments and start < segments[-1].start_time:
            raise ValueError(
                f"{segment_path}: segments must be ordered by time "
                f"(start {start} is before previous start {segments[-1].start_time})"
            )
        if segments and start < segments[-1].end_time:
            raise ValueError(
                f"{segment_path}: segments must not overlap "
                f"(start {start} is before previous end {segments[-1].end_time})"
            )

        text = _require_string(segment_raw.get("text"), path=f"{segment_path}.text")
        segments.append(TimeSegment(start_time=start, end_time=end, text=text))

    return segments


def load_time_segments(segments_path: Path) -> list[TimeSegment]:
    """Load a cached transcription JSON file into validated segments."""

    if not segments_path.exists():
        raise ValueError(f"Segments file not found: {segments_path}")

    try:
        raw_data = json.loads(segments_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Segments JSON parse error in '{segments_path}': {exc.msg}") from exc

    return parse_time_segments(raw_data, source=str(segments_path))
