"""Export writers for page timestamps, per-page CSV and SRT preview."""

from __future__ import annotations

import csv
import json
from pathlib import Path

from page_align.pipeline import AlignmentResult
from page_align.timing.derive import DerivedTimestamp


def write_timestamps_json(*, output_path: Path, timestamps: list[DerivedTimestamp]) -> None:
    """Write page timestamps in page order, the shape consumed by audio splitting."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "pages": [
            {
                "page_number": timestamp.page_number,
                "start_time": timestamp.start_time,
                "end_time": timestamp.end_time,
                "duration": timestamp.duration,
            }
            for timestamp in timestamps
        ]
    }
    output_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def write_pages_csv(*, output_path: Path, result: AlignmentResult) -> None:
    """Write one CSV row per page with its timing and match confidence."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow(
            [
                "page_number",
                "title",
                "start_time",
                "end_time",
                "duration",
                "segment_count",
                "confidence",
                "text",
            ]
        )
        for page, group, timestamp in zip(result.pages, result.groups, result.timestamps):
            writer.writerow(
                [
                    timestamp.page_number,
                    page.title,
                    _format_float(timestamp.start_time),
                    _format_float(timestamp.end_time),
                    _format_float(timestamp.duration),
                    len(group.segments),
                    _format_float(group.confidence),
                    page.text,
                ]
            )


def write_pages_srt(*, output_path: Path, result: AlignmentResult) -> None:
    """Write an SRT cue per page so edited text can be previewed against the audio."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    entries: list[str] = []

    for idx, (page, timestamp) in enumerate(zip(result.pages, result.timestamps), start=1):
        block = [
            str(idx),
            f"{_format_srt_timestamp(timestamp.start_time)} --> {_format_srt_timestamp(timestamp.end_time)}",
            "\n".join(line for line in page.text.splitlines() if line.strip()),
        ]
        entries.append("\n".join(block))

    output_path.write_text("\n\n".join(entries) + "\n", encoding="utf-8")


def _format_float(value: float) -> str:
    return f"{value:.6f}".rstrip("0").rstrip(".")


def _format_srt_timestamp(seconds: float) -> str:
    total_ms = int(round(seconds * 1000.0))
    hours, rem = divmod(total_ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    sec, millis = divmod(rem, 1_000)
    return f"{hours:02d}:{minutes:02d}:{sec:02d},{millis:03d}"
