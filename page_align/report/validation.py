"""Validation report for an alignment run, rendered as plain text for the CLI."""

from __future__ import annotations

from dataclasses import dataclass

from page_align.match.config import MatchingConfig
from page_align.match.engine import MatchError
from page_align.pipeline import AlignmentResult
from page_align.timing.formatting import format_duration

SHORT_PAGE_SECONDS = 5.0
LONG_PAGE_SECONDS = 120.0
LOW_CONFIDENCE_BY_MODE = {
    "tolerant": 0.90,
    "fuzzy": 0.80,
}


@dataclass(frozen=True)
class PageReportEntry:
    page_number: int
    title: str
    start_time: float
    end_time: float
    duration: float
    confidence: float
    segment_count: int
    status: str


@dataclass(frozen=True)
class ValidationReport:
    """Summary of one alignment run for display."""

    mode: str
    page_count: int
    entries: list[PageReportEntry]
    warnings: list[str]
    total_duration: float
    all_perfect: bool

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


def build_validation_report(
    result: AlignmentResult,
    *,
    config: MatchingConfig | None = None,
) -> ValidationReport:
    effective_config = config or MatchingConfig()
    low_confidence_threshold = LOW_CONFIDENCE_BY_MODE.get(effective_config.mode)

    entries: list[PageReportEntry] = []
    warnings: list[str] = []
    for page, group, timestamp in zip(result.pages, result.groups, result.timestamps):
        page_warnings: list[str] = []
        if timestamp.duration < SHORT_PAGE_SECONDS:
            page_warnings.append(f"Page {timestamp.page_number}: very short duration ({timestamp.duration:.1f}s)")
        if timestamp.duration > LONG_PAGE_SECONDS:
            page_warnings.append(
                f"Page {timestamp.page_number}: very long duration ({timestamp.duration:.1f}s, >2 minutes)"
            )
        if low_confidence_threshold is not None and group.confidence < low_confidence_threshold:
            page_warnings.append(f"Page {timestamp.page_number}: low match confidence ({group.confidence:.1%})")

        warnings.extend(page_warnings)
        status = "ok" if not page_warnings and group.confidence >= 1.0 else "warn"
        entries.append(
            PageReportEntry(
                page_number=timestamp.page_number,
                title=page.title,
                start_time=timestamp.start_time,
                end_time=timestamp.end_time,
                duration=timestamp.duration,
                confidence=group.confidence,
                segment_count=len(group.segments),
                status=status,
            )
        )

    return ValidationReport(
        mode=effective_config.mode,
        page_count=len(entries),
        entries=entries,
        warnings=warnings,
        total_duration=sum(entry.duration for entry in entries),
        all_perfect=bool(entries) and all(entry.confidence >= 1.0 for entry in entries),
    )


def render_validation_report(report: ValidationReport) -> str:
    lines = [
        "Validation report",
        f"Pages: {report.page_count} ({report.mode} mode)",
        "",
    ]

    if report.warnings:
        lines.append("Warnings:")
        lines.extend(f"  {warning}" for warning in report.warnings)
        lines.append("")

    if report.all_perfect:
        lines.append("All pages have 100% match (unedited transcript)")
        lines.append("")

    lines.append("Story structure:")
    for entry in report.entries:
        lines.append(
            f"  Page {entry.page_number}: {entry.title} ({entry.duration:.1f}s) "
            f"- {entry.status} {entry.confidence:.0%} match"
        )
    lines.append("")
    lines.append(
        f"Total duration: {format_duration(report.total_duration)} ({report.total_duration:.1f} seconds)"
    )
    return "\n".join(lines)


def render_match_failure(error: MatchError) -> str:
    """Describe a failed page match so the editor can fix the text or relax the mode."""

    lines = [f"Matching failed on page {error.page_number} ({error.mode} mode)."]
    if error.best_candidate is None:
        lines.append("All transcript segments were already matched by earlier pages.")
        lines.append("Your edited text:")
        lines.append(f"  \"{error.page_text}\"")
        return "\n".join(lines)

    lines.extend(
        [
            f"Similarity: {error.best_score:.1%} (below {error.threshold:.0%} {error.mode} threshold)",
            "Transcript segments:",
            f"  \"{error.best_candidate}\"",
            "Your edited text:",
            f"  \"{error.page_text}\"",
        ]
    )
    if error.diff:
        lines.append("Differences:")
        lines.extend(f"  {line}" for line in error.diff)
    lines.append(f"Suggestion: {error.suggestion}")
    return "\n".join(lines)
