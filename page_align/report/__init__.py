"""Validation reporting package."""

from .validation import (
    PageReportEntry,
    ValidationReport,
    build_validation_report,
    render_match_failure,
    render_validation_report,
)

__all__ = [
    "PageReportEntry",
    "ValidationReport",
    "build_validation_report",
    "render_match_failure",
    "render_validation_report",
]
