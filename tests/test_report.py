from __future__ import annotations

import unittest
from pathlib import Path

from page_align.ingest import TimeSegment, load_time_segments, load_transcript, parse_transcript_text
from page_align.match.config import MatchingConfig
from page_align.match.engine import MatchError, match_page
from page_align.pipeline import align_pages, align_transcript_text
from page_align.report import build_validation_report, render_match_failure, render_validation_report

FIXTURES = Path(__file__).parent / "fixtures"


class ValidationReportTests(unittest.TestCase):
    def test_unedited_fixture_has_no_warnings(self) -> None:
        pages = load_transcript(FIXTURES / "transcript_sample.md")
        segments = load_time_segments(FIXTURES / "segments_sample.json")
        config = MatchingConfig(mode="strict")

        report = build_validation_report(align_pages(pages, segments, config=config), config=config)

        self.assertFalse(report.has_warnings)
        self.assertTrue(report.all_perfect)
        self.assertEqual(report.page_count, 5)
        self.assertAlmostEqual(report.total_duration, 35.25)
        self.assertEqual([entry.status for entry in report.entries], ["ok"] * 5)
        self.assertEqual(report.entries[1].segment_count, 2)

        rendered = render_validation_report(report)
        self.assertIn("Pages: 5 (strict mode)", rendered)
        self.assertIn("All pages have 100% match (unedited transcript)", rendered)
        self.assertIn("  Page 1: Introduction (9.4s) - ok 100% match", rendered)
        self.assertIn("Total duration: 0:35 (", rendered)
        self.assertNotIn("Warnings:", rendered)

    def test_short_long_and_low_confidence_pages_are_warned(self) -> None:
        segments = [
            TimeSegment(start_time=0.0, end_time=2.0, text="Bonjour"),
            TimeSegment(start_time=2.0, end_time=130.0, text="one two three four five six seven eight nine ten"),
        ]
        config = MatchingConfig(mode="fuzzy")
        result = align_transcript_text(
            "Bonjour\n---\none two three four five six seven eight NINER TENNER\n",
            segments,
            config=config,
        )

        report = build_validation_report(result, config=config)

        self.assertEqual(
            report.warnings,
            [
                "Page 1: very short duration (2.0s)",
                "Page 2: very long duration (128.0s, >2 minutes)",
                "Page 2: low match confidence (66.7%)",
            ],
        )
        self.assertFalse(report.all_perfect)
        self.assertEqual([entry.status for entry in report.entries], ["warn", "warn"])

        rendered = render_validation_report(report)
        self.assertIn("Warnings:\n  Page 1: very short duration (2.0s)", rendered)
        self.assertNotIn("unedited transcript", rendered)

    def test_long_page_with_perfect_match_is_not_ok(self) -> None:
        segments = [TimeSegment(start_time=0.0, end_time=200.0, text="a very long narrated page")]
        config = MatchingConfig(mode="strict")
        result = align_transcript_text("a very long narrated page\n---\n", segments, config=config)

        report = build_validation_report(result, config=config)

        self.assertEqual(report.warnings, ["Page 1: very long duration (200.0s, >2 minutes)"])
        self.assertEqual(report.entries[0].confidence, 1.0)
        self.assertEqual(report.entries[0].status, "warn")
        self.assertIn("  Page 1: Page 1 (200.0s) - warn 100% match", render_validation_report(report))

    def test_strict_mode_never_warns_about_confidence(self) -> None:
        pages = parse_transcript_text("alpha beta gamma\n---\ndelta epsilon zeta\n")
        segments = [
            TimeSegment(start_time=0.0, end_time=6.0, text="alpha beta gamma"),
            TimeSegment(start_time=6.0, end_time=12.0, text="delta epsilon zeta"),
        ]
        config = MatchingConfig(mode="strict")

        report = build_validation_report(align_pages(pages, segments, config=config), config=config)

        self.assertEqual(report.warnings, [])


class MatchFailureRenderingTests(unittest.TestCase):
    def test_failure_shows_candidate_edit_diff_and_suggestion(self) -> None:
        segments = [TimeSegment(start_time=0.0, end_time=3.0, text="the quick brown fox")]
        with self.assertRaises(MatchError) as ctx:
            match_page(segments, "the slow brown fox", page_number=3, config=MatchingConfig(mode="strict"))

        rendered = render_match_failure(ctx.exception)

        self.assertIn("Matching failed on page 3 (strict mode).", rendered)
        self.assertIn("Similarity: 60.0% (below 100% strict threshold)", rendered)
        self.assertIn('Transcript segments:\n  "the quick brown fox"', rendered)
        self.assertIn('Your edited text:\n  "the slow brown fox"', rendered)
        self.assertIn("Differences:\n  ~ changed: quick -> slow", rendered)
        self.assertIn("Suggestion: Try matching mode 'fuzzy'", rendered)

    def test_failure_after_all_segments_consumed(self) -> None:
        with self.assertRaises(MatchError) as ctx:
            match_page([], "Bonjour", page_number=2)

        rendered = render_match_failure(ctx.exception)

        self.assertIn("All transcript segments were already matched by earlier pages.", rendered)
        self.assertNotIn("Suggestion:", rendered)


if __name__ == "__main__":
    unittest.main()
