import io
import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

import cli

FIXTURES = Path(__file__).parent / "fixtures"
TRANSCRIPT = str(FIXTURES / "transcript_sample.md")
SEGMENTS = str(FIXTURES / "segments_sample.json")


def _run(argv: list[str]) -> tuple[int, str, str]:
    stdout = io.StringIO()
    stderr = io.StringIO()
    with redirect_stdout(stdout), redirect_stderr(stderr):
        code = cli.main(argv)
    return code, stdout.getvalue(), stderr.getvalue()


class CliTests(unittest.TestCase):
    def test_version_exits_success(self) -> None:
        code, stdout, _ = _run(["--version"])

        self.assertEqual(code, 0)
        self.assertEqual(stdout.strip(), f"page-align {cli.VERSION}")

    def test_missing_required_args_is_fatal(self) -> None:
        code, _, stderr = _run([])

        self.assertEqual(code, 1)
        self.assertIn("Error: Missing required arguments: --transcript, --segments", stderr)

    def test_unknown_matching_mode_is_fatal(self) -> None:
        code, _, _ = _run(["--transcript", TRANSCRIPT, "--segments", SEGMENTS, "--matching-mode", "loose"])

        self.assertEqual(code, 1)

    def test_threshold_with_strict_mode_is_rejected(self) -> None:
        code, _, stderr = _run(
            [
                "--transcript",
                TRANSCRIPT,
                "--segments",
                SEGMENTS,
                "--matching-mode",
                "strict",
                "--match-threshold",
                "0.9",
            ]
        )

        self.assertEqual(code, 1)
        self.assertIn("--match-threshold cannot be combined with --matching-mode strict", stderr)

    def test_out_of_range_threshold_is_rejected(self) -> None:
        code, _, stderr = _run(["--transcript", TRANSCRIPT, "--segments", SEGMENTS, "--match-threshold", "1.5"])

        self.assertEqual(code, 1)
        self.assertIn("Invalid --match-threshold value", stderr)

    def test_unedited_fixture_reports_success(self) -> None:
        for mode in ("strict", "tolerant", "fuzzy"):
            with self.subTest(mode=mode):
                code, stdout, stderr = _run(
                    ["--transcript", TRANSCRIPT, "--segments", SEGMENTS, "--matching-mode", mode]
                )

                self.assertEqual(code, 0, stderr)
                self.assertIn(f"Pages: 5 ({mode} mode)", stdout)
                self.assertIn("All pages have 100% match (unedited transcript)", stdout)
                self.assertIn("  Page 5: Goodbye (6.8s) - ok 100% match", stdout)

    def test_out_writes_all_exports(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            out_dir = Path(temp_dir) / "out"
            code, stdout, _ = _run(["--transcript", TRANSCRIPT, "--segments", SEGMENTS, "--out", str(out_dir)])

            self.assertEqual(code, 0)
            self.assertTrue((out_dir / "pages.csv").exists())
            self.assertTrue((out_dir / "pages.srt").exists())
            payload = json.loads((out_dir / "timestamps.json").read_text(encoding="utf-8"))
            self.assertIn(f"Exports written to {out_dir}", stdout)

        self.assertEqual(
            [(page["start_time"], page["end_time"]) for page in payload["pages"]],
            [(0.0, 9.4), (9.4, 17.6), (17.6, 23.0), (23.0, 28.5), (28.5, 35.25)],
        )

    def test_verbose_prints_stages_and_log_lines(self) -> None:
        code, stdout, _ = _run(["--transcript", TRANSCRIPT, "--segments", SEGMENTS, "--verbose"])

        self.assertEqual(code, 0)
        self.assertIn("stage: parse start", stdout)
        self.assertIn("stage: matching end", stdout)
        self.assertIn("Verbose: page 3 is very short", stdout)
        self.assertIn("Verbose: matching config=mode=tolerant threshold=0.85 max_window_ratio=2.0", stdout)
        self.assertIn("Verbose: pages parsed=5 segments loaded=7 segments matched=7", stdout)

    def test_edited_page_failure_is_reported_on_stderr(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            transcript_path = Path(temp_dir) / "edited.md"
            transcript_path.write_text(
                FIXTURES.joinpath("transcript_sample.md")
                .read_text(encoding="utf-8")
                .replace("Je bois un café.", "Je prends un thé vert."),
                encoding="utf-8",
            )
            code, stdout, stderr = _run(
                ["--transcript", str(transcript_path), "--segments", SEGMENTS, "--matching-mode", "strict"]
            )

        self.assertEqual(code, 1)
        self.assertEqual(stdout, "")
        self.assertIn("Error: Matching failed on page 2 (strict mode).", stderr)
        self.assertIn("Differences:", stderr)
        self.assertIn("Suggestion:", stderr)

    def test_format_error_is_fatal(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            transcript_path = Path(temp_dir) / "flat.md"
            transcript_path.write_text("One block without delimiters.\n", encoding="utf-8")
            code, _, stderr = _run(["--transcript", str(transcript_path), "--segments", SEGMENTS])

        self.assertEqual(code, 1)
        self.assertIn("Error: No page breaks found in transcript.", stderr)

    def test_audio_duration_shorter_than_pages_is_fatal(self) -> None:
        code, _, stderr = _run(
            ["--transcript", TRANSCRIPT, "--segments", SEGMENTS, "--audio-duration", "30"]
        )

        self.assertEqual(code, 1)
        self.assertIn("Page 5: end time (00:35) is beyond audio duration (00:30)", stderr)

    def test_warnings_exit_with_code_two(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            transcript_path = Path(temp_dir) / "story.md"
            segments_path = Path(temp_dir) / "segments.json"
            transcript_path.write_text("Xin chào các bạn\n---\nTạm biệt nhé\n", encoding="utf-8")
            segments_path.write_text(
                json.dumps(
                    [
                        {"startTime": 0.0, "endTime": 1.5, "text": "Xin chào các bạn"},
                        {"startTime": 1.5, "endTime": 8.0, "text": "Tạm biệt nhé"},
                    ],
                    ensure_ascii=False,
                ),
                encoding="utf-8",
            )
            code, stdout, _ = _run(["--transcript", str(transcript_path), "--segments", str(segments_path)])

        self.assertEqual(code, 2)
        self.assertIn("Warnings:\n  Page 1: very short duration (1.5s)", stdout)


if __name__ == "__main__":
    unittest.main()
