"""CLI entrypoint for page-align: validate an edited transcript against its segments."""

from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from page_align import __version__
from page_align.export import write_pages_csv, write_pages_srt, write_timestamps_json
from page_align.ingest import load_time_segments, load_transcript
from page_align.match.config import MATCHING_MODES, MatchingConfig
from page_align.match.engine import MatchError
from page_align.pipeline import align_pages
from page_align.report import build_validation_report, render_match_failure, render_validation_report
from page_align.timing import validate_timestamp_sequence

VERSION = __version__


@dataclass
class CliError(Exception):
    """Represents a fatal, user-facing CLI validation/runtime error."""

    message: str


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="page-align")
    parser.add_argument("--transcript", dest="transcript_path")
    parser.add_argument("--segments", dest="segments_path")
    parser.add_argument("--out", dest="out_dir")
    parser.add_argument("--matching-mode", choices=MATCHING_MODES, default="tolerant")
    parser.add_argument("--match-threshold", type=float, default=None)
    parser.add_argument("--max-window-ratio", type=float, default=2.0)
    parser.add_argument("--audio-duration", type=float, default=None)
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--version", action="store_true")
    return parser


def _validate_required_args(args: argparse.Namespace) -> None:
    missing: list[str] = []
    if not args.transcript_path:
        missing.append("--transcript")
    if not args.segments_path:
        missing.append("--segments")

    if missing:
        raise CliError(f"Missing required arguments: {', '.join(missing)}")


def _build_matching_config(args: argparse.Namespace) -> MatchingConfig:
    if args.match_threshold is not None:
        if args.matching_mode == "strict":
            raise CliError("--match-threshold cannot be combined with --matching-mode strict.")
        if not 0.0 < args.match_threshold <= 1.0:
            raise CliError("Invalid --match-threshold value. Expected a float in (0.0, 1.0].")
    if args.max_window_ratio <= 0:
        raise CliError("Invalid --max-window-ratio value. Expected a float greater than 0.")
    if args.audio_duration is not None and args.audio_duration <= 0:
        raise CliError("Invalid --audio-duration value. Expected a float greater than 0.")

    return MatchingConfig(
        mode=args.matching_mode,
        threshold=args.match_threshold,
        max_window_ratio=args.max_window_ratio,
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        # argparse uses exit code 2 for parse failures; normalize to 1 for fatal CLI errors.
        return 0 if exc.code == 0 else 1

    if args.version:
        print(f"page-align {VERSION}")
        return 0

    timings: dict[str, float] = {}
    runtime_started = time.perf_counter()
    log_lines: list[str] = []

    try:
        _validate_required_args(args)
        config = _build_matching_config(args)

        parse_started = time.perf_counter()
        if args.verbose:
            print("stage: parse start")
        pages = load_transcript(Path(args.transcript_path), log_callback=log_lines.append)
        segments = load_time_segments(Path(args.segments_path))
        timings["parse"] = time.perf_counter() - parse_started
        if args.verbose:
            print("stage: parse end")

        matching_started = time.perf_counter()
        if args.verbose:
            print("stage: matching start")
        result = align_pages(pages, segments, config=config, log_callback=log_lines.append)
        validate_timestamp_sequence(result.timestamps, audio_duration=args.audio_duration)
        timings["matching"] = time.perf_counter() - matching_started
        if args.verbose:
            print("stage: matching end")

        report = build_validation_report(result, config=config)

        if args.out_dir:
            out_dir = Path(args.out_dir)
            if args.verbose:
                print("stage: exports start")
            write_timestamps_json(output_path=out_dir / "timestamps.json", timestamps=result.timestamps)
            write_pages_csv(output_path=out_dir / "pages.csv", result=result)
            write_pages_srt(output_path=out_dir / "pages.srt", result=result)
            if args.verbose:
                print("stage: exports end")
        timings["total_runtime"] = time.perf_counter() - runtime_started
    except MatchError as exc:
        _print_log_lines(log_lines, verbose=args.verbose)
        print(f"Error: {render_match_failure(exc)}", file=sys.stderr)
        return 1
    except (CliError, ValueError) as exc:
        _print_log_lines(log_lines, verbose=args.verbose)
        message = exc.message if isinstance(exc, CliError) else str(exc)
        print(f"Error: {message}", file=sys.stderr)
        return 1

    _print_log_lines(log_lines, verbose=args.verbose)
    if args.verbose:
        print(
            "Verbose: matching config="
            f"mode={config.mode} threshold={config.effective_threshold} "
            f"max_window_ratio={config.max_window_ratio}"
        )
        print(
            f"Verbose: pages parsed={len(pages)} segments loaded={len(segments)} "
            f"segments matched={sum(len(group.segments) for group in result.groups)}"
        )
        print(
            "Verbose: timings seconds="
            f"parse={timings.get('parse', 0.0):.4f} "
            f"matching={timings.get('matching', 0.0):.4f} "
            f"total={timings.get('total_runtime', 0.0):.4f}"
        )

    print(render_validation_report(report))
    if args.out_dir:
        print(f"Exports written to {Path(args.out_dir)}")
    return 2 if report.has_warnings else 0


def _print_log_lines(log_lines: list[str], *, verbose: bool) -> None:
    if not verbose:
        return
    for line in log_lines:
        print(f"Verbose: {line}")


if __name__ == "__main__":
    raise SystemExit(main())
