"""Command line entry point: ``streamcount [-c|-l|-w|-m] <filepath>``."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, Tuple

from common.config import DEFAULT_PROFILE, load_runtime_config
from common.errors import BackendError
from common.models import DEFAULT_MODES, CharMode, CountMode, CountProgress, Strategy
from core.counting import StreamCounter


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="streamcount",
        description="Print line, word, byte or character counts for a file.",
    )
    parser.add_argument("path", nargs="?", help="File to count")

    # Only the first mode flag counts; later ones are ignored.
    modes = parser.add_argument_group("count selection")
    for flag, mode, label in (
        ("-c", CountMode.BYTES, "byte"),
        ("-l", CountMode.LINES, "line"),
        ("-w", CountMode.WORDS, "word"),
        ("-m", CountMode.CHARS, "character"),
    ):
        modes.add_argument(flag, dest="modes", action="append_const", const=mode, help=f"Print the {label} count")

    parser.add_argument("--config", help="Path to a JSON configuration document")
    parser.add_argument(
        "--profile",
        default=DEFAULT_PROFILE,
        help=f"Configuration profile to use (default: {DEFAULT_PROFILE})",
    )
    parser.add_argument(
        "--char-mode",
        choices=[mode.value for mode in CharMode],
        help="Character interpretation for -m (default from config: utf-8)",
    )
    parser.add_argument(
        "--single-pass",
        action="store_true",
        help="Compute every requested count from one read of the file",
    )
    parser.add_argument("--progress-log", help="Append JSONL progress events to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Report each counting pass on stderr")
    return parser


def render_progress(progress: CountProgress) -> None:
    print(
        f"[count] {progress.file_path} mode={progress.mode} chunks={progress.chunks} "
        f"bytes={progress.bytes_read} elapsed={progress.elapsed_seconds:.4f}s",
        file=sys.stderr,
    )


def selected_modes(args: argparse.Namespace) -> Tuple[CountMode, ...]:
    return (args.modes[0],) if args.modes else DEFAULT_MODES


def collect_overrides(args: argparse.Namespace) -> Dict[str, Dict[str, Any]]:
    overrides: Dict[str, Dict[str, Any]] = {}
    if args.char_mode:
        overrides.setdefault("global", {})["char_mode"] = args.char_mode
    if args.single_pass:
        overrides.setdefault("profile", {})["strategy"] = Strategy.SINGLE_PASS.value
    return overrides


def command_count(args: argparse.Namespace) -> str:
    runtime = load_runtime_config(
        profile=args.profile,
        config_path=Path(args.config) if args.config else None,
        overrides=collect_overrides(args),
    )
    counter = StreamCounter(
        runtime,
        progress_log=Path(args.progress_log) if args.progress_log else None,
        progress_callback=render_progress if args.verbose else None,
    )
    modes = selected_modes(args)
    return counter.report(args.path, modes).render(modes)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    # No path means nothing to count; stay silent and succeed.
    if not args.path:
        return
    try:
        line = command_count(args)
    except BackendError as exc:
        raise SystemExit(f"streamcount: {exc}") from exc
    print(line)


if __name__ == "__main__":
    main()
