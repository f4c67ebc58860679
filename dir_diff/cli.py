"""
dir-diff command line.

Usage:
    dir-diff DIR1 DIR2      # list files unique to DIR1 or DIR2 by content
    dir-diff DIR1           # delete duplicate files and empty directories in DIR1
    dir-diff -n DIR1        # same, but only report

Exit codes:
    0  success
    1  at least one deletion or directory removal failed
    2  bad input (missing / unreadable directory, usage error)
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

import structlog

from dir_diff import __version__
from dir_diff.config.exceptions import FatalInputError
from dir_diff.config.logging import configure_logging
from dir_diff.config.settings import get_settings
from dir_diff.models import DedupConfig, ScanConfig, display_text
from dir_diff.pipeline import run_dedup, run_diff
from dir_diff.report_generator import ReportGenerator, format_dedup, format_diff, format_diff_json

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_DELETION_FAILED = 1
EXIT_FATAL_INPUT = 2


def _directory(value: str) -> Path:
    path = Path(value)
    if not path.exists():
        raise argparse.ArgumentTypeError(f"path does not exist: {value}")
    if not path.is_dir():
        raise argparse.ArgumentTypeError(f"path is not a directory: {value}")
    return path


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dir-diff",
        description=(
            "With two directories, print the files unique to either one according "
            "to their content hashes. With one directory, delete duplicate files "
            "and empty directories in it."
        ),
    )
    parser.add_argument("dir1", type=_directory, help="A directory.")
    parser.add_argument(
        "dir2",
        type=_directory,
        nargs="?",
        help=(
            "Another directory. If specified, files unique to dir1 or dir2 are "
            "listed. If unspecified, duplicates and empty directories in dir1 "
            "are deleted."
        ),
    )
    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Dedup mode: report what would be deleted without deleting anything",
    )
    parser.add_argument(
        "--trash",
        action="store_true",
        default=None,
        help="Dedup mode: send duplicates to the trash instead of deleting them",
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Dedup mode: re-hash each duplicate right before deleting it",
    )
    parser.add_argument(
        "--report",
        type=Path,
        metavar="CSV",
        help="Dedup mode: write the resolved duplicate groups to a CSV file",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Diff mode: print the result as JSON",
    )
    parser.add_argument(
        "-j",
        "--workers",
        type=_positive_int,
        help="Number of files hashed concurrently",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Debug logging",
    )
    parser.add_argument(
        "--log-format",
        choices=["console", "json"],
        help="Log line format (logs go to stderr)",
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _check_mode_flags(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    """Reject options that do not apply to the selected mode."""
    if args.dir2 is not None:
        dedup_only = [
            flag
            for flag, used in (
                ("--dry-run", args.dry_run),
                ("--trash", args.trash is not None),
                ("--verify", args.verify),
                ("--report", args.report is not None),
            )
            if used
        ]
        if dedup_only:
            parser.error(f"{', '.join(dedup_only)}: dedup mode only (give a single directory)")
    elif args.json:
        parser.error("--json: diff mode only (give two directories)")


async def _run(args: argparse.Namespace) -> int:
    settings = get_settings()

    scan_config = ScanConfig(
        root_path=args.dir1,
        chunk_size=settings.chunk_size,
        max_workers=args.workers or settings.max_workers,
    )

    if args.dir2 is not None:
        result = await run_diff(args.dir1, args.dir2, scan_config)
        sys.stdout.write(format_diff_json(result) if args.json else format_diff(result))
        return EXIT_OK

    dedup_config = DedupConfig(
        dry_run=args.dry_run,
        use_trash=settings.use_trash if args.trash is None else args.trash,
        verify_before_delete=args.verify,
    )
    result = await run_dedup(args.dir1, scan_config, dedup_config)

    sys.stdout.write(format_dedup(result))

    if args.report:
        ReportGenerator().generate_csv(result, args.report)

    return EXIT_OK if result.ok else EXIT_DELETION_FAILED


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _check_mode_flags(parser, args)

    settings = get_settings()
    configure_logging(
        level="DEBUG" if args.verbose else settings.log_level,
        json_format=(args.log_format or settings.log_format) == "json",
    )

    try:
        return asyncio.run(_run(args))
    except FatalInputError as e:
        logger.error("fatal_input_error", path=str(e.path), error=e.reason)
        print(f"dir-diff: {display_text(str(e))}", file=sys.stderr)
        return EXIT_FATAL_INPUT


if __name__ == "__main__":
    sys.exit(main())
