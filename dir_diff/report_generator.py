"""
Reports for diff and dedup results.

- Plain text: one path per line, grouped by section, errors with reasons
- CSV: resolved duplicate groups with header stats as comments (UTF-8)
- JSON: diff result via pydantic
"""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import TextIO

import structlog

from dir_diff.models import DedupResult, DiffResult, WalkError, display_path, display_text

logger = structlog.get_logger(__name__)


def _section(title: str, paths: list[Path]) -> list[str]:
    lines = [f"{title} ({len(paths)}):"]
    lines.extend(display_path(p) for p in paths)
    return lines


def _error_section(title: str, errors: list[WalkError]) -> list[str]:
    if not errors:
        return []
    lines = [f"{title} ({len(errors)}):"]
    lines.extend(f"{display_path(e.path)}: {display_text(e.reason)}" for e in errors)
    return lines


def format_diff(result: DiffResult) -> str:
    """Unique-to-dir1 then unique-to-dir2, then read errors."""
    lines = _section(f"Unique to {display_path(result.dir1)}", result.unique_to_dir1)
    lines += _section(f"Unique to {display_path(result.dir2)}", result.unique_to_dir2)
    lines += _error_section("Unreadable entries", result.errors)
    return "\n".join(lines) + "\n"


def format_diff_json(result: DiffResult) -> str:
    return result.model_dump_json(indent=2) + "\n"


def format_dedup(result: DedupResult) -> str:
    """Deleted files, removed directories, then every non-fatal problem."""
    verb = "Would delete" if result.dry_run else "Deleted"
    dir_verb = "Would remove" if result.dry_run else "Removed"

    lines = _section(f"{verb} files", result.deleted)
    lines += _section(f"{dir_verb} directories", result.removed_dirs)
    lines += _error_section("Skipped", result.skipped)
    lines += _error_section("Unreadable entries", result.walk_errors)
    lines += _error_section("Failed deletions", result.deletion_errors)
    return "\n".join(lines) + "\n"


class ReportGenerator:
    """Generate a CSV report of resolved duplicate groups."""

    CSV_COLUMNS = [
        "group_id",
        "fingerprint",
        "file_path",
        "size_bytes",
        "action",
        "reason",
    ]

    def generate_csv(self, result: DedupResult, output_path: Path) -> Path:
        """
        Write the CSV report to output_path.

        Returns:
            Path to generated CSV file
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            self._write(f, result)

        logger.info(
            "dedup_report_generated",
            output_path=str(output_path),
            groups=len(result.groups),
        )

        return output_path

    def generate_csv_string(self, result: DedupResult) -> str:
        output = io.StringIO()
        self._write(output, result)
        return output.getvalue()

    def _write(self, f: TextIO, result: DedupResult) -> None:
        self._write_header_stats(f, result)

        writer = csv.DictWriter(f, fieldnames=self.CSV_COLUMNS)
        writer.writeheader()

        for group in result.groups:
            for entry in group.files:
                writer.writerow(
                    {
                        "group_id": group.group_id,
                        "fingerprint": group.fingerprint,
                        "file_path": display_path(entry.file_path),
                        "size_bytes": entry.size_bytes,
                        "action": entry.action.value,
                        "reason": display_text(entry.reason),
                    }
                )

    @staticmethod
    def _write_header_stats(f: TextIO, result: DedupResult) -> None:
        """Write header statistics as CSV comments."""
        total_delete = sum(len(group.to_delete) for group in result.groups)
        reclaimable = sum(e.size_bytes for group in result.groups for e in group.to_delete)

        f.write(f"# Run Date: {result.run_date.strftime('%Y-%m-%d %H:%M:%S')}\n")
        f.write(f"# Root: {display_path(result.root)}\n")
        f.write(f"# Dry Run: {result.dry_run}\n")
        f.write(f"# Total Files Scanned: {result.total_scanned:,}\n")
        f.write(f"# Duplicate Groups: {len(result.groups):,}\n")
        f.write(f"# Total Duplicates: {total_delete:,} files ({reclaimable:,} bytes)\n")
