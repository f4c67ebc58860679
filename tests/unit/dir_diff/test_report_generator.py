"""
Unit tests for text, JSON and CSV reports.
"""

import csv
import io
import json
import os
from pathlib import Path

import pytest

from dir_diff.models import DedupAction, DedupGroup, DedupResult, DiffResult, FileEntry, WalkError, display_path
from dir_diff.report_generator import ReportGenerator, format_dedup, format_diff, format_diff_json


def _dedup_result(dry_run: bool = False) -> DedupResult:
    keeper = FileEntry(
        file_path=Path("/d/archive/a.txt"),
        relative_path=Path("archive/a.txt"),
        fingerprint="0123456789abcdef",
        size_bytes=5,
        ordinal=1,
        action=DedupAction.keep,
        reason="first discovered outside date-named directories",
    )
    doomed = FileEntry(
        file_path=Path("/d/2023/a.txt"),
        relative_path=Path("2023/a.txt"),
        fingerprint="0123456789abcdef",
        size_bytes=5,
        ordinal=0,
        action=DedupAction.delete,
        reason="duplicate of archive/a.txt",
    )
    return DedupResult(
        root=Path("/d"),
        dry_run=dry_run,
        total_scanned=3,
        groups=[
            DedupGroup(
                group_id=1,
                fingerprint="0123456789abcdef",
                files=[doomed, keeper],
                keeper=keeper,
                to_delete=[doomed],
            )
        ],
        deleted=[Path("/d/2023/a.txt")],
        survivors=[Path("/d/archive/a.txt")],
        removed_dirs=[Path("/d/2023")],
        walk_errors=[WalkError(path=Path("/d/locked"), reason="Permission denied")],
    )


class TestTextReports:
    """Human-readable output."""

    def test_diff_grouped_by_side(self):
        result = DiffResult(
            dir1=Path("/one"),
            dir2=Path("/two"),
            unique_to_dir1=[],
            unique_to_dir2=[Path("/two/z.txt")],
        )

        text = format_diff(result)

        assert text.splitlines() == [
            "Unique to /one (0):",
            "Unique to /two (1):",
            "/two/z.txt",
        ]

    def test_diff_lists_errors(self):
        result = DiffResult(
            dir1=Path("/one"),
            dir2=Path("/two"),
            errors=[WalkError(path=Path("/one/x"), reason="Permission denied")],
        )

        assert "/one/x: Permission denied" in format_diff(result)

    def test_diff_json(self):
        result = DiffResult(dir1=Path("/a"), dir2=Path("/b"), unique_to_dir1=[Path("/a/x")])

        data = json.loads(format_diff_json(result))

        assert data["unique_to_dir1"] == ["/a/x"]
        assert data["unique_to_dir2"] == []

    def test_dedup_sections(self):
        text = format_dedup(_dedup_result())

        assert "Deleted files (1):\n/d/2023/a.txt" in text
        assert "Removed directories (1):\n/d/2023" in text
        assert "Unreadable entries (1):\n/d/locked: Permission denied" in text
        assert "Failed deletions" not in text

    def test_dedup_dry_run_wording(self):
        text = format_dedup(_dedup_result(dry_run=True))

        assert text.startswith("Would delete files (1):")
        assert "Would remove directories (1):" in text


class TestCsvReport:
    """CSV with comment header."""

    def test_csv_string(self):
        content = ReportGenerator().generate_csv_string(_dedup_result())

        header = [line for line in content.splitlines() if line.startswith("#")]
        assert "# Duplicate Groups: 1" in header
        assert "# Total Duplicates: 1 files (5 bytes)" in header

        body = "\n".join(line for line in content.splitlines() if not line.startswith("#"))
        rows = list(csv.DictReader(io.StringIO(body)))
        assert [r["action"] for r in rows] == ["delete", "keep"]
        assert rows[0]["file_path"] == "/d/2023/a.txt"
        assert rows[0]["fingerprint"] == "0123456789abcdef"

    def test_csv_file(self, tmp_path):
        output = tmp_path / "reports" / "dedup.csv"

        path = ReportGenerator().generate_csv(_dedup_result(), output)

        assert path == output
        assert "archive/a.txt" in output.read_text(encoding="utf-8")


@pytest.mark.skipif(os.name != "posix", reason="needs byte file names")
class TestUndecodableNames:
    """Names with bytes that are not UTF-8 come out as \\xNN escapes."""

    BAD = Path(os.fsdecode(b"/d/2023/\xff.txt"))

    def _entry(self, **overrides) -> FileEntry:
        fields = dict(
            file_path=self.BAD,
            relative_path=Path(os.fsdecode(b"2023/\xff.txt")),
            fingerprint="0123456789abcdef",
            size_bytes=5,
            ordinal=0,
            action=DedupAction.delete,
            reason="duplicate of " + os.fsdecode(b"archive/\xfe.txt"),
        )
        fields.update(overrides)
        return FileEntry(**fields)

    def test_display_path(self):
        assert display_path(self.BAD) == "/d/2023/\\xff.txt"
        assert display_path(Path("/d/café.txt")) == "/d/café.txt"

    def test_diff_text(self):
        result = DiffResult(dir1=Path("/d"), dir2=Path("/e"), unique_to_dir1=[self.BAD])

        text = format_diff(result)

        assert "/d/2023/\\xff.txt" in text.splitlines()
        text.encode("utf-8")

    def test_diff_json(self):
        result = DiffResult(
            dir1=Path("/d"),
            dir2=Path("/e"),
            unique_to_dir1=[self.BAD],
            errors=[WalkError(path=self.BAD, reason=os.fsdecode(b"bad \xfe"))],
        )

        data = json.loads(format_diff_json(result))

        assert data["unique_to_dir1"] == ["/d/2023/\\xff.txt"]
        assert data["errors"] == [{"path": "/d/2023/\\xff.txt", "reason": "bad \\xfe"}]

    def test_model_keeps_raw_path(self):
        result = DiffResult(dir1=Path("/d"), dir2=Path("/e"), unique_to_dir1=[self.BAD])

        assert result.model_dump()["unique_to_dir1"] == [self.BAD]

    def test_dedup_text(self):
        result = DedupResult(root=Path("/d"), deleted=[self.BAD])

        assert "/d/2023/\\xff.txt" in format_dedup(result).splitlines()

    def test_csv_string(self):
        entry = self._entry()
        result = DedupResult(
            root=Path(os.fsdecode(b"/\xfd")),
            groups=[DedupGroup(group_id=1, fingerprint=entry.fingerprint, files=[entry], to_delete=[entry])],
        )

        output = ReportGenerator().generate_csv_string(result)

        assert "# Root: /\\xfd" in output
        body = "\n".join(line for line in output.splitlines() if not line.startswith("#"))
        rows = list(csv.DictReader(io.StringIO(body)))
        assert rows[0]["file_path"] == "/d/2023/\\xff.txt"
        assert rows[0]["reason"] == "duplicate of archive/\\xfe.txt"

    def test_csv_file(self, tmp_path):
        entry = self._entry()
        result = DedupResult(
            root=Path("/d"),
            groups=[DedupGroup(group_id=1, fingerprint=entry.fingerprint, files=[entry], to_delete=[entry])],
        )

        path = ReportGenerator().generate_csv(result, tmp_path / "report.csv")

        assert "/d/2023/\\xff.txt" in path.read_text(encoding="utf-8")
