"""
Pydantic models for dir-diff.

Models:
- ScanConfig: Walk configuration (root, chunk size, worker pool)
- DedupConfig: Deletion behaviour (dry run, trash, verification)
- FileEntry: One regular file with its fingerprint and discovery ordinal
- DirectoryNode: One directory with the counts used by the empty-dir sweep
- WalkError: A non-fatal per-entry read failure
- DedupGroup: Files sharing a fingerprint, with keeper / to_delete split
- DiffResult: Paths unique to either side of a two-root comparison
- DedupResult: Outcome of a dedup run
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional, Union

from pydantic import BaseModel, Field, PlainSerializer


def display_text(text: str) -> str:
    """
    Printable form of text that may carry file names.

    Undecodable bytes in file names (lone surrogates after os.fsdecode) are
    rendered as \\xNN escapes, so the result always encodes as UTF-8.
    """
    return os.fsencode(text).decode("utf-8", "backslashreplace")


def display_path(path: Union[str, os.PathLike]) -> str:
    return display_text(os.fspath(path))


# Serialize to JSON through display_path / display_text
DisplayPath = Annotated[Path, PlainSerializer(display_path, return_type=str, when_used="json")]
DisplayText = Annotated[str, PlainSerializer(display_text, return_type=str, when_used="json")]


class DedupAction(str, Enum):
    """Action to take on a file in a dedup group."""

    keep = "keep"
    delete = "delete"


class ScanConfig(BaseModel):
    """Configuration for one tree walk."""

    root_path: DisplayPath = Field(description="Root directory to walk")
    chunk_size: int = Field(
        default=65536,
        ge=1,
        description="Hashing read size in bytes",
    )
    max_workers: int = Field(
        default=8,
        ge=1,
        description="Maximum number of files hashed concurrently",
    )


class DedupConfig(BaseModel):
    """Configuration for the destructive phase."""

    dry_run: bool = Field(
        default=False,
        description="Resolve and report, but delete nothing",
    )
    use_trash: bool = Field(
        default=False,
        description="Send deleted files to the OS trash instead of unlinking",
    )
    verify_before_delete: bool = Field(
        default=False,
        description="Re-hash each doomed file and skip it if it changed since the walk",
    )


class FileEntry(BaseModel):
    """Single regular file found during a walk."""

    file_path: DisplayPath
    relative_path: DisplayPath
    fingerprint: str
    size_bytes: int
    ordinal: int
    action: DedupAction = DedupAction.keep
    reason: DisplayText = ""


class DirectoryNode(BaseModel):
    """
    Directory seen during a walk.

    other_count counts every non-directory entry (regular files, symlinks,
    FIFOs, unreadable files). subdir_count counts real subdirectories.
    """

    path: DisplayPath
    depth: int
    other_count: int = 0
    subdir_count: int = 0
    readable: bool = True


class WalkError(BaseModel):
    """Per-entry read failure (entry excluded from the index)."""

    path: DisplayPath
    reason: DisplayText


class DedupGroup(BaseModel):
    """Group of duplicate files sharing the same fingerprint."""

    group_id: int
    fingerprint: str
    files: list[FileEntry] = Field(default_factory=list)
    keeper: Optional[FileEntry] = None
    to_delete: list[FileEntry] = Field(default_factory=list)


class DiffResult(BaseModel):
    """Files whose content exists on only one side."""

    dir1: DisplayPath
    dir2: DisplayPath
    unique_to_dir1: list[DisplayPath] = Field(default_factory=list)
    unique_to_dir2: list[DisplayPath] = Field(default_factory=list)
    errors: list[WalkError] = Field(default_factory=list)


class DedupResult(BaseModel):
    """Outcome of a dedup run on one root."""

    root: DisplayPath
    run_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    dry_run: bool = False
    total_scanned: int = 0
    groups: list[DedupGroup] = Field(default_factory=list)
    deleted: list[DisplayPath] = Field(default_factory=list)
    survivors: list[DisplayPath] = Field(default_factory=list)
    removed_dirs: list[DisplayPath] = Field(default_factory=list)
    skipped: list[WalkError] = Field(default_factory=list)
    walk_errors: list[WalkError] = Field(default_factory=list)
    deletion_errors: list[WalkError] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when every deletion and directory removal succeeded."""
        return not self.deletion_errors
