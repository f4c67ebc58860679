"""
dir-diff - Canonical exception hierarchy.

Only FatalInputError escapes the core. EntryReadError and DeletionError are
raised for a single path and caught by the walker / deleter, which record them
and keep going.
"""

from __future__ import annotations

from pathlib import Path


class DirDiffError(Exception):
    """Base exception dir-diff."""


class FatalInputError(DirDiffError):
    """Root directory missing, not a directory, or unreadable."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class EntryReadError(DirDiffError):
    """A file or subdirectory inside the tree could not be read."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class DeletionError(DirDiffError):
    """A duplicate file or empty directory could not be removed."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")
