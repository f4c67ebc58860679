"""
Bottom-up removal of directories left without content.

Works from the counts recorded during the walk instead of re-walking: each
deleted file decrements its parent's other_count, each removed directory
decrements its parent's subdir_count. Nodes are visited deepest first, so a
single pass propagates emptiness up to the root's children. The root is never
removed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import structlog

from dir_diff.config.exceptions import DeletionError
from dir_diff.models import DirectoryNode

logger = structlog.get_logger(__name__)


class SweepResult:
    """Result of the empty-directory sweep."""

    def __init__(self):
        self.removed_dirs: list[Path] = []
        self.error_details: list[tuple[Path, str]] = []  # (dir_path, error)


class EmptyDirSweeper:
    """Remove directories containing no files and no remaining subdirectories."""

    def __init__(self, root: Path, directories: list[DirectoryNode], dry_run: bool = False):
        """
        Args:
            root: Walk root (never removed)
            directories: Nodes recorded by the walker
            dry_run: Report what would be removed without touching the disk
        """
        self.root = root
        self.dry_run = dry_run
        self._nodes: dict[Path, DirectoryNode] = {
            node.path: node.model_copy() for node in directories
        }

    def account_deletions(self, deleted_files: Iterable[Path]) -> None:
        """Decrement parent counts for files removed in the deletion phase."""
        for file_path in deleted_files:
            parent = self._nodes.get(file_path.parent)
            if parent is not None and parent.other_count > 0:
                parent.other_count -= 1

    def sweep(self) -> SweepResult:
        """Remove empty directories, deepest first."""
        result = SweepResult()

        ordered = sorted(
            self._nodes.values(),
            key=lambda n: (-n.depth, str(n.path)),
        )

        for node in ordered:
            if node.path == self.root or node.depth == 0:
                continue
            if not node.readable or node.other_count or node.subdir_count:
                continue

            if not self.dry_run:
                try:
                    self._remove(node.path)
                except DeletionError as e:
                    result.error_details.append((node.path, e.reason))
                    logger.warning(
                        "dedup_rmdir_failed",
                        dir_path=str(node.path),
                        error=e.reason,
                    )
                    continue

            result.removed_dirs.append(node.path)
            logger.info(
                "dedup_dir_removed" if not self.dry_run else "dedup_dir_would_remove",
                dir_path=str(node.path),
            )

            parent = self._nodes.get(node.path.parent)
            if parent is not None and parent.subdir_count > 0:
                parent.subdir_count -= 1

        logger.info(
            "dedup_sweep_completed",
            removed=len(result.removed_dirs),
            errors=len(result.error_details),
        )

        return result

    @staticmethod
    def _remove(dir_path: Path) -> None:
        try:
            dir_path.rmdir()
        except OSError as e:
            raise DeletionError(dir_path, e.strerror or str(e)) from e
