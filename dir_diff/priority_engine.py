"""
Keeper selection for duplicate groups.

Rules (hierarchical):
1. Location: files with no date-named ancestor directory win over files
   filed under one ("date-named" = directory name starts with "20")
2. Discovery order: first discovered wins within the preferred set

The heuristic is a plain prefix check on directory names, not a date parser.
Ancestors are taken relative to the walk root, so a root named "2023" does
not make every file date-prefixed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import structlog

from dir_diff.models import DedupAction, DedupGroup, FileEntry, display_path

logger = structlog.get_logger(__name__)

DATE_PREFIX = "20"


def is_date_prefixed(relative_path: Path) -> bool:
    """True if any directory component of relative_path starts with "20"."""
    return any(part.startswith(DATE_PREFIX) for part in relative_path.parent.parts)


def select_survivor(relative_paths: Sequence[Path]) -> int:
    """
    Pick the survivor among paths sharing a fingerprint.

    Args:
        relative_paths: Root-relative paths in discovery order

    Returns:
        Index of the survivor in relative_paths
    """
    if not relative_paths:
        raise ValueError("cannot select a survivor from an empty group")

    for i, path in enumerate(relative_paths):
        if not is_date_prefixed(path):
            return i

    # All date-prefixed: first discovered
    return 0


class PriorityEngine:
    """Select which file to keep among duplicates."""

    def select_keeper(self, group: DedupGroup) -> DedupGroup:
        """
        Select 1 file to KEEP, mark others for DELETE.

        Args:
            group: Duplicate group with files in discovery order

        Returns:
            Updated DedupGroup with keeper and to_delete set
        """
        if len(group.files) < 2:
            if group.files:
                group.files[0].action = DedupAction.keep
                group.keeper = group.files[0]
            group.to_delete = []
            return group

        files = sorted(group.files, key=lambda f: f.ordinal)
        keeper_idx = select_survivor([f.relative_path for f in files])
        keeper = files[keeper_idx]
        keeper.action = DedupAction.keep
        keeper.reason = self._reason(keeper)
        group.keeper = keeper

        group.to_delete = []
        for entry in files:
            if entry is keeper:
                continue
            entry.action = DedupAction.delete
            entry.reason = f"duplicate of {display_path(keeper.relative_path)}"
            group.to_delete.append(entry)

        group.files = files

        logger.debug(
            "dedup_keeper_selected",
            fingerprint=group.fingerprint,
            keeper=str(keeper.file_path),
            to_delete=len(group.to_delete),
        )

        return group

    @staticmethod
    def _reason(entry: FileEntry) -> str:
        if is_date_prefixed(entry.relative_path):
            return "first discovered (all copies under date-named directories)"
        return "first discovered outside date-named directories"
