"""
Diff and dedup orchestration.

Phases run strictly in order: walk completes before any resolver runs, and in
dedup mode every deletion completes before the empty-directory sweep starts.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from dir_diff.deleter import SafeDeleter
from dir_diff.differ import diff
from dir_diff.models import DedupConfig, DedupGroup, DedupResult, DiffResult, ScanConfig, WalkError
from dir_diff.priority_engine import PriorityEngine
from dir_diff.scanner import TreeScanner, WalkResult
from dir_diff.sweeper import EmptyDirSweeper

logger = structlog.get_logger(__name__)


def _scan_config(root: Path, template: ScanConfig | None) -> ScanConfig:
    if template is None:
        return ScanConfig(root_path=root)
    return template.model_copy(update={"root_path": root})


def build_groups(walk_result: WalkResult, engine: PriorityEngine | None = None) -> list[DedupGroup]:
    """Resolve every duplicate fingerprint of a walk into a DedupGroup."""
    engine = engine or PriorityEngine()
    groups = []
    for group_id, (fingerprint, entries) in enumerate(
        walk_result.index.duplicate_groups(), start=1
    ):
        group = DedupGroup(group_id=group_id, fingerprint=fingerprint, files=entries)
        groups.append(engine.select_keeper(group))
    return groups


async def run_diff(
    dir1: Path,
    dir2: Path,
    scan_config: ScanConfig | None = None,
) -> DiffResult:
    """
    Report files whose content exists under only one of two roots.

    Raises:
        FatalInputError: either root missing or unreadable
    """
    logger.info("diff_started", dir1=str(dir1), dir2=str(dir2))

    walk_a = await TreeScanner(_scan_config(dir1, scan_config)).scan()
    walk_b = await TreeScanner(_scan_config(dir2, scan_config)).scan()

    unique_a, unique_b = diff(walk_a.index, walk_b.index)

    return DiffResult(
        dir1=dir1,
        dir2=dir2,
        unique_to_dir1=unique_a,
        unique_to_dir2=unique_b,
        errors=walk_a.errors + walk_b.errors,
    )


async def run_dedup(
    root: Path,
    scan_config: ScanConfig | None = None,
    dedup_config: DedupConfig | None = None,
) -> DedupResult:
    """
    Remove duplicate files and then empty directories under root.

    Steps:
    1. Walk root
    2. Select a keeper per duplicate group
    3. Delete the rest (failures recorded, never abort)
    4. Sweep empty directories bottom-up

    Raises:
        FatalInputError: root missing or unreadable (before any mutation)
    """
    dedup_config = dedup_config or DedupConfig()
    config = _scan_config(root, scan_config)

    logger.info("dedup_started", root_path=str(root), dry_run=dedup_config.dry_run)

    walk_result = await TreeScanner(config).scan()
    groups = build_groups(walk_result)

    deleter = SafeDeleter(config=dedup_config, chunk_size=config.chunk_size)
    deletion = deleter.delete_duplicates(groups)

    sweeper = EmptyDirSweeper(root, walk_result.directories, dry_run=dedup_config.dry_run)
    sweeper.account_deletions(deletion.deleted_files)
    sweep = sweeper.sweep()

    result = DedupResult(
        root=root,
        dry_run=dedup_config.dry_run,
        total_scanned=walk_result.total_scanned,
        groups=groups,
        deleted=deletion.deleted_files,
        survivors=[g.keeper.file_path for g in groups if g.keeper is not None],
        removed_dirs=sweep.removed_dirs,
        skipped=deletion.skipped_as_errors(),
        walk_errors=walk_result.errors,
        deletion_errors=deletion.errors_as_models()
        + [WalkError(path=p, reason=r) for p, r in sweep.error_details],
    )

    logger.info(
        "dedup_completed",
        root_path=str(root),
        duplicate_groups=len(groups),
        deleted=len(result.deleted),
        removed_dirs=len(result.removed_dirs),
        walk_errors=len(result.walk_errors),
        deletion_errors=len(result.deletion_errors),
    )

    return result
