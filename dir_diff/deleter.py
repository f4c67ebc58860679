"""
Duplicate deletion with per-file failure tracking.

Features:
- Permanent unlink by default, send2trash on request
- Safety checks before each deletion (keeper present, optional re-hash)
- A failed deletion is recorded and the file left in place; the batch goes on
- Dry-run mode that only reports
"""

from __future__ import annotations

from pathlib import Path

import structlog

from dir_diff.config.exceptions import DeletionError
from dir_diff.hasher import DEFAULT_CHUNK_SIZE, hash_file
from dir_diff.models import DedupConfig, DedupGroup, FileEntry, WalkError

logger = structlog.get_logger(__name__)


class DeletionResult:
    """Result of batch deletion."""

    def __init__(self):
        self.total_to_delete: int = 0
        self.deleted_files: list[Path] = []
        self.skip_reasons: list[tuple[Path, str]] = []  # (file_path, reason)
        self.error_details: list[tuple[Path, str]] = []  # (file_path, error)
        self.space_reclaimed_bytes: int = 0

    @property
    def deleted(self) -> int:
        return len(self.deleted_files)

    @property
    def skipped(self) -> int:
        return len(self.skip_reasons)

    @property
    def errors(self) -> int:
        return len(self.error_details)

    def skipped_as_errors(self) -> list[WalkError]:
        return [WalkError(path=p, reason=r) for p, r in self.skip_reasons]

    def errors_as_models(self) -> list[WalkError]:
        return [WalkError(path=p, reason=r) for p, r in self.error_details]


class SafeDeleter:
    """
    Delete every file marked for deletion in resolved duplicate groups.

    Safety checks (per file):
    1. Keeper of the group still exists
    2. Optionally: fingerprint unchanged since the walk
    """

    def __init__(
        self,
        config: DedupConfig | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        """
        Initialize deleter.

        Args:
            config: Dry run / trash / verification switches
            chunk_size: For re-hashing verification
        """
        self.config = config or DedupConfig()
        self.chunk_size = chunk_size

    def delete_duplicates(self, groups: list[DedupGroup]) -> DeletionResult:
        """
        Delete all files marked as 'delete' in duplicate groups.

        Args:
            groups: Duplicate groups with keeper/delete selections

        Returns:
            DeletionResult with deleted, skipped and failed paths
        """
        result = DeletionResult()

        for group in groups:
            result.total_to_delete += len(group.to_delete)

        logger.info(
            "dedup_deletion_started",
            total_to_delete=result.total_to_delete,
            groups=len(groups),
            dry_run=self.config.dry_run,
            use_trash=self.config.use_trash,
        )

        for group in groups:
            for entry in group.to_delete:
                safe, reason = self._safety_check(entry, group)
                if not safe:
                    result.skip_reasons.append((entry.file_path, reason))
                    logger.warning(
                        "dedup_file_skipped",
                        file_path=str(entry.file_path),
                        reason=reason,
                    )
                    continue

                if self.config.dry_run:
                    result.deleted_files.append(entry.file_path)
                    result.space_reclaimed_bytes += entry.size_bytes
                    logger.info("dedup_file_would_delete", file_path=str(entry.file_path))
                    continue

                try:
                    self._delete(entry.file_path)
                except DeletionError as e:
                    result.error_details.append((entry.file_path, e.reason))
                    logger.warning(
                        "dedup_delete_failed",
                        file_path=str(entry.file_path),
                        error=e.reason,
                    )
                    continue

                result.deleted_files.append(entry.file_path)
                result.space_reclaimed_bytes += entry.size_bytes
                logger.info(
                    "dedup_file_deleted",
                    file_path=str(entry.file_path),
                    size_bytes=entry.size_bytes,
                )

        logger.info(
            "dedup_deletion_completed",
            deleted=result.deleted,
            skipped=result.skipped,
            errors=result.errors,
            space_reclaimed_bytes=result.space_reclaimed_bytes,
        )

        return result

    def _delete(self, file_path: Path) -> None:
        """Remove one file; raise DeletionError on any OS failure."""
        try:
            if self.config.use_trash:
                import send2trash as _send2trash

                _send2trash.send2trash(str(file_path))
            else:
                file_path.unlink()
        except OSError as e:
            raise DeletionError(file_path, e.strerror or str(e)) from e

    def _safety_check(self, entry: FileEntry, group: DedupGroup) -> tuple[bool, str]:
        """
        Run safety checks before deleting a file.

        Returns:
            (is_safe, reason_if_not_safe)
        """
        if group.keeper is None:
            return False, "No keeper selected for group"

        if not group.keeper.file_path.is_file():
            return False, "Keeper file no longer exists"

        if self.config.verify_before_delete:
            try:
                current = hash_file(entry.file_path, self.chunk_size)
            except OSError as e:
                return False, f"Cannot read file for hash check: {e.strerror or e}"
            if current != entry.fingerprint:
                return False, "Fingerprint mismatch (file modified since walk)"

        return True, ""
