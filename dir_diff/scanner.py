"""
Recursive tree walker building a fingerprint index.

Features:
- Explicit directory stack (no recursion depth limit on deep trees)
- Sorted entry order, so discovery ordinals are stable across runs
- Concurrent xxHash64 hashing on a dedicated pool of max_workers threads
- Symlinks are never followed nor hashed (no cycles, nothing outside the tree)
- Per-entry read errors recorded and skipped; unreadable root is fatal
"""

from __future__ import annotations

import asyncio
import os
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import structlog

from dir_diff.config.exceptions import EntryReadError, FatalInputError
from dir_diff.hasher import hash_file
from dir_diff.index import FingerprintIndex
from dir_diff.models import DirectoryNode, FileEntry, ScanConfig, WalkError

logger = structlog.get_logger(__name__)


class WalkResult:
    """Result of walking one root."""

    def __init__(self, root: Path):
        self.root = root
        self.index = FingerprintIndex()
        self.directories: list[DirectoryNode] = []
        self.errors: list[WalkError] = []
        self.elapsed_seconds: float = 0.0

    @property
    def total_scanned(self) -> int:
        return self.index.file_count


class TreeScanner:
    """
    Walk one root and fingerprint every regular file under it.

    Discovery ordinals are assigned while enumerating, before any hashing
    starts, so the order used for tie-breaking never depends on which worker
    finishes first.
    """

    def __init__(self, config: ScanConfig):
        """
        Initialize scanner.

        Args:
            config: Walk configuration
        """
        self.config = config

    async def scan(self) -> WalkResult:
        """
        Main scan entry point.

        Steps:
        1. Validate and enumerate the tree (files get ordinals, dirs get counts)
        2. Hash files concurrently
        3. Insert into the index in ordinal order

        Returns:
            WalkResult with index, directory nodes and per-entry errors

        Raises:
            FatalInputError: root missing, not a directory, or unreadable
        """
        start = time.monotonic()
        root = self.config.root_path
        result = WalkResult(root)

        logger.info(
            "walk_started",
            root_path=str(root),
            max_workers=self.config.max_workers,
        )

        pending = await asyncio.to_thread(self._enumerate, result)
        hashed = await self._hash_all(pending)

        # Single writer, ascending ordinal
        for ordinal, file_path, value, error in sorted(hashed, key=lambda h: h[0]):
            if error is not None:
                result.errors.append(WalkError(path=file_path, reason=error.reason))
                logger.warning(
                    "walk_entry_error",
                    path=str(file_path),
                    error=error.reason,
                )
                continue

            fingerprint, size = value
            result.index.add(
                FileEntry(
                    file_path=file_path,
                    relative_path=file_path.relative_to(root),
                    fingerprint=fingerprint,
                    size_bytes=size,
                    ordinal=ordinal,
                )
            )

        result.elapsed_seconds = time.monotonic() - start

        logger.info(
            "walk_completed",
            root_path=str(root),
            total_scanned=result.total_scanned,
            directories=len(result.directories),
            errors=len(result.errors),
            elapsed_seconds=round(result.elapsed_seconds, 3),
        )

        return result

    async def _hash_all(self, pending: list[tuple[int, Path]]) -> list[tuple]:
        """
        Hash pending files on a dedicated pool of max_workers threads.

        A bounded queue feeds max_workers consumers, so the number of live
        tasks does not grow with the number of files.

        Returns:
            (ordinal, path, (fingerprint, size) | None, EntryReadError | None)
            in completion order
        """
        workers = self.config.max_workers
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue(maxsize=workers * 2)
        hashed: list[tuple] = []

        async def _produce() -> None:
            for item in pending:
                await queue.put(item)
            for _ in range(workers):
                await queue.put(None)

        async def _consume(executor: ThreadPoolExecutor) -> None:
            while (item := await queue.get()) is not None:
                ordinal, file_path = item
                try:
                    value = await loop.run_in_executor(executor, self._hash_entry, file_path)
                except EntryReadError as e:
                    hashed.append((ordinal, file_path, None, e))
                else:
                    hashed.append((ordinal, file_path, value, None))

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="dir-diff-hash") as executor:
            await asyncio.gather(_produce(), *(_consume(executor) for _ in range(workers)))

        return hashed

    def _enumerate(self, result: WalkResult) -> list[tuple[int, Path]]:
        """
        List every directory and regular file under the root.

        Fills result.directories and result.errors; returns (ordinal, path)
        for each regular file in discovery order.
        """
        root = self.config.root_path

        if not root.exists():
            raise FatalInputError(root, "does not exist")
        if not root.is_dir():
            raise FatalInputError(root, "not a directory")

        pending: list[tuple[int, Path]] = []
        ordinal = 0
        stack: list[tuple[Path, int]] = [(root, 0)]

        while stack:
            directory, depth = stack.pop()
            node = DirectoryNode(path=directory, depth=depth)
            result.directories.append(node)

            try:
                with os.scandir(directory) as it:
                    entries = sorted(it, key=lambda e: e.name)
            except OSError as e:
                if depth == 0:
                    raise FatalInputError(root, e.strerror or str(e)) from e
                node.readable = False
                self._record_error(result, directory, e)
                continue

            subdirs: list[Path] = []
            for entry in entries:
                entry_path = Path(entry.path)
                try:
                    if entry.is_symlink():
                        node.other_count += 1
                        logger.debug("walk_symlink_skipped", path=str(entry_path))
                        continue

                    if entry.is_dir(follow_symlinks=False):
                        node.subdir_count += 1
                        subdirs.append(entry_path)
                        continue

                    node.other_count += 1
                    if entry.is_file(follow_symlinks=False):
                        pending.append((ordinal, entry_path))
                        ordinal += 1
                    else:
                        logger.debug("walk_special_file_skipped", path=str(entry_path))
                except OSError as e:
                    node.other_count += 1
                    self._record_error(result, entry_path, e)

            # Reversed so the stack pops subdirectories in name order
            for subdir in reversed(subdirs):
                stack.append((subdir, depth + 1))

        return pending

    def _hash_entry(self, file_path: Path) -> tuple[str, int]:
        """Stat and fingerprint one file (runs in a worker thread)."""
        try:
            size = file_path.stat().st_size
            fingerprint = hash_file(file_path, self.config.chunk_size)
        except OSError as e:
            raise EntryReadError(file_path, e.strerror or str(e)) from e
        return fingerprint, size

    @staticmethod
    def _record_error(result: WalkResult, path: Path, error: OSError) -> None:
        reason = error.strerror or str(error)
        result.errors.append(WalkError(path=path, reason=reason))
        logger.warning("walk_entry_error", path=str(path), error=reason)


async def walk(config: ScanConfig) -> WalkResult:
    """Convenience wrapper: walk config.root_path."""
    return await TreeScanner(config).scan()
