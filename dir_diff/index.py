"""
Fingerprint index: fingerprint -> files sharing it, in discovery order.
"""

from __future__ import annotations

from typing import Iterator

from dir_diff.models import FileEntry


class FingerprintIndex:
    """
    Mapping from fingerprint to the ordered list of files with that content.

    Insertion order within a fingerprint is discovery order; the walker
    guarantees entries are added by ascending ordinal.
    """

    def __init__(self) -> None:
        self._groups: dict[str, list[FileEntry]] = {}
        self._count = 0

    def add(self, entry: FileEntry) -> None:
        """Append entry to its fingerprint's list, creating it if absent."""
        self._groups.setdefault(entry.fingerprint, []).append(entry)
        self._count += 1

    def get(self, fingerprint: str) -> list[FileEntry]:
        """Files for a fingerprint, or an empty list."""
        return list(self._groups.get(fingerprint, []))

    def fingerprints(self) -> list[str]:
        """Fingerprints in order of first discovery."""
        return list(self._groups)

    def duplicate_groups(self) -> Iterator[tuple[str, list[FileEntry]]]:
        """Yield (fingerprint, files) for every fingerprint with 2+ files."""
        for fingerprint, entries in self._groups.items():
            if len(entries) >= 2:
                yield fingerprint, list(entries)

    def entries(self) -> list[FileEntry]:
        """All files, sorted by discovery ordinal."""
        return sorted(
            (entry for entries in self._groups.values() for entry in entries),
            key=lambda e: e.ordinal,
        )

    @property
    def file_count(self) -> int:
        return self._count

    def __contains__(self, fingerprint: object) -> bool:
        return fingerprint in self._groups

    def __len__(self) -> int:
        return len(self._groups)
