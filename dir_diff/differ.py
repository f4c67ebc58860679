"""
Two-tree comparison by content.

A fingerprint present on both sides contributes nothing, whatever the names,
locations or number of copies. Read-only.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from dir_diff.index import FingerprintIndex

logger = structlog.get_logger(__name__)


def unique_paths(index: FingerprintIndex, other: FingerprintIndex) -> list[Path]:
    """Paths in index whose fingerprint is absent from other, in discovery order."""
    return [
        entry.file_path
        for entry in index.entries()
        if entry.fingerprint not in other
    ]


def diff(
    index_a: FingerprintIndex,
    index_b: FingerprintIndex,
) -> tuple[list[Path], list[Path]]:
    """
    Symmetric difference of two fingerprint indexes.

    Returns:
        (paths unique to A, paths unique to B)
    """
    unique_a = unique_paths(index_a, index_b)
    unique_b = unique_paths(index_b, index_a)

    logger.info(
        "diff_completed",
        unique_to_a=len(unique_a),
        unique_to_b=len(unique_b),
    )

    return unique_a, unique_b
