"""
Streaming content fingerprint.

xxHash64 (seed 0) over the full byte stream, read in fixed-size chunks so
memory use does not depend on file size. Fast and low-collision, not a
security boundary.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

import xxhash

DEFAULT_CHUNK_SIZE = 65536


def hash_stream(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """
    Fingerprint an open binary stream.

    Returns:
        16-char lowercase hex digest

    Raises:
        OSError: if a read fails mid-stream (no retry)
    """
    hasher = xxhash.xxh64(seed=0)
    while chunk := stream.read(chunk_size):
        hasher.update(chunk)
    return hasher.hexdigest()


def hash_file(file_path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """Fingerprint a file on disk."""
    with open(file_path, "rb") as f:
        return hash_stream(f, chunk_size)
