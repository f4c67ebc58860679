"""
Shared pytest fixtures for dir-diff tests.

All filesystem tests build real trees under tmp_path.
"""

import logging
from pathlib import Path

import pytest
import structlog

from dir_diff.models import ScanConfig


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo configure_logging() calls made by a test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


def write_tree(root: Path, files: dict[str, bytes]) -> dict[str, Path]:
    """
    Create files under root from {relative_path: content}.

    A key ending with "/" creates an empty directory.
    """
    created = {}
    for rel, content in files.items():
        path = root / rel
        if rel.endswith("/"):
            path.mkdir(parents=True, exist_ok=True)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        created[rel] = path
    return created


@pytest.fixture
def make_tree():
    """Factory fixture around write_tree."""
    return write_tree


@pytest.fixture
def scan_config(tmp_path):
    """Walk config rooted at tmp_path with a small pool."""
    return ScanConfig(root_path=tmp_path, max_workers=4)
