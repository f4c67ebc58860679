"""
Unit tests for EmptyDirSweeper.

Built directly from DirectoryNode counts, against real directories.
"""

from pathlib import Path
from unittest.mock import patch

from dir_diff.models import DirectoryNode
from dir_diff.sweeper import EmptyDirSweeper


def _nodes(root: Path, spec: dict[str, tuple[int, int]]) -> list[DirectoryNode]:
    """{relative_dir: (other_count, subdir_count)} -> nodes; "" is the root."""
    nodes = []
    for rel, (others, subdirs) in spec.items():
        path = root / rel if rel else root
        path.mkdir(parents=True, exist_ok=True)
        depth = len(Path(rel).parts) if rel else 0
        nodes.append(DirectoryNode(path=path, depth=depth, other_count=others, subdir_count=subdirs))
    return nodes


class TestSweep:
    """Bottom-up propagation."""

    def test_chain_removed_root_kept(self, tmp_path):
        """a/b/c all empty -> all three removed, root stays."""
        nodes = _nodes(tmp_path, {"": (0, 1), "a": (0, 1), "a/b": (0, 1), "a/b/c": (0, 0)})

        result = EmptyDirSweeper(tmp_path, nodes).sweep()

        assert result.removed_dirs == [tmp_path / "a/b/c", tmp_path / "a/b", tmp_path / "a"]
        assert tmp_path.exists()
        assert not (tmp_path / "a").exists()

    def test_empty_root_never_removed(self, tmp_path):
        nodes = _nodes(tmp_path, {"": (0, 0)})

        result = EmptyDirSweeper(tmp_path, nodes).sweep()

        assert result.removed_dirs == []
        assert tmp_path.exists()

    def test_deletions_make_dir_empty(self, tmp_path, make_tree):
        files = make_tree(tmp_path, {"2023/a.txt": b"a", "keep/b.txt": b"b"})
        nodes = _nodes(tmp_path, {"": (0, 2), "2023": (1, 0), "keep": (1, 0)})
        files["2023/a.txt"].unlink()

        sweeper = EmptyDirSweeper(tmp_path, nodes)
        sweeper.account_deletions([files["2023/a.txt"]])
        result = sweeper.sweep()

        assert result.removed_dirs == [tmp_path / "2023"]
        assert (tmp_path / "keep").exists()

    def test_dir_with_remaining_file_kept(self, tmp_path, make_tree):
        make_tree(tmp_path, {"a/x": b"x"})
        nodes = _nodes(tmp_path, {"": (0, 1), "a": (1, 0)})

        assert EmptyDirSweeper(tmp_path, nodes).sweep().removed_dirs == []

    def test_unreadable_dir_kept(self, tmp_path):
        nodes = _nodes(tmp_path, {"": (0, 1), "locked": (0, 0)})
        nodes[1].readable = False

        assert EmptyDirSweeper(tmp_path, nodes).sweep().removed_dirs == []

    def test_nodes_not_mutated(self, tmp_path):
        nodes = _nodes(tmp_path, {"": (0, 1), "a": (0, 0)})

        EmptyDirSweeper(tmp_path, nodes).sweep()

        assert nodes[0].subdir_count == 1

    def test_rmdir_failure_recorded_parent_kept(self, tmp_path):
        """A failed rmdir is reported and its parent is not considered empty."""
        nodes = _nodes(tmp_path, {"": (0, 1), "a": (0, 1), "a/b": (0, 0)})

        with patch.object(Path, "rmdir", side_effect=PermissionError(13, "Permission denied")):
            result = EmptyDirSweeper(tmp_path, nodes).sweep()

        assert result.removed_dirs == []
        assert result.error_details == [(tmp_path / "a/b", "Permission denied")]

    def test_dry_run(self, tmp_path):
        nodes = _nodes(tmp_path, {"": (0, 1), "a": (0, 1), "a/b": (0, 0)})

        result = EmptyDirSweeper(tmp_path, nodes, dry_run=True).sweep()

        assert result.removed_dirs == [tmp_path / "a/b", tmp_path / "a"]
        assert (tmp_path / "a" / "b").exists()
