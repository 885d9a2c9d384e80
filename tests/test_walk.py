from __future__ import annotations

import os
from pathlib import Path

import pytest

from dirmanifest.errors import FileOperationError
from dirmanifest.walk import iter_files


def _rels(root: Path, **kwargs) -> list[str]:
    return [p.relative_to(root).as_posix() for p in iter_files(root, **kwargs)]


def test_yields_regular_files_depth_first_sorted(tree: Path) -> None:
    (tree / "sub" / "empty_dir").mkdir()

    assert _rels(tree) == ["a.txt", "b.txt", "sub/c.bin"]


def test_hidden_files_are_visited(tmp_path: Path) -> None:
    (tmp_path / ".config").mkdir()
    (tmp_path / ".config" / "settings").write_text("x", encoding="utf-8")
    (tmp_path / ".env").write_text("y", encoding="utf-8")

    assert _rels(tmp_path) == [".config/settings", ".env"]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_symlinks_are_neither_followed_nor_emitted(tmp_path: Path) -> None:
    root = tmp_path / "root"
    root.mkdir()
    (root / "real.txt").write_text("data", encoding="utf-8")
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "secret.txt").write_text("s", encoding="utf-8")

    os.symlink(root / "real.txt", root / "link.txt")
    os.symlink(outside, root / "linked_dir", target_is_directory=True)

    assert _rels(root) == ["real.txt"]


def test_gitignore_rules_prune_files_and_directories(tree: Path) -> None:
    (tree / ".gitignore").write_text("*.bin\nbuild/\n", encoding="utf-8")
    (tree / "build").mkdir()
    (tree / "build" / "out.txt").write_text("o", encoding="utf-8")

    assert _rels(tree) == [".gitignore", "a.txt", "b.txt"]
    assert _rels(tree, respect_ignore=False) == [
        ".gitignore",
        "a.txt",
        "b.txt",
        "build/out.txt",
        "sub/c.bin",
    ]


def test_nested_gitignore_overrides_parent(tree: Path) -> None:
    (tree / ".gitignore").write_text("*.txt\n", encoding="utf-8")
    (tree / "sub" / "keep.txt").write_text("k", encoding="utf-8")
    (tree / "sub" / ".gitignore").write_text("!keep.txt\n", encoding="utf-8")

    assert _rels(tree) == [".gitignore", "sub/.gitignore", "sub/c.bin", "sub/keep.txt"]


def test_repo_exclude_file_applies(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    (repo / ".git" / "info").mkdir(parents=True)
    (repo / ".git" / "info" / "exclude").write_text("*.secret\n", encoding="utf-8")
    (repo / "keep.txt").write_text("k", encoding="utf-8")
    (repo / "x.secret").write_text("s", encoding="utf-8")

    rels = _rels(repo)
    assert "keep.txt" in rels
    assert "x.secret" not in rels
    assert ".git/info/exclude" in rels


def test_global_excludes_file_applies(tmp_path: Path, isolated_git_home: Path) -> None:
    global_dir = isolated_git_home / ".config" / "git"
    global_dir.mkdir(parents=True)
    (global_dir / "ignore").write_text("*.swp\n", encoding="utf-8")

    root = tmp_path / "work"
    root.mkdir()
    (root / "notes.md").write_text("n", encoding="utf-8")
    (root / ".notes.md.swp").write_text("s", encoding="utf-8")

    assert _rels(root) == ["notes.md"]
    assert _rels(root, respect_ignore=False) == [".notes.md.swp", "notes.md"]


def test_root_that_is_a_file_yields_itself(tmp_path: Path) -> None:
    f = tmp_path / "single.txt"
    f.write_text("one", encoding="utf-8")

    assert list(iter_files(f)) == [f]


def test_missing_root_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(FileOperationError) as excinfo:
        list(iter_files(tmp_path / "does-not-exist"))

    assert excinfo.value.operation == "read_dir"


def test_paths_are_built_from_root_as_given(tree: Path, monkeypatch) -> None:
    monkeypatch.chdir(tree.parent)

    assert [p.as_posix() for p in iter_files("tree")] == ["tree/a.txt", "tree/b.txt", "tree/sub/c.bin"]


class _UnclassifiableEntry:
    name = "broken"

    def is_dir(self, follow_symlinks: bool = True) -> bool:
        raise PermissionError(13, "Permission denied")

    def is_file(self, follow_symlinks: bool = True) -> bool:
        raise PermissionError(13, "Permission denied")


class _FakeScandir:
    def __enter__(self):
        return iter([_UnclassifiableEntry()])

    def __exit__(self, *exc_info) -> bool:
        return False


def test_entry_that_cannot_be_classified_is_fatal(tmp_path: Path, monkeypatch) -> None:
    from dirmanifest import walk

    monkeypatch.setattr(walk.os, "scandir", lambda _path: _FakeScandir())

    with pytest.raises(FileOperationError) as excinfo:
        list(iter_files(tmp_path, respect_ignore=False))

    assert excinfo.value.operation == "stat"
    assert excinfo.value.path == tmp_path / "broken"
