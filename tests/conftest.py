from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_git_home(monkeypatch, tmp_path: Path) -> Path:
    """Point HOME and XDG_CONFIG_HOME at empty dirs so user git config never leaks in."""

    home = tmp_path / "_home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.delenv("DIRMANIFEST_LOG_LEVEL", raising=False)
    return home


@pytest.fixture()
def tree(tmp_path: Path) -> Path:
    root = tmp_path / "tree"
    (root / "sub").mkdir(parents=True)
    (root / "a.txt").write_bytes(b"hello\n")
    (root / "b.txt").write_bytes(b"abc")
    (root / "sub" / "c.bin").write_bytes(bytes(range(256)) * 10)
    return root
