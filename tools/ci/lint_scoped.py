from __future__ import annotations

import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class _PathGroup:
    """A required allowlist entry; at least one candidate must exist."""

    label: str
    candidates: tuple[str, ...]


PATH_GROUPS: tuple[_PathGroup, ...] = (
    _PathGroup("package", ("src/dirmanifest",)),
    _PathGroup("tests", ("tests",)),
    _PathGroup("ci helpers", ("tools/ci",)),
)


def _repo_root() -> Path:
    # tools/ci/lint_scoped.py -> tools/ci -> tools -> repo root
    return Path(__file__).resolve().parents[2]


def _resolve_scoped_paths(repo_root: Path) -> list[str]:
    resolved: list[str] = []

    for group in PATH_GROUPS:
        found = next((rel for rel in group.candidates if (repo_root / rel).exists()), None)
        if found is None:
            candidates = ", ".join(group.candidates)
            raise FileNotFoundError(f"Missing allowlisted path for {group.label}. Tried: {candidates}")
        resolved.append(found)

    return resolved


def main(argv: list[str] | None = None) -> int:
    _ = argv
    repo_root = _repo_root()

    print("Scoped ruff lint (dirmanifest)")

    try:
        paths = _resolve_scoped_paths(repo_root)
    except FileNotFoundError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2

    cmd = ["python", "-m", "ruff", "check", *paths]
    print("Command:")
    print("  " + " ".join(cmd))

    completed = subprocess.run(cmd, cwd=str(repo_root), check=False)
    return int(completed.returncode)


if __name__ == "__main__":
    raise SystemExit(main())
