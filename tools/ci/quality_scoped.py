from __future__ import annotations

import subprocess
import sys
from pathlib import Path

PYTEST_REQUIRED_ALLOWLIST: list[str] = [
    "tests/test_digest.py",
    "tests/test_ignore_rules.py",
    "tests/test_walk.py",
    "tests/test_manifest_model.py",
    "tests/test_create_verify.py",
    "tests/test_cli_exit_codes.py",
]

PYTEST_OPTIONAL_ALLOWLIST: list[str] = [
    "tests/test_manifest_schema.py",
]


def _repo_root() -> Path:
    # tools/ci/quality_scoped.py -> tools/ci -> tools -> repo root
    return Path(__file__).resolve().parents[2]


def _resolve_pytest_paths(repo_root: Path) -> list[str]:
    missing = [rel for rel in PYTEST_REQUIRED_ALLOWLIST if not (repo_root / rel).exists()]
    if missing:
        raise FileNotFoundError(f"Missing required pytest allowlist paths: {', '.join(missing)}")

    resolved = list(PYTEST_REQUIRED_ALLOWLIST)
    resolved.extend(rel for rel in PYTEST_OPTIONAL_ALLOWLIST if (repo_root / rel).exists())
    return resolved


def main(argv: list[str] | None = None) -> int:
    _ = argv
    repo_root = _repo_root()

    print("Scoped quality: pytest (dirmanifest)")
    try:
        pytest_paths = _resolve_pytest_paths(repo_root)
    except FileNotFoundError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2

    pytest_cmd = [sys.executable, "-m", "pytest", "-q", "--maxfail=1", *pytest_paths]
    print("Command:")
    print("  " + " ".join(pytest_cmd))

    pytest_completed = subprocess.run(pytest_cmd, cwd=str(repo_root), check=False)
    if pytest_completed.returncode != 0:
        return int(pytest_completed.returncode)

    print("Scoped quality: ruff (dirmanifest)")
    lint_cmd = [sys.executable, "tools/ci/lint_scoped.py"]
    print("Command:")
    print("  " + " ".join(lint_cmd))

    lint_completed = subprocess.run(lint_cmd, cwd=str(repo_root), check=False)
    return int(lint_completed.returncode)


if __name__ == "__main__":
    raise SystemExit(main())
