from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from dirmanifest.errors import FileOperationError, ManifestFormatError


def read_json(path: str | Path) -> Any:
    """Read JSON from disk (UTF-8) and parse.

    I/O failures surface as `FileOperationError`, undecodable content as
    `ManifestFormatError`, so callers only deal with the tool's own error types.
    """

    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ManifestFormatError(p, f"not valid UTF-8 ({exc.reason})") from exc
    except OSError as exc:
        raise FileOperationError("read", p, exc) from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestFormatError(
            p, f"invalid JSON at line {exc.lineno} column {exc.colno}: {exc.msg}"
        ) from exc


def dumps(data: Any, *, indent: int = 2, sort_keys: bool = True) -> str:
    return json.dumps(data, indent=indent, sort_keys=sort_keys, ensure_ascii=False) + "\n"


def write_json(
    path: str | Path,
    data: Any,
    *,
    make_parents: bool = False,
    indent: int = 2,
    sort_keys: bool = True,
) -> Path:
    """Write JSON deterministically (UTF-8, LF newlines, trailing newline)."""

    p = Path(path)
    text = dumps(data, indent=indent, sort_keys=sort_keys)
    try:
        if make_parents:
            p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8", newline="\n")
    except OSError as exc:
        raise FileOperationError("write", p, exc) from exc
    return p
