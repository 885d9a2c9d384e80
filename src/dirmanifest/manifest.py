from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dirmanifest.errors import ManifestFormatError
from dirmanifest.stable_json import read_json, write_json

_SHA256_HEX_RE = re.compile(r"^[0-9a-f]{64}$")


@dataclass(frozen=True, slots=True)
class Entry:
    path: str
    digest: str
    size: int

    def to_dict(self) -> dict[str, Any]:
        # "sha256" is the on-disk name of the digest field.
        return {"path": self.path, "sha256": self.digest, "size": self.size}


@dataclass(frozen=True, slots=True)
class Manifest:
    root: str
    entries: tuple[Entry, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"root": self.root, "entries": [e.to_dict() for e in self.entries]}

    def resolve(self, entry: Entry) -> Path:
        return Path(self.root) / entry.path


def entry_path(file_path: Path, root: Path) -> str:
    """Root-relative POSIX path for ``file_path``.

    A path outside ``root``'s lexical hierarchy is stored unchanged; such a manifest
    only verifies from the same location.
    """

    try:
        return file_path.relative_to(root).as_posix()
    except ValueError:
        return str(file_path)


def _parse_entry(source: Path, i: int, raw: Any) -> Entry:
    if not isinstance(raw, dict):
        raise ManifestFormatError(source, f"entries[{i}] must be an object")

    path = raw.get("path")
    if not isinstance(path, str):
        raise ManifestFormatError(source, f"entries[{i}].path must be a string")

    digest = raw.get("sha256")
    if not isinstance(digest, str) or not _SHA256_HEX_RE.match(digest):
        raise ManifestFormatError(source, f"entries[{i}].sha256 must be 64 lowercase hex characters")

    size = raw.get("size")
    if isinstance(size, bool) or not isinstance(size, int) or size < 0:
        raise ManifestFormatError(source, f"entries[{i}].size must be a non-negative integer")

    return Entry(path=path, digest=digest, size=size)


def manifest_from_dict(data: Any, *, source: str | Path = "<memory>") -> Manifest:
    src = Path(source)
    if not isinstance(data, dict):
        raise ManifestFormatError(src, "top level must be a JSON object")

    root = data.get("root")
    if not isinstance(root, str):
        raise ManifestFormatError(src, "'root' must be a string")

    entries = data.get("entries")
    if not isinstance(entries, list):
        raise ManifestFormatError(src, "'entries' must be an array")

    return Manifest(root=root, entries=tuple(_parse_entry(src, i, e) for i, e in enumerate(entries)))


def read_manifest(path: str | Path) -> Manifest:
    return manifest_from_dict(read_json(path), source=path)


def write_manifest(manifest: Manifest, path: str | Path) -> Path:
    return write_json(path, manifest.to_dict(), make_parents=True)


__all__ = [
    "Entry",
    "Manifest",
    "entry_path",
    "manifest_from_dict",
    "read_manifest",
    "write_manifest",
]
