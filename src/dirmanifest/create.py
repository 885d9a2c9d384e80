from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from dirmanifest.digest import hash_file
from dirmanifest.manifest import Entry, Manifest, entry_path, write_manifest
from dirmanifest.walk import iter_files

logger = logging.getLogger(__name__)


def build_manifest(
    root: str | Path,
    *,
    respect_ignore: bool = True,
    skip: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Manifest:
    """Hash every regular file under ``root`` in traversal order.

    ``skip`` names one file (normally the manifest being written) that is left out
    even when it lies under ``root``.
    """

    root_text = root if isinstance(root, str) else str(root)
    root_path = Path(root_text)
    skip_resolved = skip.resolve() if skip is not None else None

    entries: list[Entry] = []
    for file_path in iter_files(root_path, respect_ignore=respect_ignore, environ=environ):
        if skip_resolved is not None and file_path.resolve() == skip_resolved:
            logger.debug("not recording output file %s", file_path)
            continue
        digest, size = hash_file(file_path)
        entries.append(Entry(path=entry_path(file_path, root_path), digest=digest, size=size))

    return Manifest(root=root_text, entries=tuple(entries))


def create_manifest(
    root: str | Path,
    out: str | Path,
    *,
    respect_ignore: bool = True,
    environ: Mapping[str, str] | None = None,
) -> Manifest:
    out_path = Path(out)
    logger.info("scanning %s (gitignore=%s)", root, respect_ignore)
    manifest = build_manifest(root, respect_ignore=respect_ignore, skip=out_path, environ=environ)
    write_manifest(manifest, out_path)
    logger.info("wrote %d entries to %s", len(manifest.entries), out_path)
    return manifest


__all__ = ["build_manifest", "create_manifest"]
