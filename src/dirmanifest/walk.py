from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path

from dirmanifest.config import GITIGNORE_NAME
from dirmanifest.errors import FileOperationError
from dirmanifest.ignore import IgnoreSource, build_base_sources, is_included, load_ignore_file

logger = logging.getLogger(__name__)


def _walk_dir(
    dir_path: Path,
    dir_abs: Path,
    inherited: Sequence[IgnoreSource],
    respect_ignore: bool,
) -> Iterator[Path]:
    sources = inherited
    if respect_ignore:
        own = load_ignore_file(dir_abs / GITIGNORE_NAME, base=dir_abs)
        if own is not None:
            sources = [own, *inherited]

    try:
        with os.scandir(dir_abs) as it:
            children = sorted(it, key=lambda e: e.name)
    except OSError as exc:
        raise FileOperationError("read_dir", dir_path, exc) from exc

    for child in children:
        try:
            is_dir = child.is_dir(follow_symlinks=False)
            is_file = child.is_file(follow_symlinks=False)
        except OSError as exc:
            raise FileOperationError("stat", dir_path / child.name, exc) from exc

        if not (is_dir or is_file):
            # Symlinks and special files are never entries and never followed.
            logger.debug("skipping non-regular entry %s", dir_path / child.name)
            continue

        child_abs = dir_abs / child.name
        if respect_ignore and not is_included(child_abs, is_dir, sources):
            logger.debug("ignored %s", dir_path / child.name)
            continue

        if is_dir:
            yield from _walk_dir(dir_path / child.name, child_abs, sources, respect_ignore)
        else:
            yield dir_path / child.name


def iter_files(
    root: str | Path,
    *,
    respect_ignore: bool = True,
    environ: Mapping[str, str] | None = None,
) -> Iterator[Path]:
    """Yield every regular file under ``root``, depth first, names sorted per directory.

    Paths are built from ``root`` as given. Hidden entries are visited unless an
    ignore rule excludes them. Listing failures raise `FileOperationError`.
    """

    root_path = Path(root)
    if root_path.is_file():
        yield root_path
        return

    root_abs = Path(os.path.abspath(root_path))
    base: list[IgnoreSource] = []
    if respect_ignore:
        base = build_base_sources(root_abs, environ=environ)

    yield from _walk_dir(root_path, root_abs, base, respect_ignore)


__all__ = ["iter_files"]
