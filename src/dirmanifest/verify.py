from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum, IntEnum
from pathlib import Path

from dirmanifest.digest import hash_file
from dirmanifest.errors import FileOperationError
from dirmanifest.manifest import Entry, Manifest, read_manifest

logger = logging.getLogger(__name__)


class EntryStatus(str, Enum):
    OK = "OK"
    CHANGED = "CHANGED"
    MISSING = "MISSING"


class ExitStatus(IntEnum):
    ALL_VERIFIED = 0
    DISCREPANCIES_FOUND = 2


@dataclass(frozen=True, slots=True)
class EntryResult:
    entry: Entry
    status: EntryStatus
    actual_digest: str | None = None
    actual_size: int | None = None


@dataclass(frozen=True, slots=True)
class VerifyReport:
    manifest: Manifest
    results: tuple[EntryResult, ...]

    def count(self, status: EntryStatus) -> int:
        return sum(1 for r in self.results if r.status is status)

    @property
    def ok(self) -> int:
        return self.count(EntryStatus.OK)

    @property
    def changed(self) -> int:
        return self.count(EntryStatus.CHANGED)

    @property
    def missing(self) -> int:
        return self.count(EntryStatus.MISSING)

    @property
    def all_verified(self) -> bool:
        return self.changed == 0 and self.missing == 0

    @property
    def exit_status(self) -> ExitStatus:
        return ExitStatus.ALL_VERIFIED if self.all_verified else ExitStatus.DISCREPANCIES_FOUND


def check_entry(manifest: Manifest, entry: Entry) -> EntryResult:
    candidate = manifest.resolve(entry)
    try:
        os.stat(candidate)
    except (FileNotFoundError, NotADirectoryError):
        return EntryResult(entry=entry, status=EntryStatus.MISSING)
    except OSError as exc:
        raise FileOperationError("stat", candidate, exc) from exc

    # Hash failures on an existing file propagate; they are not classified.
    digest, size = hash_file(candidate)
    status = EntryStatus.OK if digest == entry.digest else EntryStatus.CHANGED
    return EntryResult(entry=entry, status=status, actual_digest=digest, actual_size=size)


def iter_results(manifest: Manifest) -> Iterator[EntryResult]:
    for entry in manifest.entries:
        result = check_entry(manifest, entry)
        logger.debug("%s %s", result.status.value, entry.path)
        yield result


def verify_loaded(manifest: Manifest) -> VerifyReport:
    return VerifyReport(manifest=manifest, results=tuple(iter_results(manifest)))


def verify_manifest(manifest_path: str | Path) -> VerifyReport:
    manifest = read_manifest(manifest_path)
    logger.info("verifying %d entries under %s", len(manifest.entries), manifest.root)
    return verify_loaded(manifest)


__all__ = [
    "EntryResult",
    "EntryStatus",
    "ExitStatus",
    "VerifyReport",
    "check_entry",
    "iter_results",
    "verify_loaded",
    "verify_manifest",
]
