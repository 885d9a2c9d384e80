from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from dirmanifest.config import CHUNK_SIZE
from dirmanifest.errors import FileOperationError

logger = logging.getLogger(__name__)


class DigestAccumulator:
    """Running SHA-256 over a byte stream, counting the bytes it has seen."""

    def __init__(self) -> None:
        self._hash = hashlib.sha256()
        self.size = 0

    def update(self, chunk: bytes) -> None:
        self._hash.update(chunk)
        self.size += len(chunk)

    def finalize(self) -> str:
        return self._hash.hexdigest()


def hash_file(path: str | Path, *, chunk_size: int = CHUNK_SIZE) -> tuple[str, int]:
    """Return ``(sha256_hex, size)`` for the file at ``path``.

    Open and read failures raise `FileOperationError`; the handle is closed either way.
    """

    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    file_path = Path(path)
    try:
        f = file_path.open("rb")
    except OSError as exc:
        raise FileOperationError("open", file_path, exc) from exc

    acc = DigestAccumulator()
    with f:
        try:
            for chunk in iter(lambda: f.read(chunk_size), b""):
                acc.update(chunk)
        except OSError as exc:
            raise FileOperationError("read", file_path, exc) from exc

    digest = acc.finalize()
    logger.debug("hashed %s size=%d sha256=%s", file_path, acc.size, digest)
    return digest, acc.size


__all__ = [
    "DigestAccumulator",
    "hash_file",
]
