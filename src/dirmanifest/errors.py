from __future__ import annotations

from pathlib import Path


class ManifestToolError(Exception):
    """Base class for fatal errors that abort a create or verify run."""


class FileOperationError(ManifestToolError):
    def __init__(self, operation: str, path: str | Path, cause: BaseException | str) -> None:
        self.operation = operation
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"{operation} failed for {self.path}: {cause}")


class ManifestFormatError(ManifestToolError):
    def __init__(self, path: str | Path, detail: str) -> None:
        self.path = Path(path)
        self.detail = detail
        super().__init__(f"malformed manifest {self.path}: {detail}")


__all__ = [
    "FileOperationError",
    "ManifestFormatError",
    "ManifestToolError",
]
