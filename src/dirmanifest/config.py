from __future__ import annotations

import os

DEFAULT_MANIFEST_NAME = "manifest.json"

# Read size for the digest engine. Any value yields identical digests.
CHUNK_SIZE = 1024 * 1024

GITIGNORE_NAME = ".gitignore"
GIT_DIR_NAME = ".git"
REPO_EXCLUDE_RELPATH = ("info", "exclude")

LOG_LEVEL_ENV = "DIRMANIFEST_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%H:%M:%S"


def default_log_level() -> str:
    value = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    return value if value in LOG_LEVELS else DEFAULT_LOG_LEVEL
