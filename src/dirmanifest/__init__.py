"""Content-integrity manifests for directory trees.

`create` records a SHA-256 digest and byte size for every regular file under a root;
`verify` re-hashes the recorded files and classifies each as OK, CHANGED or MISSING.
"""

__all__: list[str] = [
    "cli",
    "config",
    "create",
    "digest",
    "errors",
    "ignore",
    "manifest",
    "stable_json",
    "verify",
    "walk",
]
