from __future__ import annotations

import argparse
import logging
import sys

from dirmanifest.config import (
    DEFAULT_MANIFEST_NAME,
    LOG_DATEFMT,
    LOG_FORMAT,
    LOG_LEVELS,
    default_log_level,
)
from dirmanifest.create import create_manifest
from dirmanifest.errors import ManifestToolError
from dirmanifest.manifest import read_manifest
from dirmanifest.verify import EntryStatus, ExitStatus, VerifyReport, iter_results

EXIT_FATAL = 1

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(value: str) -> bool:
    v = value.strip().lower()
    if v in _TRUE_VALUES:
        return True
    if v in _FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(f"expected a boolean (true/false), got {value!r}")


def _setup_logging(level: str) -> logging.Logger:
    """Configure the package logger with a single stderr handler."""

    logger = logging.getLogger("dirmanifest")
    logger.setLevel(level.upper())
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dirmanifest",
        description=(
            "Create and verify SHA-256 integrity manifests for a directory tree. "
            "Exit codes: 0=ok, 2=verify found CHANGED/MISSING files, 1=error."
        ),
    )
    parser.add_argument(
        "--log-level",
        default=default_log_level(),
        choices=LOG_LEVELS,
        type=str.upper,
        help="Diagnostic log level on stderr (default: $DIRMANIFEST_LOG_LEVEL or WARNING)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="Hash every file under a path and write a manifest")
    create.add_argument("path", help="Root directory to scan")
    create.add_argument(
        "--out",
        default=DEFAULT_MANIFEST_NAME,
        help=f"Manifest output file (default: {DEFAULT_MANIFEST_NAME})",
    )
    create.add_argument(
        "--gitignore",
        type=_parse_bool,
        default=True,
        metavar="BOOL",
        help="Apply .gitignore, .git/info/exclude and global ignore rules (default: true)",
    )

    verify = sub.add_parser("verify", help="Re-hash the files listed in a manifest")
    verify.add_argument("manifest", help="Manifest JSON written by 'create'")

    return parser


def _run_create(args: argparse.Namespace) -> int:
    create_manifest(args.path, args.out, respect_ignore=args.gitignore)
    print(f"Manifest written to {args.out}")
    return 0


def _run_verify(args: argparse.Namespace) -> int:
    manifest = read_manifest(args.manifest)

    results = []
    for result in iter_results(manifest):
        print(f"{result.status.value:<8} {result.entry.path}")
        results.append(result)

    report = VerifyReport(manifest=manifest, results=tuple(results))
    print(
        f"Summary: {EntryStatus.OK.value}={report.ok} "
        f"{EntryStatus.CHANGED.value}={report.changed} "
        f"{EntryStatus.MISSING.value}={report.missing}"
    )
    if report.all_verified:
        print("All files verified.")
    return int(report.exit_status)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logger = _setup_logging(args.log_level)

    try:
        if args.command == "create":
            return _run_create(args)
        return _run_verify(args)
    except ManifestToolError as exc:
        logger.debug("aborted", exc_info=True)
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_FATAL


__all__ = ["EXIT_FATAL", "ExitStatus", "main"]


if __name__ == "__main__":
    raise SystemExit(main())
