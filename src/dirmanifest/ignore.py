"""Gitignore-style rule evaluation.

Rules come from ordered `IgnoreSource` values, most specific first:

- per-directory ``.gitignore`` files (deepest directory first)
- the repository-local ``.git/info/exclude``
- the user's global excludes file

`is_included` is a pure function over that list: the first source with a matching
rule decides, and inside a source the last matching line wins. Directories that are
excluded are pruned by the walker, so nothing below them can be re-included.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from dirmanifest.config import GIT_DIR_NAME, GITIGNORE_NAME, REPO_EXCLUDE_RELPATH
from dirmanifest.errors import FileOperationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IgnoreRule:
    pattern: str
    regex: re.Pattern[str]
    negated: bool = False
    dir_only: bool = False

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.dir_only and not is_dir:
            return False
        return self.regex.match(rel_path) is not None


@dataclass(frozen=True, slots=True)
class IgnoreSource:
    """Rules from one ignore file, relative to ``base``."""

    base: Path
    rules: tuple[IgnoreRule, ...]
    origin: Path | None = None

    def decide(self, path: Path, is_dir: bool) -> bool | None:
        """True if ignored, False if re-included by a negation, None if no rule matches."""

        try:
            rel = path.relative_to(self.base).as_posix()
        except ValueError:
            return None
        if rel in ("", "."):
            return None
        for rule in reversed(self.rules):
            if rule.matches(rel, is_dir):
                return not rule.negated
        return None


def is_included(path: Path, is_dir: bool, sources: Sequence[IgnoreSource]) -> bool:
    for source in sources:
        decision = source.decide(path, is_dir)
        if decision is not None:
            return not decision
    return True


def _bracket(pattern: str, i: int) -> tuple[str, int] | None:
    n = len(pattern)
    j = i + 1
    negate = False
    if j < n and pattern[j] in "!^":
        negate = True
        j += 1
    start = j
    if j < n and pattern[j] == "]":
        j += 1
    while j < n and pattern[j] != "]":
        j += 1
    if j >= n:
        return None

    body = pattern[start:j]
    for ch in ("\\", "[", "]", "^"):
        body = body.replace(ch, "\\" + ch)
    if negate:
        return f"[^/{body}]", j + 1
    return f"[{body}]", j + 1


def translate(pattern: str) -> str:
    """Translate one gitignore glob (no leading/trailing slash) to a regex body."""

    out: list[str] = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == "*":
            if pattern.startswith("**", i):
                at_segment_start = i == 0 or pattern[i - 1] == "/"
                j = i + 2
                if at_segment_start and j < n and pattern[j] == "/":
                    out.append("(?:.*/)?")
                    i = j + 1
                    continue
                if at_segment_start and j == n:
                    out.append(".+")
                    i = j
                    continue
            while i < n and pattern[i] == "*":
                i += 1
            out.append("[^/]*")
            continue
        if c == "?":
            out.append("[^/]")
        elif c == "[":
            bracket = _bracket(pattern, i)
            if bracket is not None:
                out.append(bracket[0])
                i = bracket[1]
                continue
            out.append(re.escape(c))
        elif c == "\\" and i + 1 < n:
            out.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        else:
            out.append(re.escape(c))
        i += 1
    return "".join(out)


def parse_rule(line: str) -> IgnoreRule | None:
    text = line.rstrip("\r\n")
    stripped = text.rstrip(" ")
    if stripped != text and stripped.endswith("\\"):
        stripped += " "
    if not stripped or stripped.startswith("#"):
        return None

    negated = False
    if stripped.startswith("!"):
        negated = True
        stripped = stripped[1:]
    elif stripped.startswith(("\\!", "\\#")):
        stripped = stripped[1:]

    dir_only = stripped.endswith("/")
    body = stripped.rstrip("/")
    if not body:
        return None

    anchored = "/" in body
    body = body.lstrip("/")
    if not body:
        return None

    prefix = "" if anchored else "(?:.*/)?"
    regex = re.compile("^" + prefix + translate(body) + "$", re.DOTALL)
    return IgnoreRule(pattern=line.strip(), regex=regex, negated=negated, dir_only=dir_only)


def parse_rules(text: str) -> tuple[IgnoreRule, ...]:
    rules: list[IgnoreRule] = []
    for raw in text.splitlines():
        rule = parse_rule(raw)
        if rule is not None:
            rules.append(rule)
    return tuple(rules)


def load_ignore_file(path: Path, *, base: Path) -> IgnoreSource | None:
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise FileOperationError("read", path, exc) from exc
    rules = parse_rules(text)
    logger.debug("loaded %d ignore rule(s) from %s", len(rules), path)
    return IgnoreSource(base=base, rules=rules, origin=path)


def find_repo_root(start: Path) -> Path | None:
    for candidate in (start, *start.parents):
        if (candidate / GIT_DIR_NAME).exists():
            return candidate
    return None


_SECTION_RE = re.compile(r'^\s*\[\s*([A-Za-z0-9.-]+)(?:\s+"[^"]*")?\s*\]')
_KEY_RE = re.compile(r"^\s*([A-Za-z][A-Za-z0-9-]*)\s*=\s*(.*?)\s*$")


def _core_excludes_file(config_path: Path) -> str | None:
    if not config_path.is_file():
        return None
    try:
        text = config_path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise FileOperationError("read", config_path, exc) from exc

    section = ""
    value: str | None = None
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith(("#", ";")):
            continue
        m = _SECTION_RE.match(line)
        if m:
            section = m.group(1).lower()
            continue
        m = _KEY_RE.match(line)
        if m and section == "core" and m.group(1).lower() == "excludesfile":
            v = m.group(2)
            if len(v) >= 2 and v[0] == v[-1] == '"':
                v = v[1:-1]
            value = v
    return value


def global_excludes_file(environ: Mapping[str, str] | None = None) -> Path | None:
    """Locate the user's global excludes file the way git does.

    ``core.excludesFile`` from ``~/.gitconfig`` beats the XDG config; without it the
    default is ``$XDG_CONFIG_HOME/git/ignore`` (or ``~/.config/git/ignore``).
    """

    env = os.environ if environ is None else environ
    home = Path(env.get("HOME") or Path.home())
    xdg = env.get("XDG_CONFIG_HOME") or ""
    xdg_git = Path(xdg) / "git" if xdg else home / ".config" / "git"

    configured: str | None = None
    for config_path in (xdg_git / "config", home / ".gitconfig"):
        value = _core_excludes_file(config_path)
        if value:
            configured = value

    if configured:
        if configured == "~" or configured.startswith("~/"):
            return home / configured[2:]
        return Path(configured)
    return xdg_git / "ignore"


def build_base_sources(
    root: Path,
    *,
    environ: Mapping[str, str] | None = None,
) -> list[IgnoreSource]:
    """Sources that apply to ``root`` before its own ``.gitignore`` is read.

    ``root`` must be absolute. Inside a repository this is every ``.gitignore``
    between the repository root and ``root``'s parent, then ``.git/info/exclude``,
    then the global file. Outside a repository only the global file applies,
    relative to ``root``.
    """

    sources: list[IgnoreSource] = []
    repo = find_repo_root(root)

    if repo is not None and repo != root:
        d = root.parent
        while True:
            src = load_ignore_file(d / GITIGNORE_NAME, base=d)
            if src is not None:
                sources.append(src)
            if d == repo:
                break
            d = d.parent

    if repo is not None:
        exclude = load_ignore_file(repo.joinpath(GIT_DIR_NAME, *REPO_EXCLUDE_RELPATH), base=repo)
        if exclude is not None:
            sources.append(exclude)

    global_file = global_excludes_file(environ)
    if global_file is not None:
        src = load_ignore_file(global_file, base=repo if repo is not None else root)
        if src is not None:
            sources.append(src)

    return sources


__all__ = [
    "IgnoreRule",
    "IgnoreSource",
    "build_base_sources",
    "find_repo_root",
    "global_excludes_file",
    "is_included",
    "load_ignore_file",
    "parse_rule",
    "parse_rules",
    "translate",
]
