"""
Filesystem walking and glob expansion shared by the search tools.

Python's glob module has no notion of a single `**` splitting a pattern into
"walk root" and "suffix", so recursive patterns are expanded here by walking
the tree ourselves. Every tool that accepts `**` goes through
expand_recursive_glob() so edge cases (empty suffix, symlinks) behave the
same everywhere.
"""

from __future__ import annotations

import glob as _glob
import logging
import os
import stat
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Iterator

logger = logging.getLogger(__name__)

RECURSIVE_MARKER = "**"
WILDCARD_CHARS = "*?["


class GlobSyntaxError(ValueError):
    """Raised for a pattern the glob matcher cannot parse."""

    pass


@dataclass(frozen=True, slots=True)
class WalkEntry:
    """A path found during a walk, with the stat taken when it was visited."""

    path: str
    info: os.stat_result

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @property
    def is_dir(self) -> bool:
        return stat.S_ISDIR(self.info.st_mode)

    @property
    def is_symlink(self) -> bool:
        return stat.S_ISLNK(self.info.st_mode)


# -----------------------------------------------------------------------------
# Pattern helpers
# -----------------------------------------------------------------------------


def has_wildcard(pattern: str) -> bool:
    """Check if a path contains glob metacharacters."""
    return any(c in pattern for c in WILDCARD_CHARS)


def check_glob_syntax(pattern: str) -> None:
    """
    Reject patterns with an unterminated character class.

    fnmatch treats a lone `[` as a literal; we report it instead so a typo in
    a pattern doesn't silently match nothing.

    Raises:
        GlobSyntaxError: If a `[` is never closed
    """
    i, n = 0, len(pattern)
    while i < n:
        if pattern[i] == "[":
            j = i + 1
            if j < n and pattern[j] in "!^":
                j += 1
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 1
            if j >= n:
                raise GlobSyntaxError("syntax error in pattern: unterminated '['")
            i = j
        i += 1


def split_recursive_pattern(pattern: str) -> tuple[str, str]:
    """
    Split a `**` pattern into (walk root, suffix).

    The root is the normalized text before `**`; the suffix is the text after
    it with one leading separator removed. An empty suffix matches everything.

    Raises:
        GlobSyntaxError: If the pattern does not contain exactly one `**`
    """
    parts = pattern.split(RECURSIVE_MARKER)
    if len(parts) != 2:
        raise GlobSyntaxError(f"invalid ** pattern: {pattern}")

    root = os.path.normpath(parts[0]) if parts[0] else "."
    suffix = parts[1]
    if suffix.startswith(os.sep):
        suffix = suffix[len(os.sep):]
    return root, suffix


def match_path(pattern: str, path: str, *, case_sensitive: bool = True) -> bool:
    """
    Match a path against a glob pattern, segment by segment.

    Unlike fnmatch, wildcards never cross a path separator: `*.txt` matches
    `a.txt` but not `sub/a.txt`.
    """
    if not case_sensitive:
        pattern = pattern.lower()
        path = path.lower()

    pattern_parts = pattern.split(os.sep)
    path_parts = path.split(os.sep)
    if len(pattern_parts) != len(path_parts):
        return False
    return all(fnmatchcase(name, pat) for pat, name in zip(pattern_parts, path_parts))


def _ignore_case_pattern(pattern: str) -> str:
    """Rewrite letters outside character classes as `[xX]` for case-insensitive glob."""
    out = []
    in_class = False
    for c in pattern:
        if in_class:
            out.append(c)
            if c == "]":
                in_class = False
        elif c == "[":
            in_class = True
            out.append(c)
        elif c.isalpha() and c.lower() != c.upper():
            out.append(f"[{c.lower()}{c.upper()}]")
        else:
            out.append(c)
    return "".join(out)


def matches_extensions(filename: str, extensions: list[str]) -> bool:
    """Check if a filename ends with any of the given suffixes (case-insensitive)."""
    lower = filename.lower()
    return any(lower.endswith(ext.lower()) for ext in extensions)


# -----------------------------------------------------------------------------
# Walking
# -----------------------------------------------------------------------------


def walk_entries(
    root: str,
    *,
    follow_symlinks: bool = False,
    max_depth: int | None = None,
) -> Iterator[WalkEntry]:
    """
    Walk a directory tree depth-first in lexical order, root included.

    Symlinks are yielded with their own (lstat) info and never descended into,
    unless follow_symlinks is set; then they are resolved, directories they
    point to are walked, and each directory is visited at most once.

    Entries that vanish or cannot be stat'ed mid-walk are skipped. A root
    that doesn't exist yields nothing.

    Args:
        root: Directory (or file) to start from
        follow_symlinks: Resolve symlinks and descend into linked directories
        max_depth: Deepest level to yield (root is 0); None for unlimited

    Raises:
        OSError: If the root is a directory that cannot be listed
    """
    try:
        info = os.stat(root)
    except OSError:
        return

    seen: set[tuple[int, int]] = set()
    yield from _walk(root, info, 0, follow_symlinks, max_depth, seen, is_root=True)


def _walk(
    path: str,
    info: os.stat_result,
    depth: int,
    follow_symlinks: bool,
    max_depth: int | None,
    seen: set[tuple[int, int]],
    *,
    is_root: bool = False,
) -> Iterator[WalkEntry]:
    if stat.S_ISLNK(info.st_mode) and follow_symlinks:
        try:
            info = os.stat(path)
        except OSError:
            logger.debug("Skipping dangling symlink %s", path)
            return

    yield WalkEntry(path, info)

    if not stat.S_ISDIR(info.st_mode):
        return
    if max_depth is not None and depth >= max_depth:
        return

    key = (info.st_dev, info.st_ino)
    if key in seen:
        return
    seen.add(key)

    try:
        names = sorted(os.listdir(path))
    except OSError as e:
        if is_root:
            raise
        logger.debug("Skipping unreadable directory %s: %s", path, e)
        return

    for name in names:
        child = os.path.join(path, name)
        try:
            child_info = os.lstat(child)
        except OSError:
            continue
        yield from _walk(child, child_info, depth + 1, follow_symlinks, max_depth, seen)


# -----------------------------------------------------------------------------
# Glob expansion
# -----------------------------------------------------------------------------


def expand_recursive_glob(
    pattern: str,
    *,
    case_sensitive: bool = True,
    follow_symlinks: bool = False,
) -> Iterator[WalkEntry]:
    """
    Expand a pattern containing a single `**` by walking the tree.

    The text before `**` is the walk root. Each entry beneath it (the root
    included) matches when the suffix is empty, or when the suffix matches
    the entry's base name or its path relative to the root. Symlinks are
    skipped entirely unless follow_symlinks is set.

    Raises:
        GlobSyntaxError: If the pattern is malformed
        OSError: If the walk root cannot be listed
    """
    root, suffix = split_recursive_pattern(pattern)
    check_glob_syntax(suffix)

    for entry in walk_entries(root, follow_symlinks=follow_symlinks):
        if entry.is_symlink:
            continue

        # Walking "." yields "./x"; report it the way glob spells it
        entry = WalkEntry(os.path.normpath(entry.path), entry.info)

        if not suffix:
            yield entry
            continue

        rel_path = os.path.relpath(entry.path, root)
        if match_path(suffix, entry.name, case_sensitive=case_sensitive) or match_path(
            suffix, rel_path, case_sensitive=case_sensitive
        ):
            yield entry


def expand_glob(pattern: str, *, case_sensitive: bool = True) -> Iterator[WalkEntry]:
    """
    Expand a single-level glob pattern (no `**`) against the filesystem.

    Matches that cannot be stat'ed are skipped. Hidden files are included.

    Raises:
        GlobSyntaxError: If the pattern is malformed
    """
    check_glob_syntax(pattern)
    if not case_sensitive:
        pattern = _ignore_case_pattern(pattern)

    for path in sorted(_glob.glob(pattern, include_hidden=True)):
        try:
            info = os.stat(path)
        except OSError:
            logger.debug("Skipping unstatable match %s", path)
            continue
        yield WalkEntry(path, info)


def expand_pattern(
    pattern: str,
    *,
    case_sensitive: bool = True,
    follow_symlinks: bool = False,
) -> Iterator[WalkEntry]:
    """Expand any pattern, recursive or not."""
    if RECURSIVE_MARKER in pattern:
        return expand_recursive_glob(
            pattern, case_sensitive=case_sensitive, follow_symlinks=follow_symlinks
        )
    return expand_glob(pattern, case_sensitive=case_sensitive)
