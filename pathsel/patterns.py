from __future__ import annotations

import os
from typing import Iterable


# Copied from the plexus-utils AbstractScanner catalog of SCM and temporary files.
DEFAULT_EXCLUDES: tuple[str, ...] = (
    # Miscellaneous typical temporary files
    "**/*~",
    "**/#*#",
    "**/.#*",
    "**/%*%",
    "**/._*",
    # CVS
    "**/CVS",
    "**/CVS/**",
    "**/.cvsignore",
    # RCS
    "**/RCS",
    "**/RCS/**",
    # SCCS
    "**/SCCS",
    "**/SCCS/**",
    # Visual SourceSafe
    "**/vssver.scc",
    # MKS
    "**/project.pj",
    # Subversion
    "**/.svn",
    "**/.svn/**",
    # Arch
    "**/.arch-ids",
    "**/.arch-ids/**",
    # Bazaar
    "**/.bzr",
    "**/.bzr/**",
    # SurroundSCM
    "**/.MySCMServerInfo",
    # Mac
    "**/.DS_Store",
    # Serena Dimensions Version 10
    "**/.metadata",
    "**/.metadata/**",
    # Mercurial
    "**/.hg",
    "**/.hg/**",
    # git
    "**/.git",
    "**/.git/**",
    "**/.gitignore",
    # BitKeeper
    "**/BitKeeper",
    "**/BitKeeper/**",
    "**/ChangeSet",
    "**/ChangeSet/**",
    # darcs
    "**/_darcs",
    "**/_darcs/**",
    "**/.darcsrepo",
    "**/.darcsrepo/**",
    "**/-darcs-backup*",
    "**/.darcs-temp-mail",
)

# A prefix of at most this many characters before ':' is a drive letter, not a syntax.
LEGACY_SYNTAX_THRESHOLD = 1

MATCH_EVERYTHING = "**"
GLOB_PREFIX = "glob:"


def uses_legacy_syntax(pattern: str) -> bool:
    return pattern.find(":") <= LEGACY_SYNTAX_THRESHOLD


def with_default_excludes(
    excludes: Iterable[str | None] | None, use_default_excludes: bool
) -> list[str | None]:
    patterns = list(excludes or ())
    if use_default_excludes:
        patterns.extend(DEFAULT_EXCLUDES)
    return patterns


def legacy_transform(pattern: str) -> str:
    """Rewrite a legacy pattern into its canonical glob text.

    The collapsing rules are only valid because ``**`` may match zero
    directories in the legacy semantics.
    """
    pattern = pattern.replace(os.sep, "/")
    if pattern.endswith("/"):
        pattern += "**"
    while pattern.endswith("/**/**"):
        pattern = pattern[:-3]
    while pattern.startswith("**/**/"):
        pattern = pattern[3:]
    while "/**/**/" in pattern:
        pattern = pattern.replace("/**/**/", "/**/")
    return pattern


def expand_family(pattern: str) -> set[str]:
    """Return every variant of ``pattern`` with one or more ``**`` tokens removed.

    A glob ``**`` needs at least one directory, while the legacy ``**`` may
    match none. Adding the variants without the token lets a glob engine
    match the zero-directory case. The pattern itself is not included.
    """
    family: set[str] = set()
    _add_reductions(family, pattern, 0)
    return family


def _add_reductions(family: set[str], pattern: str, end: int) -> None:
    length = len(pattern)
    while True:
        start = pattern.find("**", end)
        if start < 0:
            return
        end = start + 2
        if end < length:
            if pattern[end] != "/":
                continue
            if start == 0:
                end += 1
        if start > 0:
            start -= 1
            if pattern[start] != "/":
                continue
        reduced = pattern[:start] + pattern[end:]
        if reduced:
            family.add(reduced)
        _add_reductions(family, reduced, start)


def simplify(patterns: dict[str, None], excludes: bool) -> tuple[str, ...]:
    """Drop patterns made useless by a bare ``**`` and return the rest in order.

    For includes an empty result means "include everything".
    """
    if MATCH_EVERYTHING in patterns:
        patterns.clear()
        if excludes:
            patterns[MATCH_EVERYTHING] = None
    return tuple(patterns)


def normalize_patterns(
    patterns: Iterable[str | None] | None, excludes: bool
) -> tuple[str, ...]:
    """Normalize user patterns into the strings given to the matcher engine.

    Null and empty patterns are ignored and duplicates removed. A malformed
    qualifier is never an error: the pattern is just read as a legacy one.
    """
    normalized: dict[str, None] = {}
    for pattern in patterns or ():
        if not pattern:
            continue
        if not uses_legacy_syntax(pattern):
            normalized[pattern] = None
            continue
        pattern = legacy_transform(pattern)
        normalized[pattern] = None
        for variant in sorted(expand_family(pattern)):
            normalized[variant] = None
    return simplify(normalized, excludes)


def _split_glob(pattern: str) -> tuple[str, str] | None:
    if uses_legacy_syntax(pattern):
        return "", pattern
    if pattern.startswith(GLOB_PREFIX):
        return GLOB_PREFIX, pattern[len(GLOB_PREFIX):]
    return None


def _is_escaped(expr: str, index: int) -> bool:
    count = 0
    while index - count > 0 and expr[index - count - 1] == "\\":
        count += 1
    return count % 2 == 1


def _segments(expr: str) -> list[tuple[str, bool]]:
    """Split a glob expression on ``/`` outside of groups.

    Each segment comes with a flag telling whether it can match more than
    one directory level.
    """
    segments: list[tuple[str, bool]] = []
    start = 0
    spans = False
    in_group = in_class = False
    i, n = 0, len(expr)
    while i < n:
        c = expr[i]
        if c == "\\":
            # An escaped separator still separates path segments.
            if not in_class and i + 1 < n and expr[i + 1] == "/":
                if in_group:
                    spans = True
                else:
                    segments.append((expr[start:i], spans))
                    start = i + 2
                    spans = False
            i += 2
            continue
        if in_class:
            if c == "]":
                in_class = False
            elif c == "/":
                spans = True
        elif c == "[":
            in_class = True
            if i + 1 < n and expr[i + 1] in "!]":
                i += 1
        elif c == "{":
            in_group = True
        elif c == "}":
            in_group = False
        elif c == "*" and i + 1 < n and expr[i + 1] == "*":
            spans = True
            i += 1
        elif c == "/":
            if in_group:
                spans = True
            else:
                segments.append((expr[start:i], spans))
                start = i + 1
                spans = False
        i += 1
    segments.append((expr[start:], spans))
    return segments


def _include_directories(expr: str) -> list[str] | None:
    segments = _segments(expr)
    texts = [text for text, _ in segments]
    directories: list[str] = []
    for depth, (_, spans) in enumerate(segments):
        if spans:
            if depth == 0:
                return None
            directories.append("/".join(texts[:depth]) + "/**")
            break
        if depth + 1 < len(segments):
            directories.append("/".join(texts[: depth + 1]))
    return directories


def directory_patterns(patterns: Iterable[str], excludes: bool) -> tuple[str, ...]:
    """Derive the patterns of directories to enter or to skip.

    Include directories cover every ancestor of every path an include pattern
    can match, so pruning with them never hides a selected file. An empty
    result for includes means that no directory can be pruned.

    Exclude directories come only from patterns ending with ``/**``. Excluding
    a single file must not exclude the directory holding it.
    """
    directories: dict[str, None] = {}
    for pattern in patterns:
        split = _split_glob(pattern)
        if split is None:
            if excludes:
                continue
            return ()
        prefix, expr = split
        if excludes:
            if expr.endswith("/**") and not _is_escaped(expr, len(expr) - 3):
                directories[prefix + expr[:-3]] = None
            continue
        found = _include_directories(expr)
        if found is None:
            return ()
        for directory in found:
            directories[prefix + directory] = None
    return simplify(directories, excludes)
