from __future__ import annotations

import logging
import os
from pathlib import Path, PurePath
from typing import Iterable

from pathsel.engine import ACCEPT_ALL, PathMatcher, compile_matcher
from pathsel.patterns import (
    GLOB_PREFIX,
    directory_patterns,
    normalize_patterns,
    uses_legacy_syntax,
    with_default_excludes,
)

logger = logging.getLogger(__name__)

PatternsArg = Iterable[str | None] | None


def _matchers(patterns: tuple[str, ...]) -> tuple[PathMatcher, ...]:
    return tuple(
        compile_matcher(GLOB_PREFIX + pattern if uses_legacy_syntax(pattern) else pattern)
        for pattern in patterns
    )


def _is_matched(path: str, matchers: tuple[PathMatcher, ...]) -> bool:
    return any(matcher.matches(path) for matcher in matchers)


class PathSelector:
    """Decides whether paths under a base directory are selected by include/exclude patterns.

    Patterns without a syntax qualifier, or whose qualifier is a single
    character (a Windows drive letter), follow the legacy rules: the platform
    separator becomes ``/``, a trailing ``/`` means ``/**``, and ``**`` may
    match zero directories. Other patterns go verbatim to the matcher engine,
    e.g. ``glob:**/*.txt`` or ``regex:.*\\.txt``.

    Instances are immutable and can be queried from several threads.
    """

    __slots__ = (
        "_base_directory",
        "_user_includes",
        "_user_excludes",
        "_use_default_excludes",
        "_include_patterns",
        "_exclude_patterns",
        "_dir_include_patterns",
        "_dir_exclude_patterns",
        "_includes",
        "_excludes",
        "_dir_includes",
        "_dir_excludes",
    )

    def __init__(
        self,
        directory: str | os.PathLike[str],
        includes: PatternsArg = None,
        excludes: PatternsArg = None,
        use_default_excludes: bool = False,
    ) -> None:
        includes = list(includes or ())
        excludes = list(excludes or ())
        set_ = object.__setattr__
        set_(self, "_base_directory", Path(directory))
        set_(self, "_user_includes", tuple(p for p in includes if p))
        set_(self, "_user_excludes", tuple(p for p in excludes if p))
        set_(self, "_use_default_excludes", use_default_excludes)

        include_patterns = normalize_patterns(includes, excludes=False)
        exclude_patterns = normalize_patterns(
            with_default_excludes(excludes, use_default_excludes), excludes=True
        )
        dir_include_patterns = directory_patterns(include_patterns, excludes=False)
        dir_exclude_patterns = directory_patterns(exclude_patterns, excludes=True)

        set_(self, "_include_patterns", include_patterns)
        set_(self, "_exclude_patterns", exclude_patterns)
        set_(self, "_dir_include_patterns", dir_include_patterns)
        set_(self, "_dir_exclude_patterns", dir_exclude_patterns)
        set_(self, "_includes", _matchers(include_patterns))
        set_(self, "_excludes", _matchers(exclude_patterns))
        set_(self, "_dir_includes", _matchers(dir_include_patterns))
        set_(self, "_dir_excludes", _matchers(dir_exclude_patterns))

        logger.debug(
            "Selector for %s: %d include, %d exclude, %d directory include, %d directory exclude matcher(s)",
            self._base_directory,
            len(self._includes),
            len(self._excludes),
            len(self._dir_includes),
            len(self._dir_excludes),
        )

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def base_directory(self) -> Path:
        return self._base_directory

    @property
    def include_patterns(self) -> tuple[str, ...]:
        return self._include_patterns

    @property
    def exclude_patterns(self) -> tuple[str, ...]:
        return self._exclude_patterns

    @property
    def directory_include_patterns(self) -> tuple[str, ...]:
        return self._dir_include_patterns

    @property
    def directory_exclude_patterns(self) -> tuple[str, ...]:
        return self._dir_exclude_patterns

    def _relativize(self, path: str | os.PathLike[str]) -> str | None:
        candidate = PurePath(path)
        if candidate.is_absolute() != self._base_directory.is_absolute():
            if candidate.is_absolute():
                return None
        else:
            try:
                candidate = candidate.relative_to(self._base_directory)
            except ValueError:
                # A relative path outside a relative base is read as already relative.
                if candidate.is_absolute():
                    return None
        relative = candidate.as_posix()
        return "" if relative == "." else relative

    def is_selected(self, path: str | os.PathLike[str]) -> bool:
        """Return True if ``path`` matches an include pattern and no exclude pattern.

        Absolute paths are made relative to the base directory, and paths
        outside of it are never selected. Relative paths are read as already
        relative to the base.
        """
        relative = self._relativize(path)
        if relative is None:
            return False
        return (not self._includes or _is_matched(relative, self._includes)) and (
            not self._excludes or not _is_matched(relative, self._excludes)
        )

    matches = is_selected

    def could_hold_selected(self, directory: str | os.PathLike[str]) -> bool:
        """Return False only if no file under ``directory`` can be selected."""
        relative = self._relativize(directory)
        if relative is None:
            return False
        if not relative:
            return True
        return (not self._dir_includes or _is_matched(relative, self._dir_includes)) and (
            not self._dir_excludes or not _is_matched(relative, self._dir_excludes)
        )

    def try_simplify(self) -> PathMatcher | None:
        """Return a cheaper matcher equivalent to this selector, if there is one.

        ``ACCEPT_ALL`` is returned when nothing is filtered.
        """
        if self._excludes or self._dir_includes or self._dir_excludes:
            return None
        if not self._includes:
            return ACCEPT_ALL
        if len(self._includes) == 1:
            return self._includes[0]
        return None

    def __str__(self) -> str:
        text = f"includes: [{', '.join(self._user_includes)}], excludes: [{', '.join(self._user_excludes)}]"
        if self._use_default_excludes:
            text += " + default excludes"
        return text

    def __repr__(self) -> str:
        return f"PathSelector({str(self._base_directory)!r}, {self})"


def build_path_selector(
    directory: str | os.PathLike[str],
    include_patterns: list[str] | tuple[str, ...] | None = None,
    exclude_patterns: list[str] | tuple[str, ...] | None = None,
    *,
    use_default_excludes: bool = False,
) -> PathSelector:
    include = [pattern.strip() for pattern in include_patterns or [] if pattern and pattern.strip()]
    exclude = [pattern.strip() for pattern in exclude_patterns or [] if pattern and pattern.strip()]
    return PathSelector(directory, include, exclude, use_default_excludes)
