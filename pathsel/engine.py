from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Protocol


class PatternError(ValueError):
    def __init__(self, pattern: str, message: str) -> None:
        super().__init__(f"{message}: {pattern!r}")
        self.pattern = pattern


class UnknownSyntaxError(PatternError):
    pass


class InvalidPatternError(PatternError):
    pass


class PathMatcher(Protocol):
    def matches(self, path: str) -> bool: ...


@dataclass(frozen=True, slots=True)
class RegexMatcher:
    """Whole-string match of a compiled regular expression."""

    source: str
    regex: re.Pattern[str]

    def matches(self, path: str) -> bool:
        return self.regex.fullmatch(path) is not None


@dataclass(frozen=True, slots=True)
class GlobMatcher:
    source: str
    regex: re.Pattern[str]

    def matches(self, path: str) -> bool:
        return self.regex.fullmatch(path) is not None


@dataclass(frozen=True, slots=True)
class LiteralPathMatcher:
    source: str
    path: str

    def matches(self, path: str) -> bool:
        return path == self.path or path.startswith(self.path + "/")


@dataclass(frozen=True, slots=True)
class _AcceptAll:
    def matches(self, path: str) -> bool:
        return True

    def __repr__(self) -> str:
        return "ACCEPT_ALL"


ACCEPT_ALL: PathMatcher = _AcceptAll()


def glob_to_regex(pattern: str, expr: str) -> str:
    r"""Translate a glob expression to a regular expression string.

    ``*`` stays inside one path segment while ``**`` crosses segments, so
    ``**/a`` needs at least one directory before ``a``.

    >>> glob_to_regex("", "*.txt")
    '[^/]*\\.txt'
    >>> glob_to_regex("", "**/a")
    '.*/a'
    >>> glob_to_regex("", "{a,b}")
    '(?:a|b)'
    """
    i, n = 0, len(expr)
    res: list[str] = []
    in_group = False

    while i < n:
        c = expr[i]
        i += 1
        if c == "\\":
            if i >= n:
                raise InvalidPatternError(pattern, "No character to escape")
            res.append(re.escape(expr[i]))
            i += 1
        elif c == "*":
            if i < n and expr[i] == "*":
                i += 1
                res.append(".*")
            else:
                res.append("[^/]*")
        elif c == "?":
            res.append("[^/]")
        elif c == "[":
            i = _translate_class(pattern, expr, i, res)
        elif c == "{":
            if in_group:
                raise InvalidPatternError(pattern, "Cannot nest groups")
            in_group = True
            res.append("(?:")
        elif c == "}" and in_group:
            in_group = False
            res.append(")")
        elif c == "," and in_group:
            res.append("|")
        else:
            res.append(re.escape(c))

    if in_group:
        raise InvalidPatternError(pattern, "Missing '}'")
    return "".join(res)


def _translate_class(pattern: str, expr: str, i: int, res: list[str]) -> int:
    n = len(expr)
    negate = i < n and expr[i] == "!"
    if negate:
        i += 1
    body: list[str] = []
    first = True
    while i < n:
        c = expr[i]
        if c == "]" and not first:
            break
        first = False
        i += 1
        if c == "/":
            raise InvalidPatternError(pattern, "Explicit 'name separator' in class")
        if c == "\\":
            if i >= n:
                raise InvalidPatternError(pattern, "No character to escape")
            c = expr[i]
            i += 1
            body.append(re.escape(c))
        elif c == "-":
            body.append("-")
        else:
            body.append(re.escape(c) if c in "^[]\\&~|" else c)
    if i >= n:
        raise InvalidPatternError(pattern, "Missing ']'")
    # The separator never belongs to a class, even through a range.
    res.append(("[^/" if negate else "(?!/)[") + "".join(body) + "]")
    return i + 1


def _compile_glob(pattern: str, expr: str) -> PathMatcher:
    return GlobMatcher(pattern, re.compile(glob_to_regex(pattern, expr), re.DOTALL))


def _compile_regex(pattern: str, expr: str) -> PathMatcher:
    try:
        return RegexMatcher(pattern, re.compile(expr))
    except re.error as exc:
        raise InvalidPatternError(pattern, f"Invalid regular expression ({exc})") from exc


def _compile_path(pattern: str, expr: str) -> PathMatcher:
    return LiteralPathMatcher(pattern, expr.strip("/"))


SYNTAXES: dict[str, Callable[[str, str], PathMatcher]] = {
    "glob": _compile_glob,
    "regex": _compile_regex,
    "path": _compile_path,
}


def compile_matcher(pattern: str) -> PathMatcher:
    """Compile a ``"<syntax>:<expression>"`` string into a matcher.

    Raises ``UnknownSyntaxError`` when the qualifier is missing or names a
    syntax not in ``SYNTAXES``, and ``InvalidPatternError`` when the
    expression is rejected by its dialect.
    """
    syntax, sep, expr = pattern.partition(":")
    if not sep:
        raise UnknownSyntaxError(pattern, "Pattern has no syntax qualifier")
    factory = SYNTAXES.get(syntax)
    if factory is None:
        raise UnknownSyntaxError(pattern, f"Unsupported pattern syntax {syntax!r}")
    return factory(pattern, expr)
