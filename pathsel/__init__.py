from pathsel.engine import (
    ACCEPT_ALL,
    InvalidPatternError,
    PathMatcher,
    PatternError,
    UnknownSyntaxError,
    compile_matcher,
)
from pathsel.patterns import DEFAULT_EXCLUDES
from pathsel.selector import PathSelector, build_path_selector

__all__ = [
    "ACCEPT_ALL",
    "DEFAULT_EXCLUDES",
    "InvalidPatternError",
    "PathMatcher",
    "PathSelector",
    "PatternError",
    "UnknownSyntaxError",
    "build_path_selector",
    "compile_matcher",
]
