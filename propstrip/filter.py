"""Include/exclude path filter.

Glob patterns use fnmatch semantics on forward-slash paths. Relative globs
that do not start with ``**`` are anchored at a resolution base (the current
working directory unless told otherwise), so ``node_modules/**`` only
excludes the project's own ``node_modules``. Regular expressions are searched
in the normalized path. Both patterns and ids have ``.`` and ``..`` segments
collapsed before matching.
"""

from __future__ import annotations

import glob
import os
import posixpath
import re
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Any, Tuple, Union

from .config import DEFAULT_EXCLUDE, DEFAULT_INCLUDE, Pattern, normalize_patterns
from .errors import ConfigurationError


def normalize_path(path: str) -> str:
    return str(path).replace("\\", "/")


def _normpath(path: str) -> str:
    # collapse "." and ".." segments; "**" and "*" survive untouched
    return posixpath.normpath(path) if path else path


def _matcher_string(pattern: str, base: Union[str, bool, None]) -> str:
    if base is False or posixpath.isabs(normalize_path(pattern)) or os.path.isabs(pattern) or pattern.startswith("**"):
        return _normpath(normalize_path(pattern))
    base_path = normalize_path(os.path.abspath(base or os.getcwd()))
    return _normpath(posixpath.join(glob.escape(base_path), normalize_path(pattern)))


def _glob_match(path: str, pattern: str) -> bool:
    if fnmatchcase(path, pattern):
        return True
    # "**/" may stand for zero directories
    if pattern.startswith("**/") and fnmatchcase(path, pattern[3:]):
        return True
    return "/**/" in pattern and fnmatchcase(path, pattern.replace("/**/", "/"))


def _check_patterns(key: str, value: Any) -> None:
    if value is None or isinstance(value, (str, re.Pattern)):
        return
    if isinstance(value, (list, tuple)) and all(isinstance(v, (str, re.Pattern)) for v in value):
        return
    raise ConfigurationError(f"{key} | invalid type", violations=[f"options.{key} | invalid type"])


@dataclass(frozen=True)
class FilterPatterns:
    include: Tuple[Pattern, ...] = DEFAULT_INCLUDE
    exclude: Tuple[Pattern, ...] = DEFAULT_EXCLUDE


class PathFilter:
    """Decides whether a module id is eligible for transformation."""

    def __init__(self, patterns: FilterPatterns, resolve: Union[str, bool, None] = None) -> None:
        self.patterns = patterns
        self._include = tuple(self._compile(p, resolve) for p in patterns.include)
        self._exclude = tuple(self._compile(p, resolve) for p in patterns.exclude)

    @staticmethod
    def _compile(pattern: Pattern, resolve: Union[str, bool, None]) -> Pattern:
        if isinstance(pattern, re.Pattern):
            return pattern
        return _matcher_string(pattern, resolve)

    @staticmethod
    def _test(path: str, pattern: Pattern) -> bool:
        if isinstance(pattern, re.Pattern):
            return pattern.search(path) is not None
        return _glob_match(path, pattern)

    def is_eligible(self, path: str) -> bool:
        if not path or "\0" in str(path):
            return False
        path_id = _normpath(normalize_path(path))
        if any(self._test(path_id, p) for p in self._exclude):
            return False
        if not self._include:
            return True
        return any(self._test(path_id, p) for p in self._include)

    __call__ = is_eligible


def create_filter(
    include: Any = None,
    exclude: Any = None,
    resolve: Union[str, bool, None] = None,
) -> PathFilter:
    """Build a PathFilter from raw include/exclude option values.

    ``resolve`` is the base directory for relative globs; ``False`` matches
    globs against the id verbatim.
    """
    _check_patterns("include", include)
    _check_patterns("exclude", exclude)
    patterns = FilterPatterns(
        include=normalize_patterns(include, DEFAULT_INCLUDE),
        exclude=normalize_patterns(exclude, DEFAULT_EXCLUDE),
    )
    return PathFilter(patterns, resolve=resolve)


__all__ = ["FilterPatterns", "PathFilter", "create_filter", "normalize_path"]
