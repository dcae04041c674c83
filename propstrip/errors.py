"""Error taxonomy for propstrip.

Configuration and compatibility problems are raised while a plugin is being
constructed and abort before any file is touched. Parse errors belong to a
single file and propagate out of that file's transform only.
"""

from __future__ import annotations

from typing import List, Optional, Sequence


class PropStripError(Exception):
    """Base class for all propstrip errors."""


class ConfigurationError(PropStripError):
    """Invalid plugin options (wrong types for include/exclude/imports/sourceMap)."""

    def __init__(self, message: str, violations: Optional[Sequence[str]] = None) -> None:
        super().__init__(message)
        self.violations: List[str] = list(violations or [])


class CompatibilityError(PropStripError):
    """Host pipeline version is below the supported minimum."""

    def __init__(self, message: str, version: str = "", minimum: str = "") -> None:
        super().__init__(message)
        self.version = version
        self.minimum = minimum


class ParseError(PropStripError):
    """Source text of one file could not be parsed."""

    def __init__(self, path: str, line: int, column: int, detail: str = "syntax error") -> None:
        self.path = path
        self.line = line
        self.column = column
        self.detail = detail
        super().__init__(f"{path}:{line}:{column}: {detail}")


__all__ = [
    "PropStripError",
    "ConfigurationError",
    "CompatibilityError",
    "ParseError",
]
