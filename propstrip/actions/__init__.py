"""Actions package public API: node classifiers, the range editor and source maps."""
from __future__ import annotations

from .editor import RemovalRange, SourceEditor
from .matchers import Removal, RemovalKind, classify, should_be_stripped
from .sourcemap import SourceMap

__all__ = [
    "RemovalRange",
    "SourceEditor",
    "Removal",
    "RemovalKind",
    "classify",
    "should_be_stripped",
    "SourceMap",
]
