"""JavaScript/TypeScript parsing via tree-sitter."""

from __future__ import annotations

from bisect import bisect_right
from enum import Enum
from pathlib import PurePath
from typing import Callable, Dict, List, Optional, Tuple

import tree_sitter_javascript as ts_javascript
import tree_sitter_typescript as ts_typescript
from tree_sitter import Language, Node, Parser

from ..errors import ParseError


class SourceLanguage(Enum):
    """Grammars a source file can be parsed with."""
    JAVASCRIPT = "javascript"  # includes JSX
    TYPESCRIPT = "typescript"
    TSX = "tsx"


LANGUAGES: Dict[SourceLanguage, Language] = {
    SourceLanguage.JAVASCRIPT: Language(ts_javascript.language()),
    SourceLanguage.TYPESCRIPT: Language(ts_typescript.language_typescript()),
    SourceLanguage.TSX: Language(ts_typescript.language_tsx()),
}

_EXTENSIONS: Dict[str, SourceLanguage] = {
    ".js": SourceLanguage.JAVASCRIPT,
    ".jsx": SourceLanguage.JAVASCRIPT,
    ".mjs": SourceLanguage.JAVASCRIPT,
    ".cjs": SourceLanguage.JAVASCRIPT,
    ".ts": SourceLanguage.TYPESCRIPT,
    ".mts": SourceLanguage.TYPESCRIPT,
    ".cts": SourceLanguage.TYPESCRIPT,
    ".tsx": SourceLanguage.TSX,
}


def language_for_path(path: str) -> SourceLanguage:
    """Pick the grammar from the file extension; unknown extensions parse as JavaScript."""
    # ids may carry a query suffix (e.g. "Button.tsx?inline")
    clean = str(path).split("?", 1)[0]
    return _EXTENSIONS.get(PurePath(clean).suffix.lower(), SourceLanguage.JAVASCRIPT)


def walk(
    root: Node,
    enter: Callable[[Node], None],
    leave: Optional[Callable[[Node], None]] = None,
) -> None:
    """Visit every node under ``root`` (inclusive) once, in pre-order."""
    cursor = root.walk()
    while True:
        enter(cursor.node)
        if cursor.goto_first_child():
            continue
        if leave is not None:
            leave(cursor.node)
        while not cursor.goto_next_sibling():
            if not cursor.goto_parent():
                return
            if leave is not None:
                leave(cursor.node)


def _first_error(root: Node) -> Optional[Node]:
    found: List[Node] = []

    def enter(n: Node) -> None:
        if not found and (n.type == "ERROR" or n.is_missing):
            found.append(n)

    walk(root, enter)
    return found[0] if found else None


class OffsetIndex:
    """Converts UTF-8 byte offsets (tree-sitter) to ``str`` indices."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.source_bytes = text.encode("utf-8")
        self._ascii = len(self.source_bytes) == len(text)
        self._byte_starts: List[int] = []
        if not self._ascii:
            pos = 0
            for ch in text:
                self._byte_starts.append(pos)
                pos += len(ch.encode("utf-8"))

    def to_char(self, byte_offset: int) -> int:
        if self._ascii:
            return byte_offset
        if byte_offset >= len(self.source_bytes):
            return len(self.text)
        return bisect_right(self._byte_starts, byte_offset) - 1


def parse_source(source_code: str, path: str = "<input>") -> Tuple[Node, SourceLanguage]:
    """Parse ``source_code`` with the grammar for ``path``.

    Raises ParseError at the first ERROR/MISSING node when the text does not parse.
    """
    language = language_for_path(path)
    parser = Parser(LANGUAGES[language])
    tree = parser.parse(source_code.encode("utf-8"))
    root = tree.root_node
    if root.has_error:
        bad = _first_error(root) or root
        row, col = bad.start_point
        detail = f"missing {bad.type}" if bad.is_missing else "unexpected token"
        raise ParseError(str(path), row + 1, col + 1, detail)
    return root, language


__all__ = [
    "SourceLanguage",
    "LANGUAGES",
    "language_for_path",
    "parse_source",
    "walk",
    "OffsetIndex",
]
