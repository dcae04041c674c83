"""Classifiers deciding which syntax nodes get stripped.

Three node shapes are removable:

- ``import ... from 'm'`` (also ``import 'm'``, ``import type``, and
  TypeScript ``import x = require('m')``) where ``m`` is a tracked module
- ``require('m')`` with a single string argument naming a tracked module
- ``X.propTypes = ...`` / ``X.defaultProps = ...`` statements, for any ``X``

The last rule is syntactic only: it does not check whether ``X`` has anything
to do with a tracked module.

Every removal covers a whole statement that sits directly in a statement
container (or a whole class member), so deleting it never leaves a dangling
``if (...)`` or ``export``. A require in one declarator of a multi-declarator
``const``/``let``/``var`` only takes that declarator and its comma.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Callable, Dict, List, Optional, Tuple

from tree_sitter import Node

STATIC_PROPS = frozenset({"propTypes", "defaultProps"})

_STATEMENT_CONTAINERS = frozenset({
    "program",
    "statement_block",
    "switch_case",
    "switch_default",
    "class_static_block",
    "class_body",
})

_DECLARATIONS = frozenset({"lexical_declaration", "variable_declaration"})

_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}

_ASSIGNMENTS = frozenset({"assignment_expression", "augmented_assignment_expression"})


class RemovalKind(Enum):
    IMPORT = "import"
    REQUIRE = "require"
    STATIC_PROP_ASSIGNMENT = "static_prop_assignment"


@dataclass(frozen=True)
class Removal:
    """A node matched by one of the classifiers, with the byte range to delete."""
    kind: RemovalKind
    node: Node
    start_byte: int
    end_byte: int
    module: Optional[str] = None


def _text(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


def _decode_escape(raw: str) -> str:
    body = raw[1:]
    if not body or body[0] in "\r\n\u2028\u2029":
        # line continuation
        return ""
    head = body[0]
    try:
        if head == "x":
            return chr(int(body[1:], 16))
        if head == "u":
            return chr(int(body[2:-1] if body.startswith("u{") else body[1:], 16))
        if body.isdigit() and head in "01234567" and (len(body) > 1 or head != "0"):
            return chr(int(body, 8))
    except ValueError:
        return raw
    return _SIMPLE_ESCAPES.get(head, head)


def string_value(node: Optional[Node]) -> Optional[str]:
    """Cooked value of a plain string literal node, or None for anything else.

    Escape sequences are decoded, so ``'prop\\x2dtypes'`` reads as
    ``prop-types``.
    """
    if node is None or node.type != "string":
        return None
    parts = []
    for child in node.named_children:
        if child.type == "escape_sequence":
            parts.append(_decode_escape(_text(child)))
        else:
            parts.append(_text(child))
    # join surrogate pairs written as two \u escapes
    return "".join(parts).encode("utf-16", "surrogatepass").decode("utf-16", "surrogatepass")


def enclosing_statement(node: Node) -> Node:
    """Climb to the ancestor (or self) whose parent is a statement container.

    A class body counts as a container, so a match inside a field initializer
    stops at that field.
    """
    cur = node
    while cur.parent is not None and cur.parent.type not in _STATEMENT_CONTAINERS:
        cur = cur.parent
    return cur


def _statement_span(stmt: Node) -> Tuple[int, int]:
    nxt = stmt.next_sibling
    if stmt.parent is not None and stmt.parent.type == "class_body" and nxt is not None and nxt.type == ";":
        return stmt.start_byte, nxt.end_byte
    return stmt.start_byte, stmt.end_byte


def _import_source(node: Node) -> Optional[str]:
    src = node.child_by_field_name("source")
    if src is None:
        # import x = require('m')
        for child in node.named_children:
            if child.type == "import_require_clause":
                src = child.child_by_field_name("source")
                break
    return string_value(src)


def _require_module(node: Node) -> Optional[str]:
    callee = node.child_by_field_name("function")
    if callee is None or callee.type != "identifier" or _text(callee) != "require":
        return None
    args = node.child_by_field_name("arguments")
    if args is None or args.type != "arguments":
        return None
    named = [c for c in args.named_children if c.type != "comment"]
    if len(named) != 1:
        return None
    return string_value(named[0])


def _unwrap_parens(node: Optional[Node]) -> Optional[Node]:
    while node is not None and node.type == "parenthesized_expression":
        inner = [c for c in node.named_children if c.type != "comment"]
        node = inner[0] if len(inner) == 1 else None
    return node


def _assigned_static_prop(node: Node) -> Optional[str]:
    exprs = [c for c in node.named_children if c.type != "comment"]
    if len(exprs) != 1:
        return None
    expr = _unwrap_parens(exprs[0])
    if expr is None or expr.type not in _ASSIGNMENTS:
        return None
    left = _unwrap_parens(expr.child_by_field_name("left"))
    if left is None or left.type != "member_expression":
        return None
    prop = left.child_by_field_name("property")
    if prop is None or prop.type != "property_identifier":
        return None
    name = _text(prop)
    return name if name in STATIC_PROPS else None


def is_import_declaration(node: Node, imports: AbstractSet[str]) -> bool:
    return node.type == "import_statement" and _import_source(node) in imports


def is_require_call(node: Node, imports: AbstractSet[str]) -> bool:
    return node.type == "call_expression" and _require_module(node) in imports


def is_static_prop_assignment(node: Node) -> bool:
    return node.type == "expression_statement" and _assigned_static_prop(node) is not None


def _holds_require(node: Node, imports: AbstractSet[str]) -> bool:
    if node.type == "call_expression" and _require_module(node) in imports:
        return True
    return any(_holds_require(c, imports) for c in node.named_children if c.type not in _STATEMENT_CONTAINERS)


def _declarator_span(node: Node, imports: AbstractSet[str]) -> Optional[Tuple[int, int]]:
    """Span of the declarator holding ``node`` when its declaration keeps others.

    Returns None when there is no such declarator or every declarator of the
    declaration holds a tracked require, in which case the statement goes.
    """
    cur = node
    while cur.parent is not None and cur.parent.type not in _STATEMENT_CONTAINERS:
        if cur.type == "variable_declarator" and cur.parent.type in _DECLARATIONS:
            break
        cur = cur.parent
    else:
        return None
    declarators: List[Node] = [c for c in cur.parent.named_children if c.type == "variable_declarator"]
    doomed = [_holds_require(d, imports) for d in declarators]
    if len(declarators) < 2 or all(doomed):
        return None
    idx = next(i for i, d in enumerate(declarators) if d.start_byte == cur.start_byte)
    if any(not gone for gone in doomed[:idx]):
        # take the comma before: "k, a" -> "k"
        return declarators[idx - 1].end_byte, cur.end_byte
    # leading run of removals: "a, k" -> "k"
    return cur.start_byte, declarators[idx + 1].start_byte


def _classify_import(node: Node, imports: AbstractSet[str]) -> Optional[Removal]:
    module = _import_source(node)
    if module is None or module not in imports:
        return None
    start, end = _statement_span(enclosing_statement(node))
    return Removal(RemovalKind.IMPORT, node, start, end, module)


def _classify_require(node: Node, imports: AbstractSet[str]) -> Optional[Removal]:
    module = _require_module(node)
    if module is None or module not in imports:
        return None
    span = _declarator_span(node, imports) or _statement_span(enclosing_statement(node))
    return Removal(RemovalKind.REQUIRE, node, span[0], span[1], module)


def _classify_static_prop(node: Node, imports: AbstractSet[str]) -> Optional[Removal]:
    if _assigned_static_prop(node) is None:
        return None
    start, end = _statement_span(enclosing_statement(node))
    return Removal(RemovalKind.STATIC_PROP_ASSIGNMENT, node, start, end)


_CLASSIFIERS: Dict[str, Callable[[Node, AbstractSet[str]], Optional[Removal]]] = {
    "import_statement": _classify_import,
    "call_expression": _classify_require,
    "expression_statement": _classify_static_prop,
}


def classify(node: Node, imports: AbstractSet[str]) -> Optional[Removal]:
    """Return the Removal for ``node``, or None when it should be kept."""
    handler = _CLASSIFIERS.get(node.type)
    if handler is None:
        return None
    return handler(node, imports)


def should_be_stripped(node: Node, imports: AbstractSet[str]) -> bool:
    return classify(node, imports) is not None


__all__ = [
    "STATIC_PROPS",
    "RemovalKind",
    "Removal",
    "classify",
    "should_be_stripped",
    "is_import_declaration",
    "is_require_call",
    "is_static_prop_assignment",
    "enclosing_statement",
    "string_value",
]
