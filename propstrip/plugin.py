"""Strip prop-types plugin.

Construct once per build with the host's options; call ``transform`` for each
file. The instance holds only frozen configuration, so one plugin can serve
concurrent transforms.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple

from tree_sitter import Node

from .actions.editor import RemovalRange, SourceEditor
from .actions.matchers import Removal, classify
from .actions.sourcemap import SourceMap
from .analysis.js_parser import OffsetIndex, parse_source, walk
from .config import StripOptions, normalize_options
from .errors import CompatibilityError
from .filter import FilterPatterns, PathFilter
from .logging_config import get_logger

logger = get_logger("plugin")

PLUGIN_NAME = "strip-prop-types"
MIN_HOST_VERSION = "0.60.0"


@dataclass
class TransformResult:
    code: str
    map: Optional[SourceMap] = None
    removed: List[RemovalRange] = field(default_factory=list)


def _version_tuple(version: str) -> Tuple[int, ...]:
    parts: List[int] = []
    for piece in str(version).strip().lstrip("v").split(".")[:3]:
        m = re.match(r"\d+", piece)
        if m is None:
            break
        parts.append(int(m.group(0)))
    if not parts:
        raise ValueError(f"unparsable version: {version!r}")
    while len(parts) < 3:
        parts.append(0)
    return tuple(parts)


def check_host_version(host_version: str, *, name: str = PLUGIN_NAME, minimum: str = MIN_HOST_VERSION) -> None:
    """Raise CompatibilityError unless ``host_version`` >= ``minimum``."""
    try:
        have = _version_tuple(host_version)
    except ValueError:
        raise CompatibilityError(
            f'"{name}" cannot read host version {host_version!r}; requires {minimum} or higher.',
            version=str(host_version),
            minimum=minimum,
        ) from None
    if have < _version_tuple(minimum):
        raise CompatibilityError(
            f'"{name}" requires host version {minimum} or higher (got {host_version}).',
            version=str(host_version),
            minimum=minimum,
        )


class StripPropTypes:
    """Removes prop-types imports, requires and static prop assignments."""

    def __init__(
        self,
        options: Optional[Mapping[str, Any]] = None,
        *,
        host_version: str,
        name: str = PLUGIN_NAME,
        resolve: Any = None,
    ) -> None:
        self.name = name
        check_host_version(host_version, name=name)
        self.options: StripOptions = normalize_options(options, name=name)
        self.imports = self.options.imports
        self.filter = PathFilter(
            FilterPatterns(include=self.options.include, exclude=self.options.exclude),
            resolve=resolve,
        )
        logger.debug(
            "%s configured: imports=%s include=%s exclude=%s sourceMap=%s",
            name, sorted(self.imports), self.options.include, self.options.exclude, self.options.source_map,
        )

    @property
    def source_map(self) -> bool:
        return self.options.source_map

    def find_removals(self, root: Node) -> List[Removal]:
        found: List[Removal] = []

        def enter(node: Node) -> None:
            removal = classify(node, self.imports)
            if removal is not None:
                found.append(removal)

        walk(root, enter)
        return found

    def transform(self, code: str, id: str) -> Optional[TransformResult]:
        """Strip ``code`` from module ``id``; None means the file is left to the host untouched."""
        if not self.filter.is_eligible(id):
            return None

        root, _language = parse_source(code, id)
        offsets = OffsetIndex(code)
        editor = SourceEditor(code)
        for removal in self.find_removals(root):
            start = offsets.to_char(removal.start_byte)
            end = offsets.to_char(removal.end_byte)
            logger.debug("%s: strip %s %s [%d, %d)", id, removal.kind.value, removal.module or "", start, end)
            if self.source_map:
                editor.add_sourcemap_location(start)
                editor.add_sourcemap_location(end)
            editor.remove(start, end)

        source_map = editor.generate_map(source=id, file=id, hires=True) if self.source_map else None
        return TransformResult(code=editor.to_string(), map=source_map, removed=editor.removed_ranges())

    __call__ = transform


def strip_prop_types(options: Optional[Mapping[str, Any]] = None, *, host_version: str, name: str = PLUGIN_NAME) -> StripPropTypes:
    return StripPropTypes(options, host_version=host_version, name=name)


__all__ = [
    "PLUGIN_NAME",
    "MIN_HOST_VERSION",
    "TransformResult",
    "StripPropTypes",
    "check_host_version",
    "strip_prop_types",
]
