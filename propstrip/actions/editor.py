"""Range-removal editor over an immutable original text.

All offsets are ``str`` indices into the original text. Removals are kept as
intervals against that text and merged when rendering, so the order in which
they are registered never changes the result.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from .sourcemap import Segment, SourceMap, encode_mappings


@dataclass(frozen=True, order=True)
class RemovalRange:
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start


class SourceEditor:
    def __init__(self, original: str) -> None:
        self.original = original
        self._ranges: List[Tuple[int, int]] = []
        self._locations: Set[int] = set()
        self._line_starts: Optional[List[int]] = None

    def _check(self, offset: int) -> None:
        if not 0 <= offset <= len(self.original):
            raise ValueError(f"offset {offset} out of bounds (0..{len(self.original)})")

    def add_sourcemap_location(self, offset: int) -> None:
        self._check(offset)
        self._locations.add(offset)

    def remove(self, start: int, end: int) -> "SourceEditor":
        self._check(start)
        self._check(end)
        if end < start:
            raise ValueError(f"invalid range [{start}, {end})")
        if end > start:
            self._ranges.append((start, end))
        return self

    def removed_ranges(self) -> List[RemovalRange]:
        """Registered removals merged into sorted, non-overlapping ranges."""
        merged: List[List[int]] = []
        for start, end in sorted(self._ranges):
            if merged and start <= merged[-1][1]:
                merged[-1][1] = max(merged[-1][1], end)
            else:
                merged.append([start, end])
        return [RemovalRange(s, e) for s, e in merged]

    def has_changed(self) -> bool:
        return bool(self._ranges)

    def _kept_chunks(self) -> List[Tuple[int, int]]:
        chunks: List[Tuple[int, int]] = []
        pos = 0
        for r in self.removed_ranges():
            if r.start > pos:
                chunks.append((pos, r.start))
            pos = r.end
        if pos < len(self.original):
            chunks.append((pos, len(self.original)))
        return chunks

    def to_string(self) -> str:
        return "".join(self.original[a:b] for a, b in self._kept_chunks())

    __str__ = to_string

    def _original_position(self, offset: int) -> Tuple[int, int]:
        if self._line_starts is None:
            starts = [0]
            for i, ch in enumerate(self.original):
                if ch == "\n":
                    starts.append(i + 1)
            self._line_starts = starts
        line = bisect_right(self._line_starts, offset) - 1
        return line, offset - self._line_starts[line]

    def generate_map(
        self,
        *,
        source: Optional[str] = None,
        file: Optional[str] = None,
        hires: bool = True,
        include_content: bool = True,
    ) -> SourceMap:
        """Map every position of the edited text back to the original.

        Registered locations that were removed are mapped at the point where
        their removal left a seam in the output.
        """
        lines: List[List[Segment]] = [[]]
        gen_col = 0
        removed = self.removed_ranges()
        size = len(self.original)
        seam_locations = sorted(
            loc for loc in self._locations
            if loc == size or any(r.start <= loc < r.end for r in removed)
        )
        seam_idx = 0

        def emit(offset: int) -> None:
            line, col = self._original_position(offset)
            segs = lines[-1]
            seg = (gen_col, 0, line, col)
            if not segs or segs[-1] != seg:
                segs.append(seg)

        for chunk_start, chunk_end in self._kept_chunks():
            while seam_idx < len(seam_locations) and seam_locations[seam_idx] < chunk_start:
                emit(seam_locations[seam_idx])
                seam_idx += 1
            for i in range(chunk_start, chunk_end):
                if hires or i == chunk_start or i in self._locations or gen_col == 0:
                    emit(i)
                if self.original[i] == "\n":
                    lines.append([])
                    gen_col = 0
                else:
                    gen_col += 1
        for loc in seam_locations[seam_idx:]:
            emit(loc)

        return SourceMap(
            mappings=encode_mappings(lines),
            sources=[source],
            sources_content=[self.original] if include_content else None,
            file=file,
        )


__all__ = ["RemovalRange", "SourceEditor"]
