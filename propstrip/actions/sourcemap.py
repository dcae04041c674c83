"""Source map v3 model and base64 VLQ codec."""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

_B64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_B64_INDEX = {c: i for i, c in enumerate(_B64)}

_VLQ_SHIFT = 5
_VLQ_CONTINUATION = 1 << _VLQ_SHIFT
_VLQ_MASK = _VLQ_CONTINUATION - 1

# (generated_column, source_index, original_line, original_column)
Segment = Tuple[int, int, int, int]


def encode_vlq(value: int) -> str:
    vlq = (-value << 1) | 1 if value < 0 else value << 1
    out = []
    while True:
        digit = vlq & _VLQ_MASK
        vlq >>= _VLQ_SHIFT
        if vlq:
            digit |= _VLQ_CONTINUATION
        out.append(_B64[digit])
        if not vlq:
            return "".join(out)


def decode_vlq(text: str) -> List[int]:
    """Decode a run of VLQ digits into the integers it holds."""
    values: List[int] = []
    shift = 0
    acc = 0
    for ch in text:
        try:
            digit = _B64_INDEX[ch]
        except KeyError:
            raise ValueError(f"invalid base64 VLQ character: {ch!r}") from None
        acc += (digit & _VLQ_MASK) << shift
        if digit & _VLQ_CONTINUATION:
            shift += _VLQ_SHIFT
            continue
        values.append(-(acc >> 1) if acc & 1 else acc >> 1)
        acc = 0
        shift = 0
    if shift:
        raise ValueError("truncated VLQ sequence")
    return values


def encode_mappings(lines: Sequence[Sequence[Segment]]) -> str:
    """Encode per-line absolute segments into a ``mappings`` string."""
    prev_source = prev_line = prev_col = 0
    encoded_lines: List[str] = []
    for segments in lines:
        prev_gen_col = 0
        parts: List[str] = []
        for gen_col, source, line, col in segments:
            parts.append(
                encode_vlq(gen_col - prev_gen_col)
                + encode_vlq(source - prev_source)
                + encode_vlq(line - prev_line)
                + encode_vlq(col - prev_col)
            )
            prev_gen_col, prev_source, prev_line, prev_col = gen_col, source, line, col
        encoded_lines.append(",".join(parts))
    return ";".join(encoded_lines)


def decode_mappings(mappings: str) -> List[List[Segment]]:
    """Inverse of encode_mappings; single-field segments are skipped."""
    prev_source = prev_line = prev_col = 0
    result: List[List[Segment]] = []
    for line_text in mappings.split(";"):
        gen_col = 0
        segments: List[Segment] = []
        for seg_text in filter(None, line_text.split(",")):
            fields = decode_vlq(seg_text)
            gen_col += fields[0]
            if len(fields) < 4:
                continue
            prev_source += fields[1]
            prev_line += fields[2]
            prev_col += fields[3]
            segments.append((gen_col, prev_source, prev_line, prev_col))
        result.append(segments)
    return result


@dataclass
class SourceMap:
    mappings: str
    sources: List[Optional[str]] = field(default_factory=list)
    sources_content: Optional[List[Optional[str]]] = None
    names: List[str] = field(default_factory=list)
    file: Optional[str] = None
    version: int = 3

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"version": self.version}
        if self.file is not None:
            data["file"] = self.file
        data["sources"] = list(self.sources)
        if self.sources_content is not None:
            data["sourcesContent"] = list(self.sources_content)
        data["names"] = list(self.names)
        data["mappings"] = self.mappings
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def to_url(self) -> str:
        payload = base64.b64encode(self.to_json().encode("utf-8")).decode("ascii")
        return "data:application/json;charset=utf-8;base64," + payload

    def segments(self) -> List[List[Segment]]:
        return decode_mappings(self.mappings)

    def __str__(self) -> str:
        return self.to_json()


__all__ = [
    "Segment",
    "SourceMap",
    "encode_vlq",
    "decode_vlq",
    "encode_mappings",
    "decode_mappings",
]
