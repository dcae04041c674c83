from __future__ import annotations

import base64
import json

import pytest

from propstrip.actions.sourcemap import (
    SourceMap,
    decode_mappings,
    decode_vlq,
    encode_mappings,
    encode_vlq,
)


@pytest.mark.parametrize("value,text", [(0, "A"), (1, "C"), (-1, "D"), (15, "e"), (16, "gB"), (-16, "hB")])
def test_vlq_known_values(value, text):
    assert encode_vlq(value) == text
    assert decode_vlq(text) == [value]


def test_decode_vlq_rejects_garbage():
    with pytest.raises(ValueError):
        decode_vlq("A!")
    with pytest.raises(ValueError):
        decode_vlq("g")


def test_mappings_are_relative_across_lines():
    lines = [[(0, 0, 0, 0), (4, 0, 0, 10)], [], [(2, 0, 3, 1)]]
    text = encode_mappings(lines)
    assert text == "AAAA,IAAU;;EAGT"
    assert decode_mappings(text) == lines


def test_serialization():
    smap = SourceMap(mappings="AAAA", sources=["a.jsx"], sources_content=["x"], file="a.jsx")
    data = smap.to_dict()
    assert data == {
        "version": 3,
        "file": "a.jsx",
        "sources": ["a.jsx"],
        "sourcesContent": ["x"],
        "names": [],
        "mappings": "AAAA",
    }
    assert json.loads(smap.to_json()) == data
    url = smap.to_url()
    assert url.startswith("data:application/json;charset=utf-8;base64,")
    assert json.loads(base64.b64decode(url.split(",", 1)[1])) == data
