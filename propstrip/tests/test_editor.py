from __future__ import annotations

import itertools

import pytest

from propstrip.actions.editor import RemovalRange, SourceEditor


SRC = "import A from 'a';\nconst x = 1;\nX.propTypes = {};\n"


def test_remove_and_render():
    ed = SourceEditor(SRC)
    ed.remove(0, 18)
    assert ed.to_string() == "\nconst x = 1;\nX.propTypes = {};\n"
    assert ed.removed_ranges() == [RemovalRange(0, 18)]
    assert ed.has_changed()


def test_empty_range_is_noop():
    ed = SourceEditor(SRC)
    ed.remove(5, 5)
    assert ed.to_string() == SRC
    assert not ed.has_changed()


@pytest.mark.parametrize("start,end", [(-1, 3), (3, 2), (0, len(SRC) + 1)])
def test_invalid_ranges(start, end):
    with pytest.raises(ValueError):
        SourceEditor(SRC).remove(start, end)


def test_nested_and_overlapping_ranges_merge():
    ed = SourceEditor("0123456789")
    ed.remove(2, 6).remove(3, 4).remove(5, 8).remove(8, 9)
    assert ed.removed_ranges() == [RemovalRange(2, 9)]
    assert ed.to_string() == "019"


def test_removal_order_does_not_matter():
    ranges = [(0, 18), (32, 49), (19, 31)]
    outputs = set()
    for perm in itertools.permutations(ranges):
        ed = SourceEditor(SRC)
        for s, e in perm:
            ed.remove(s, e)
        outputs.add(ed.to_string())
    assert outputs == {"\n\n\n"}


def test_map_points_at_removed_range_edges():
    ed = SourceEditor(SRC)
    ed.add_sourcemap_location(0)
    ed.add_sourcemap_location(18)
    ed.remove(0, 18)
    smap = ed.generate_map(source="a.js", file="a.js")
    refs = {(line, col) for segs in smap.segments() for (_g, _s, line, col) in segs}
    assert (0, 0) in refs
    assert (0, 18) in refs
    assert smap.sources == ["a.js"]
    assert smap.sources_content == [SRC]


def test_hires_maps_every_kept_character():
    ed = SourceEditor("ab\ncd")
    ed.remove(0, 1)
    segs = ed.generate_map(hires=True).segments()
    # "b\n" on line 0, "cd" on line 1
    assert [(g, line, col) for g, _s, line, col in segs[0]] == [(0, 0, 1), (1, 0, 2)]
    assert [(g, line, col) for g, _s, line, col in segs[1]] == [(0, 1, 0), (1, 1, 1)]


def test_lowres_maps_chunk_and_line_starts_only():
    ed = SourceEditor("abcdef\nghi")
    ed.remove(1, 3)
    segs = ed.generate_map(hires=False, include_content=False).segments()
    assert [(g, col) for g, _s, _l, col in segs[0]] == [(0, 0), (1, 3)]
    assert [(g, col) for g, _s, _l, col in segs[1]] == [(0, 0)]


def test_trailing_removal_end_location_is_mapped():
    src = "x;\nA.propTypes = {};"
    ed = SourceEditor(src)
    ed.add_sourcemap_location(3)
    ed.add_sourcemap_location(len(src))
    ed.remove(3, len(src))
    refs = {(line, col) for segs in ed.generate_map().segments() for (_g, _s, line, col) in segs}
    assert (1, 0) in refs
    assert (1, len("A.propTypes = {};")) in refs
