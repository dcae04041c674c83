from __future__ import annotations

import json
from pathlib import Path

import pytest

from propstrip.pipeline import (
    FAILED,
    SKIPPED,
    STRIPPED,
    UNCHANGED,
    Pipeline,
    iter_source_files,
    write_outcome,
)
from propstrip.plugin import StripPropTypes

COMPONENT = (
    "import React from 'react';\n"
    "import PropTypes from 'prop-types';\n"
    "const A = () => <b />;\n"
    "A.propTypes = { n: PropTypes.number };\n"
    "export default A;\n"
)


def _w(p: Path, s: str) -> Path:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(s, encoding="utf-8")
    return p


@pytest.fixture
def project(tmp_path: Path) -> Path:
    _w(tmp_path / "src" / "A.jsx", COMPONENT)
    _w(tmp_path / "src" / "Broken.jsx", "const = ;\n")
    _w(tmp_path / "src" / "Plain.tsx", "export const n: number = 1;\n")
    _w(tmp_path / "src" / "util.js", COMPONENT)
    _w(tmp_path / "src" / "notes.md", "# notes\n")
    _w(tmp_path / "node_modules" / "lib" / "B.jsx", COMPONENT)
    return tmp_path


def _pipeline(options=None) -> Pipeline:
    return Pipeline([StripPropTypes(options, host_version="1.0.0")])


def test_iter_source_files_skips_vendor_dirs(project: Path):
    found = sorted(p.relative_to(project).as_posix() for p in iter_source_files([project]))
    assert found == ["src/A.jsx", "src/Broken.jsx", "src/Plain.tsx", "src/util.js"]
    explicit = project / "src" / "notes.md"
    assert list(iter_source_files([explicit])) == [explicit]


@pytest.mark.parametrize("jobs", [1, 4])
def test_failures_are_isolated_per_file(project: Path, jobs: int):
    report = _pipeline().run([project], jobs=jobs)
    status = {o.path.name: o.status for o in report.outcomes}
    assert status == {
        "A.jsx": STRIPPED,
        "Broken.jsx": FAILED,
        "Plain.tsx": UNCHANGED,
        "util.js": SKIPPED,
    }
    assert not report.ok
    broken = report.failed[0]
    assert "Broken.jsx" in (broken.error or "")
    stripped = report.stripped[0]
    assert stripped.removed == 2
    assert "propTypes" not in stripped.code


def test_skipped_file_keeps_original_text(project: Path):
    outcome = _pipeline().run_file(project / "src" / "util.js")
    assert outcome.status == SKIPPED
    assert outcome.code == COMPONENT


def test_missing_file_fails(tmp_path: Path):
    outcome = _pipeline().run_file(tmp_path / "Nope.jsx")
    assert outcome.status == FAILED
    assert outcome.error.startswith("read_error")


def test_write_outcome_in_place_and_out_dir(project: Path):
    pipeline = _pipeline({"sourceMap": True})
    outcome = pipeline.run_file(project / "src" / "A.jsx")

    out_dir = project / "out"
    target = write_outcome(outcome, out_dir=out_dir, root=project)
    assert target == out_dir / "src" / "A.jsx"
    text = target.read_text(encoding="utf-8")
    assert "prop-types" not in text
    assert text.rstrip().endswith("//# sourceMappingURL=A.jsx.map")
    smap = json.loads((out_dir / "src" / "A.jsx.map").read_text(encoding="utf-8"))
    assert smap["version"] == 3
    assert smap["file"] == "A.jsx"

    # source untouched until written in place
    assert (project / "src" / "A.jsx").read_text(encoding="utf-8") == COMPONENT
    write_outcome(outcome)
    assert "propTypes" not in (project / "src" / "A.jsx").read_text(encoding="utf-8")


def test_write_outcome_ignores_unchanged(project: Path):
    outcome = _pipeline().run_file(project / "src" / "Plain.tsx")
    assert write_outcome(outcome, out_dir=project / "out") is None
    assert not (project / "out").exists()


def test_write_outcome_leaves_the_outcome_map_alone(project: Path):
    outcome = _pipeline({"sourceMap": True}).run_file(project / "src" / "A.jsx")
    before = outcome.map.file
    write_outcome(outcome, out_dir=project / "out", root=project)
    assert outcome.map.file == before
    smap = json.loads((project / "out" / "src" / "A.jsx.map").read_text(encoding="utf-8"))
    assert smap["file"] == "A.jsx"


def test_several_source_maps_keep_the_last(project: Path, caplog):
    caplog.set_level("WARNING", logger="propstrip")
    first = StripPropTypes({"sourceMap": True}, host_version="1.0.0")
    second = StripPropTypes({"sourceMap": True, "imports": ["react"]}, host_version="1.0.0")
    outcome = Pipeline([first, second]).run_file(project / "src" / "A.jsx")
    assert outcome.status == STRIPPED
    assert "react" not in outcome.code
    assert outcome.map is not None
    assert "several plugins produced source maps" in caplog.text
