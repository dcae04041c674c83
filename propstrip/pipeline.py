"""Minimal host pipeline: discover files, run plugins, write results.

Each file is processed independently. A parse failure is recorded on that
file's outcome and never stops the rest of the run.
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence

from .actions.sourcemap import SourceMap
from .errors import PropStripError
from .logging_config import get_logger
from .plugin import StripPropTypes

logger = get_logger("pipeline")

HOST_VERSION = "1.0.0"

SOURCE_EXTS = (".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx", ".mts", ".cts")
_SKIP_DIRS = {".git", "node_modules", "dist", "build", ".venv"}

UNCHANGED = "unchanged"
STRIPPED = "stripped"
SKIPPED = "skipped"
FAILED = "failed"


@dataclass
class FileOutcome:
    path: Path
    status: str
    original: str = ""
    code: str = ""
    map: Optional[SourceMap] = None
    removed: int = 0
    error: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.status == STRIPPED


@dataclass
class PipelineReport:
    outcomes: List[FileOutcome] = field(default_factory=list)

    def _by(self, status: str) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.status == status]

    @property
    def stripped(self) -> List[FileOutcome]:
        return self._by(STRIPPED)

    @property
    def failed(self) -> List[FileOutcome]:
        return self._by(FAILED)

    @property
    def skipped(self) -> List[FileOutcome]:
        return self._by(SKIPPED)

    @property
    def ok(self) -> bool:
        return not self.failed


def iter_source_files(paths: Iterable[Path]) -> Iterator[Path]:
    """Yield explicit files as given and JS/TS files found under directories."""
    for p in paths:
        p = Path(p)
        if p.is_dir():
            for dp, dn, fn in os.walk(p):
                dn[:] = sorted(d for d in dn if d not in _SKIP_DIRS)
                for name in sorted(fn):
                    if name.endswith(SOURCE_EXTS):
                        yield Path(dp) / name
        else:
            yield p


class Pipeline:
    def __init__(self, plugins: Sequence[StripPropTypes], version: str = HOST_VERSION) -> None:
        self.plugins = list(plugins)
        self.version = version

    def run_file(self, path: Path) -> FileOutcome:
        path = Path(path)
        module_id = str(path.resolve())
        try:
            original = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Cannot read %s: %s", path, e)
            return FileOutcome(path, FAILED, error=f"read_error: {e}")

        code = original
        source_map: Optional[SourceMap] = None
        removed = 0
        transformed = False
        try:
            for plugin in self.plugins:
                result = plugin.transform(code, module_id)
                if result is None:
                    continue
                transformed = True
                code = result.code
                removed += len(result.removed)
                if result.map is not None:
                    if source_map is not None:
                        # maps are not chained; the last one only covers its own step
                        logger.warning("%s: several plugins produced source maps, keeping the last", path)
                    source_map = result.map
        except PropStripError as e:
            logger.error("Failed to transform %s: %s", path, e)
            return FileOutcome(path, FAILED, original=original, error=str(e))

        if not transformed:
            status = SKIPPED
        elif code != original:
            status = STRIPPED
        else:
            status = UNCHANGED
        logger.info("%s %s (%d removal%s)", status, path.as_posix(), removed, "" if removed == 1 else "s")
        return FileOutcome(path, status, original=original, code=code, map=source_map, removed=removed)

    def run(self, paths: Iterable[Path], *, jobs: int = 1) -> PipelineReport:
        files = list(iter_source_files(paths))
        if jobs > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=jobs) as pool:
                outcomes = list(pool.map(self.run_file, files))
        else:
            outcomes = [self.run_file(f) for f in files]
        return PipelineReport(outcomes)


def output_path(path: Path, out_dir: Optional[Path] = None, root: Optional[Path] = None) -> Path:
    if out_dir is None:
        return path
    base = root or Path.cwd()
    try:
        rel = path.resolve().relative_to(Path(base).resolve())
    except ValueError:
        rel = Path(path.name)
    return Path(out_dir) / rel


def write_outcome(outcome: FileOutcome, out_dir: Optional[Path] = None, root: Optional[Path] = None) -> Optional[Path]:
    """Write a stripped file (and its ``.map``); returns the written path or None."""
    if outcome.status != STRIPPED:
        return None
    target = output_path(outcome.path, out_dir, root)
    target.parent.mkdir(parents=True, exist_ok=True)
    code = outcome.code
    if outcome.map is not None:
        map_path = target.with_name(target.name + ".map")
        source_map = replace(outcome.map, file=target.name)
        map_path.write_text(source_map.to_json(), encoding="utf-8")
        if not code.endswith("\n"):
            code += "\n"
        code += f"//# sourceMappingURL={map_path.name}\n"
    target.write_text(code, encoding="utf-8")
    return target


__all__ = [
    "HOST_VERSION",
    "SOURCE_EXTS",
    "FileOutcome",
    "PipelineReport",
    "Pipeline",
    "iter_source_files",
    "output_path",
    "write_outcome",
]
