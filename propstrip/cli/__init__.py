"""propstrip CLI - main entry point.

Commands:
  • strip  – remove prop-types imports/requires/assignments and write files
  • check  – report files that still contain strippable code

This module exposes `main(argv=None)` for testability and `console_entry()`
for the console-script entry point.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from propstrip import __version__
from propstrip.config import env_bool, load_config, merge_options
from propstrip.errors import PropStripError
from propstrip.logging_config import setup_logging
from propstrip.pipeline import FAILED, HOST_VERSION, SKIPPED, UNCHANGED, Pipeline, PipelineReport, write_outcome
from propstrip.plugin import StripPropTypes

from .parser_builder import build_parser


def _build_pipeline(args: argparse.Namespace) -> Pipeline:
    file_opts = load_config(Path.cwd(), explicit_path=Path(args.config) if args.config else None)
    cli_opts: Dict[str, Any] = {
        "include": args.include,
        "exclude": args.exclude,
        "imports": args.imports,
        "sourceMap": getattr(args, "source_map", None),
    }
    plugin = StripPropTypes(merge_options(file_opts, cli_opts), host_version=HOST_VERSION)
    return Pipeline([plugin])


def _run(args: argparse.Namespace) -> PipelineReport:
    pipeline = _build_pipeline(args)
    return pipeline.run([Path(p) for p in args.paths], jobs=max(1, int(args.jobs or 1)))


def cmd_strip(args: argparse.Namespace) -> int:
    dry_run = bool(args.dry_run) or env_bool("PROPSTRIP_DRYRUN", False)
    out_dir = Path(args.out_dir) if args.out_dir else None
    report = _run(args)
    for o in report.outcomes:
        p = o.path.as_posix()
        if o.status == FAILED:
            print(f"[FAIL] {p} ({o.error})")
        elif o.status == SKIPPED:
            print(f"[SKIP] {p} (filtered out)")
        elif o.status == UNCHANGED:
            print(f"[NO-OP] {p} (no change needed)")
        elif dry_run:
            print(f"[DRYRUN] Would strip {o.removed} statement(s): {p}")
        else:
            target = write_outcome(o, out_dir=out_dir, root=Path.cwd())
            print(f"[STRIP] {target.as_posix() if target else p} ({o.removed} removed)")
    return 0 if report.ok else 2


def cmd_check(args: argparse.Namespace) -> int:
    report = _run(args)
    for o in report.failed:
        print(f"[FAIL] {o.path.as_posix()} ({o.error})")
    for o in report.stripped:
        print(f"[WOULD-STRIP] {o.path.as_posix()} ({o.removed} removable)")
    if report.failed:
        return 2
    return 1 if report.stripped else 0


_COMMANDS = {"strip": cmd_strip, "check": cmd_check}


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.version:
        print(__version__)
        return 0
    setup_logging("WARNING", level=args.log_level, stream=sys.stderr)
    func = _COMMANDS.get(args.cmd or "")
    if func is None:
        parser.print_help()
        return 1
    try:
        return int(func(args))
    except PropStripError as e:
        print(f"[cli] error: {e}")
        return 2


def console_entry() -> None:
    """Console script entry point."""
    sys.exit(main())


__all__ = ["main", "console_entry", "cmd_strip", "cmd_check"]
