"""CLI parser builder."""
from __future__ import annotations

import argparse


def _add_selection_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("paths", nargs="+", help="files or directories to process")
    p.add_argument("--include", action="append", metavar="GLOB", help="include pattern (repeatable; default **/*.jsx, **/*.tsx)")
    p.add_argument("--exclude", action="append", metavar="GLOB", help="exclude pattern (repeatable; default node_modules/**)")
    p.add_argument("--import", dest="imports", action="append", metavar="MODULE", help="extra module to strip besides prop-types (repeatable)")
    p.add_argument("--config", metavar="FILE", help="YAML config file (default: .propstrip.yaml / propstrip.yaml)")
    p.add_argument("--jobs", "-j", type=int, default=1, help="transform files on N threads")


def build_parser() -> argparse.ArgumentParser:
    """Build the propstrip argument parser."""
    p = argparse.ArgumentParser(prog="propstrip", description="Strip prop-types from JS/TS sources")
    p.add_argument("-V", "--version", action="store_true", help="print version and exit")
    p.add_argument("--log-level", default=None, help="DEBUG | INFO | WARNING | ERROR")
    sub = p.add_subparsers(dest="cmd")

    p_strip = sub.add_parser("strip", help="remove prop-types code and write the results")
    _add_selection_args(p_strip)
    p_strip.add_argument("--source-map", dest="source_map", action="store_true", default=None, help="write .map files next to outputs")
    p_strip.add_argument("--out-dir", metavar="DIR", help="write outputs under DIR instead of in place")
    p_strip.add_argument("--dry-run", action="store_true", help="report without writing (also PROPSTRIP_DRYRUN=1)")

    p_check = sub.add_parser("check", help="list files that would change; exit 1 if any")
    _add_selection_args(p_check)

    return p
