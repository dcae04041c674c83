"""Option validation and config file loading.

Config file locations (first found wins):
  - explicit path (``--config``)
  - $PROPSTRIP_CONFIG
  - .propstrip.yaml
  - propstrip.yaml

Schema (all keys optional; a top-level ``propstrip:`` wrapper is accepted):
  include: ["src/**/*.jsx", "src/**/*.tsx"]
  exclude: ["node_modules/**"]
  imports: ["react"]
  sourceMap: true
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import yaml

from .errors import ConfigurationError
from .logging_config import get_logger

logger = get_logger("config")

DEFAULT_INCLUDE: Tuple[str, ...] = ("**/*.jsx", "**/*.tsx")
DEFAULT_EXCLUDE: Tuple[str, ...] = ("node_modules/**",)
DEFAULT_IMPORTS: Tuple[str, ...] = ("prop-types",)

CONFIG_FILENAMES = (".propstrip.yaml", "propstrip.yaml")

Pattern = Union[str, "re.Pattern[str]"]

_KNOWN_KEYS = {"include", "exclude", "imports", "sourceMap", "source_map"}
_PATTERN_KEYS = ("include", "exclude")

_TRUE_SET = {"1", "true", "yes", "on"}
_FALSE_SET = {"0", "false", "no", "off"}


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean environment variable (1/0, true/false, yes/no, on/off)."""
    val = os.environ.get(name)
    if val is None:
        return bool(default)
    s = str(val).strip().lower()
    if s in _TRUE_SET:
        return True
    if s in _FALSE_SET:
        return False
    return bool(default)


def _is_pattern(value: Any) -> bool:
    return isinstance(value, (str, re.Pattern))


def validate_options(options: Optional[Mapping[str, Any]]) -> List[str]:
    """Return every type violation found in ``options`` (empty list when valid).

    Falsy values are treated as absent and never reported.
    """
    if options is None:
        return []
    if not isinstance(options, Mapping):
        return [f"options | expected a mapping, got {type(options).__name__}"]
    violations: List[str] = []
    for key, value in options.items():
        if not value:
            continue
        if key in _PATTERN_KEYS:
            if _is_pattern(value):
                continue
            if isinstance(value, (list, tuple)) and all(_is_pattern(v) for v in value):
                continue
            violations.append(f"options.{key} | invalid type")
        elif key == "imports":
            if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
                violations.append(f"options.{key} | invalid type")
        elif key in ("sourceMap", "source_map"):
            if not isinstance(value, bool):
                violations.append(f"options.{key} | invalid type")
    return violations


def _dedupe(items) -> Tuple[Any, ...]:
    seen: List[Any] = []
    for it in items:
        if it not in seen:
            seen.append(it)
    return tuple(seen)


def normalize_patterns(value: Any, fallback: Tuple[str, ...]) -> Tuple[Pattern, ...]:
    """Turn a pattern option into a deduplicated tuple, falling back when absent."""
    if _is_pattern(value):
        return (value,)
    if isinstance(value, (list, tuple)) and value:
        return _dedupe(value)
    return tuple(fallback)


@dataclass(frozen=True)
class StripOptions:
    include: Tuple[Pattern, ...] = DEFAULT_INCLUDE
    exclude: Tuple[Pattern, ...] = DEFAULT_EXCLUDE
    imports: frozenset = frozenset(DEFAULT_IMPORTS)
    source_map: bool = False


def normalize_options(options: Optional[Mapping[str, Any]], *, name: str = "propstrip") -> StripOptions:
    """Validate ``options`` and return their frozen, defaulted form.

    Raises ConfigurationError listing all violations.
    """
    violations = validate_options(options)
    if violations:
        raise ConfigurationError(
            "; ".join(f"{name} | {v}" for v in violations),
            violations=violations,
        )
    opts = dict(options or {})
    for key in sorted(set(opts) - _KNOWN_KEYS):
        logger.warning("%s | options.%s | unknown option ignored", name, key)

    source_map = opts.get("sourceMap")
    if source_map is None:
        source_map = opts.get("source_map")
    return StripOptions(
        include=normalize_patterns(opts.get("include"), DEFAULT_INCLUDE),
        exclude=normalize_patterns(opts.get("exclude"), DEFAULT_EXCLUDE),
        imports=frozenset(DEFAULT_IMPORTS + tuple(opts.get("imports") or ())),
        source_map=bool(source_map or False),
    )


def _load_yaml(p: Path) -> Dict[str, Any]:
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"cannot read config file {p}: {e}") from e
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid YAML in {p}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"config file {p} must contain a mapping")
    if isinstance(data.get("propstrip"), dict):
        data = data["propstrip"]
    return data


def find_config(root: Path, *, explicit_path: Optional[Path] = None) -> Optional[Path]:
    if explicit_path:
        return Path(explicit_path)
    env_path = os.getenv("PROPSTRIP_CONFIG")
    if env_path:
        return Path(env_path)
    for name in CONFIG_FILENAMES:
        cand = Path(root) / name
        if cand.is_file():
            return cand
    return None


def load_config(root: Path, *, explicit_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load plugin options from the first config file found, or ``{}``.

    An explicit path (argument or $PROPSTRIP_CONFIG) must exist.
    """
    path = find_config(root, explicit_path=explicit_path)
    if path is None:
        return {}
    if not path.is_file():
        raise ConfigurationError(f"config file not found: {path}")
    data = _load_yaml(path)
    logger.debug("Loaded config from %s: keys=%s", path, sorted(data))
    return data


def merge_options(file_options: Mapping[str, Any], cli_options: Mapping[str, Any]) -> Dict[str, Any]:
    """CLI values override config file values; ``None`` and empty lists do not."""
    merged: Dict[str, Any] = dict(file_options or {})
    for key, value in (cli_options or {}).items():
        if value is None or value == [] or value == ():
            continue
        merged[key] = value
    return merged


__all__ = [
    "DEFAULT_INCLUDE",
    "DEFAULT_EXCLUDE",
    "DEFAULT_IMPORTS",
    "StripOptions",
    "env_bool",
    "validate_options",
    "normalize_patterns",
    "normalize_options",
    "find_config",
    "load_config",
    "merge_options",
]
