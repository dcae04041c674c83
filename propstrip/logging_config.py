from __future__ import annotations
import logging
import os
from typing import List, Optional

LOGGER_NAME = "propstrip"

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "NOTSET": logging.NOTSET,
}

_SIMPLE_FMT = "%(levelname)s %(name)s: %(message)s"
_RICH_FMT = "%(asctime)s | %(levelname)s | %(name)s:%(lineno)d | %(message)s"
_FILE_FMT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d: %(message)s"


def _parse_bool(val: Optional[str], default: bool = False) -> bool:
    if val is None:
        return default
    val = val.strip().lower()
    if val in {"1", "true", "yes", "y", "on"}:
        return True
    if val in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _resolve_level(level: Optional[str | int], default_level: Optional[str]) -> int:
    if level is not None and not isinstance(level, str):
        return int(level)
    name = str(level or os.getenv("PROPSTRIP_LOG_LEVEL") or default_level or "INFO").upper()
    try:
        return int(name)
    except ValueError:
        return _LEVELS.get(name, logging.INFO)


class _ColorFormatter(logging.Formatter):
    """Colorize the level name for console output."""

    LEVEL_COLORS = {
        logging.DEBUG: "\x1b[36m",
        logging.INFO: "\x1b[32m",
        logging.WARNING: "\x1b[33m",
        logging.ERROR: "\x1b[31m",
        logging.CRITICAL: "\x1b[35m",
    }
    RESET = "\x1b[0m"

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        color = self.LEVEL_COLORS.get(record.levelno, "")
        try:
            if color:
                record.levelname = f"{color}{original}{self.RESET}"
            return super().format(record)
        finally:
            record.levelname = original


def _build_handlers(log_level: int, stream, logger: logging.Logger) -> List[logging.Handler]:
    rich = (os.getenv("PROPSTRIP_LOG_FORMAT") or "simple").strip().lower() == "rich"
    fmt, datefmt = (_RICH_FMT, "%H:%M:%S") if rich else (_SIMPLE_FMT, None)
    want_color = _parse_bool(os.getenv("PROPSTRIP_LOG_COLOR"), default=stream is None)
    formatter_cls = _ColorFormatter if want_color else logging.Formatter

    console = logging.StreamHandler(stream) if stream is not None else logging.StreamHandler()
    console.setLevel(log_level)
    console.setFormatter(formatter_cls(fmt, datefmt=datefmt))
    handlers: List[logging.Handler] = [console]

    log_file = os.getenv("PROPSTRIP_LOG_FILE")
    if log_file:
        try:
            fh = logging.FileHandler(log_file)
        except OSError as e:
            logger.warning("Failed to set file handler for '%s': %s", log_file, e)
        else:
            fh.setLevel(log_level)
            fh.setFormatter(logging.Formatter(_FILE_FMT, "%Y-%m-%d %H:%M:%S"))
            handlers.append(fh)
    return handlers


def setup_logging(
    default_level: Optional[str] = None,
    *,
    level: Optional[str | int] = None,
    stream=None,
) -> logging.Logger:
    """
    Configure the "propstrip" logger and return it. Safe to call repeatedly.

    Level precedence: explicit `level` > env PROPSTRIP_LOG_LEVEL > `default_level` > INFO.

    Env variables:
      - PROPSTRIP_LOG_LEVEL: level name or number
      - PROPSTRIP_LOG_FORMAT: "simple" (default) or "rich"
      - PROPSTRIP_LOG_FILE: also write logs to this file
      - PROPSTRIP_LOG_COLOR: ANSI colors on the console (default on for stderr)
      - PROPSTRIP_LOG_FORCE: replace existing handlers on every call

    Passing `stream` always replaces the handlers so output goes to that stream.
    """
    log_level = _resolve_level(level, default_level)
    force = stream is not None or _parse_bool(os.getenv("PROPSTRIP_LOG_FORCE"), default=False)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.propagate = False

    if force:
        for h in list(logger.handlers):
            logger.removeHandler(h)
    if not logger.handlers:
        for h in _build_handlers(log_level, stream, logger):
            logger.addHandler(h)
    else:
        for h in logger.handlers:
            h.setLevel(log_level)

    logger.debug("Logging initialized at %s", logging.getLevelName(log_level))
    return logger


def set_log_level(new_level: str | int) -> None:
    """Change the level of the propstrip logger and all of its handlers."""
    logger = logging.getLogger(LOGGER_NAME)
    lvl = _LEVELS.get(new_level.upper(), logging.INFO) if isinstance(new_level, str) else int(new_level)
    logger.setLevel(lvl)
    for h in logger.handlers:
        h.setLevel(lvl)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the propstrip logger or one of its children (e.g. get_logger("plugin"))."""
    base = logging.getLogger(LOGGER_NAME)
    return base if not name else base.getChild(name)
