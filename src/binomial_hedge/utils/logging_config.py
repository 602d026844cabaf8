"""Logging configuration for command-line entrypoints.

Library modules only do `logger = logging.getLogger(__name__)`; the pricing
engine logs its tree parameters and results at DEBUG. Entrypoints call
`setup_logging(...)` once.

The console handler injects `record.shortname` (last component of the logger
name), so console formats may use `%(shortname)s`, e.g. `binomial_tree`
instead of `binomial_hedge.options.models.binomial_tree`.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from pathlib import Path

_LEVELS: dict[str, int] = {
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "NOTSET": logging.NOTSET,
}


class _AddShortNameFilter(logging.Filter):
    """Inject `record.shortname` without mutating `record.name`."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.shortname = record.name.split(".")[-1]
        return True


class _ColorFormatter(logging.Formatter):
    """ANSI-colored formatter; colors only the level name."""

    _RESET = "\033[0m"
    _LEVEL_COLOR: dict[int, str] = {
        logging.DEBUG: "\033[36m",  # cyan
        logging.INFO: "\033[32m",  # green
        logging.WARNING: "\033[33m",  # yellow
        logging.ERROR: "\033[31m",  # red
        logging.CRITICAL: "\033[1;31m",  # bold red
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self._LEVEL_COLOR.get(record.levelno)
        if not color:
            return super().format(record)

        original = record.levelname
        record.levelname = f"{color}{original}{self._RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def coerce_level(level: int | str) -> int:
    """Coerce a logging level given as int or string into an int."""
    if isinstance(level, int):
        return level

    s = str(level).strip().upper()
    if not s:
        raise ValueError("Empty logging level")
    if s.isdigit():
        return int(s)

    try:
        return _LEVELS[s]
    except KeyError as e:
        raise ValueError(f"Unknown logging level: {level!r}") from e


def setup_logging(
    level: int | str = "WARNING",
    *,
    fmt_console: str = "%(asctime)s %(levelname)s %(name)s - %(message)s",
    fmt_file: str = "%(asctime)s %(levelname)s %(name)s - %(message)s",
    datefmt: str = "%Y-%m-%d %H:%M:%S",
    log_file: str | Path | None = None,
    module_levels: Mapping[str, int | str] | None = None,
    colored: bool = False,
) -> None:
    """Configure root logging once per process.

    Parameters
    - level: Root log level (int or string, e.g. logging.INFO or "INFO").
    - fmt_console: Console log format; may use `%(shortname)s`.
    - fmt_file: File log format (used only when `log_file` is provided).
    - datefmt: Timestamp format.
    - log_file: If provided, also write logs to this file.
    - module_levels: Optional per-logger overrides, e.g.
      `{"binomial_hedge.options.models": "DEBUG"}`.
    - colored: If True, colorize console output (ANSI).

    Console logs go to stderr so that stdout carries only command output.
    Uses `force=True` so repeated calls (tests, notebooks) replace handlers.
    """
    root_level = coerce_level(level)
    handlers: list[logging.Handler] = []

    console = logging.StreamHandler(sys.stderr)
    console.addFilter(_AddShortNameFilter())
    formatter_cls = _ColorFormatter if colored else logging.Formatter
    console.setFormatter(formatter_cls(fmt=fmt_console, datefmt=datefmt))
    handlers.append(console)

    if log_file is not None:
        p = Path(log_file)
        p.parent.mkdir(parents=True, exist_ok=True)

        fh = logging.FileHandler(p, encoding="utf-8")
        fh.setFormatter(logging.Formatter(fmt=fmt_file, datefmt=datefmt))
        handlers.append(fh)

    logging.basicConfig(level=root_level, handlers=handlers, force=True)

    if module_levels:
        for name, lvl in module_levels.items():
            logging.getLogger(name).setLevel(coerce_level(lvl))
