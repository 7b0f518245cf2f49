"""
Logging configuration — central setup for the installer.

Called once at startup by main.py. Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

Every event goes to two sinks:
    console   — colored message only, mirrors what the operator sees
    log file  — ``[YYYY-MM-DD HH:MM:SS] [LEVEL] message``, append-only

Besides the stdlib levels the installer logs at SUCCESS and DRYRUN,
and CRITICAL is rendered as FATAL.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

# ── Custom levels ───────────────────────────────────────────────

DRYRUN = 22
SUCCESS = 25
FATAL = logging.CRITICAL

logging.addLevelName(DRYRUN, "DRYRUN")
logging.addLevelName(SUCCESS, "SUCCESS")
logging.addLevelName(FATAL, "FATAL")

# ── Format strings ──────────────────────────────────────────────

_FMT_CONSOLE = "%(message)s"
_FMT_CONSOLE_DEBUG = "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_CONSOLE_DEBUG = "%H:%M:%S"

# File output, one line per event
_FMT_FILE = "[%(asctime)s] [%(levelname)s] %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

_LEVEL_COLORS = {
    logging.DEBUG: "bright_black",
    logging.INFO: "cyan",
    DRYRUN: "magenta",
    SUCCESS: "green",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    FATAL: "red",
}

# Third-party loggers that are noisy at INFO/DEBUG
_NOISY_LOGGERS = ("urllib3", "charset_normalizer")


class ConsoleFormatter(logging.Formatter):
    """Colors each record by level, the way the operator reads it."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = _LEVEL_COLORS.get(record.levelno)
        if color is None:
            return message
        return click.style(message, fg=color, bold=record.levelno >= FATAL)


class SingleLineFormatter(logging.Formatter):
    """One log-file line per event: embedded newlines become " | "."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        lines = [line.rstrip() for line in message.splitlines() if line.strip()]
        return " | ".join(lines)


def setup_logging(
    level: str = "INFO",
    log_file: str | Path | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Configure Python logging for the entire process.

    Args:
        level: Console log level name (DEBUG, INFO, WARNING, ...).
        log_file: Optional path to the append-only log file.
        log_file_level: Optional separate level for the log file.
            Defaults to INFO so every decision reaches the file.
        quiet_third_party: If True, keep noisy third-party loggers at
            WARNING unless we're at DEBUG level.
    """
    numeric_level = _parse_level(level)

    # ── Console handler (stderr) ────────────────────────────────
    if numeric_level <= logging.DEBUG:
        formatter = ConsoleFormatter(_FMT_CONSOLE_DEBUG, datefmt=_DATEFMT_CONSOLE_DEBUG)
    else:
        formatter = ConsoleFormatter(_FMT_CONSOLE)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(formatter)

    # ── Root logger ─────────────────────────────────────────────
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    root.addHandler(console)

    effective_level = numeric_level

    # ── File handler (optional) ─────────────────────────────────
    if log_file:
        file_level = _parse_level(log_file_level or "INFO")
        effective_level = min(effective_level, file_level)

        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        # FileHandler flushes after every record
        fh = logging.FileHandler(path, mode="a", encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(SingleLineFormatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(effective_level)

    # ── Third-party noise control ───────────────────────────────
    if quiet_third_party and numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    # Don't propagate exceptions from logging itself
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.INFO
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        return logging.INFO
    return numeric
