# topmark:header:start
#
#   project      : xType
#   file         : logging.py
#   file_relpath : src/xtype/config/logging.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Diagnostics logging for xType.

Every module gets its logger from `get_logger`, which hands out `XtypeLogger`
instances: ordinary loggers with an extra ``trace()`` method for the
``TRACE`` level below DEBUG. The handler resolver reports each probe at that
level, so ``XTYPE_LOG_LEVEL=TRACE`` shows why a type ended up with (or
without) a default application.

`setup_logging` installs a single stderr handler on the root logger whose
records are colored per level with ``yachalk``. Below INFO the format also
names the thread, which tells owner-side store work apart from the
background discovery worker.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING, Any, Callable, Final, TextIO, cast

from yachalk import chalk

if TYPE_CHECKING:
    from collections.abc import Mapping

TRACE_LEVEL: Final[int] = logging.DEBUG - 5

LOG_LEVEL_ENV: Final[str] = "XTYPE_LOG_LEVEL"

# Level used when neither the caller nor the environment picks one
DEFAULT_LOG_LEVEL: Final[int] = logging.CRITICAL

LOG_FORMAT: Final[str] = "[%(levelname)s] %(message)s"
DEBUG_LOG_FORMAT: Final[str] = (
    "[%(levelname)s] [%(threadName)s] [%(name)s:%(lineno)d] %(message)s"
)


class XtypeLogger(logging.Logger):
    """Logger with a ``trace()`` method for the TRACE level."""

    def trace(self, msg: object, *args: object, **kwargs: Any) -> None:
        """Log ``msg % args`` at TRACE level.

        Args:
            msg (object): Message format.
            *args (object): Arguments merged into ``msg``.
            **kwargs (Any): Passed through to `logging.Logger.log`
                (``exc_info``, ``extra``, ...).
        """
        if self.isEnabledFor(TRACE_LEVEL):
            kwargs.setdefault("stacklevel", 2)
            self._log(TRACE_LEVEL, msg, args, **kwargs)


def _register_trace_level() -> None:
    if logging.getLevelName(TRACE_LEVEL) != "TRACE":
        logging.addLevelName(TRACE_LEVEL, "TRACE")
    logging.setLoggerClass(XtypeLogger)


_register_trace_level()

# Lowest level first; a record takes the style of the highest entry it reaches.
_LEVEL_STYLES: Final[tuple[tuple[int, Callable[[str], str]], ...]] = (
    (TRACE_LEVEL, chalk.blue),
    (logging.DEBUG, chalk.gray),
    (logging.INFO, chalk.green),
    (logging.WARNING, chalk.yellow),
    (logging.ERROR, chalk.red),
    (logging.CRITICAL, chalk.red_bright),
)


class ChalkFormatter(logging.Formatter):
    """Formatter coloring each record according to its level."""

    def format(self, record: logging.LogRecord) -> str:
        """Return the formatted record wrapped in the color of its level."""
        message = super().format(record)
        style: Callable[[str], str] = chalk.dim
        for threshold, candidate in _LEVEL_STYLES:
            if record.levelno >= threshold:
                style = candidate
        return style(message)


_LEVEL_NAMES: Final[dict[str, int]] = {
    "TRACE": TRACE_LEVEL,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "NOTSET": logging.NOTSET,
}


def parse_log_level(value: str) -> int | None:
    """Parse a level name (``"trace"``, ``"Warn"``) or number (``"20"``); ``None`` if invalid."""
    token = value.strip().upper()
    if token.isdigit():
        return int(token)
    return _LEVEL_NAMES.get(token)


def resolve_env_log_level(env: Mapping[str, str] | None = None) -> int | None:
    """Return the level requested through ``XTYPE_LOG_LEVEL``, or ``None``.

    Args:
        env (Mapping[str, str] | None): Environment to read; defaults to `os.environ`.
    """
    raw = (os.environ if env is None else env).get(LOG_LEVEL_ENV)
    return parse_log_level(raw) if raw else None


def setup_logging(level: int | None = None, *, stream: TextIO | None = None) -> None:
    """Install the xType handler on the root logger, replacing existing handlers.

    Args:
        level (int | None): Root level. When ``None``, ``XTYPE_LOG_LEVEL`` is
            used, falling back to `DEFAULT_LOG_LEVEL`.
        stream (TextIO | None): Destination; defaults to `sys.stderr` so
            machine-readable output on stdout stays clean.
    """
    if level is None:
        level = resolve_env_log_level() or DEFAULT_LOG_LEVEL

    root = logging.getLogger()
    root.setLevel(level)
    for existing in root.handlers[:]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stderr)
    fmt = LOG_FORMAT if level >= logging.INFO else DEBUG_LOG_FORMAT
    handler.setFormatter(ChalkFormatter(fmt))
    root.addHandler(handler)


def get_logger(name: str) -> XtypeLogger:
    """Return the `XtypeLogger` called ``name``."""
    return cast("XtypeLogger", logging.getLogger(name))
