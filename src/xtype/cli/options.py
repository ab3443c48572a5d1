# topmark:header:start
#
#   project      : xType
#   file         : options.py
#   file_relpath : src/xtype/cli/options.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Common CLI option utilities.

Reusable options (verbosity, color, output format) and their resolution
logic, so the group and commands stay thin.
"""

from __future__ import annotations

import os
import sys
from enum import Enum
from typing import Callable, ParamSpec, TypeVar

import click

from xtype.cli.cli_types import KeyedChoice
from xtype.cli.errors import XtypeUsageError
from xtype.cli.utils import OutputFormat

P = ParamSpec("P")
R = TypeVar("R")


def resolve_verbosity(verbose_count: int, quiet_count: int) -> int:
    """Resolve program-output verbosity from the ``-v``/``-q`` counts.

    Returns:
        int: ``verbose_count`` when verbose, ``-quiet_count`` when quiet, else 0.

    Raises:
        XtypeUsageError: If both flags are used.
    """
    if verbose_count > 0 and quiet_count > 0:
        raise XtypeUsageError("The '--verbose' and '--quiet' options are mutually exclusive.")
    return verbose_count or -quiet_count


def common_verbose_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add counting ``-v/--verbose`` and ``-q/--quiet`` options."""
    f = click.option(
        "-v",
        "--verbose",
        count=True,
        help="Show more detail (for example handler locations).",
    )(f)
    f = click.option(
        "-q",
        "--quiet",
        count=True,
        help="Suppress status messages.",
    )(f)
    return f


class ColorMode(str, Enum):
    """User intent for colorized terminal output."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


def resolve_color_mode(
    *,
    cli_mode: ColorMode | None,
    output_format: OutputFormat | None,
    stdout_isatty: bool | None = None,
) -> bool:
    """Determine whether color output should be enabled.

    Machine formats never get color. ``--color`` wins over ``FORCE_COLOR`` and
    ``NO_COLOR``; otherwise color follows whether stdout is a TTY.
    """
    if output_format in (OutputFormat.JSON, OutputFormat.NDJSON):
        return False
    if cli_mode == ColorMode.ALWAYS:
        return True
    if cli_mode == ColorMode.NEVER:
        return False
    force_color = os.getenv("FORCE_COLOR")
    if force_color and force_color != "0":
        return True
    if os.getenv("NO_COLOR") is not None:
        return False
    if stdout_isatty is None:
        stdout_isatty = sys.stdout.isatty()
    return bool(stdout_isatty)


def common_color_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``--color`` (auto, always, never) and ``--no-color``."""
    f = click.option(
        "--color",
        "color_mode",
        type=KeyedChoice(ColorMode),
        default=None,
        help="Color output: auto (default), always, or never.",
    )(f)
    f = click.option(
        "--no-color",
        "no_color",
        is_flag=True,
        help="Disable color output (equivalent to --color=never).",
    )(f)
    return f


def output_format_option(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``--format`` accepting every `OutputFormat`."""
    return click.option(
        "--format",
        "output_format",
        type=KeyedChoice(OutputFormat),
        default=None,
        help=f"Output format ({', '.join(v.value for v in OutputFormat)}).",
    )(f)
