# topmark:header:start
#
#   project      : xType
#   file         : console.py
#   file_relpath : src/xtype/cli/console.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""User-facing program output.

Commands write through the `ConsoleLike` stored on the Click context and
never through ``logging``, which only carries diagnostics (see
[`xtype.config.logging`][xtype.config.logging]). The console also knows the
``-v``/``-q`` verbosity, so "is now the default application" messages
disappear under ``--quiet`` without each command checking for it.
"""

from __future__ import annotations

import sys
from typing import Any, Protocol, TextIO

import click


class ConsoleLike(Protocol):
    """What commands need from a console."""

    verbosity: int

    def print(self, text: str = "", *, nl: bool = True) -> None:
        """Write program output."""
        ...

    def status(self, text: str) -> None:
        """Write a status line unless quiet."""
        ...

    def warn(self, text: str) -> None:
        """Write a warning."""
        ...

    def error(self, text: str) -> None:
        """Write an error."""
        ...

    def styled(self, text: str, **style_kwargs: Any) -> str:
        """Return ``text`` with styling applied."""
        ...


class ClickConsole:
    """Console writing with `click.echo`.

    Data and status lines go to ``out``, warnings and errors to ``err``, so
    ``xtype list --format json | jq`` never sees a warning.

    Args:
        enable_color (bool): Emit ANSI styles.
        verbosity (int): Negative when quiet, positive when verbose.
        out (TextIO | None): Output stream; `sys.stdout` when ``None``.
        err (TextIO | None): Diagnostic stream; `sys.stderr` when ``None``.
    """

    def __init__(
        self,
        *,
        enable_color: bool = True,
        verbosity: int = 0,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self.enable_color = enable_color
        self.verbosity = verbosity
        self._out = out
        self._err = err

    def _echo(self, text: str, *, to_err: bool, nl: bool = True, **style: Any) -> None:
        stream = (self._err or sys.stderr) if to_err else self._out
        if style and self.enable_color:
            text = click.style(text, **style)
        click.echo(text, nl=nl, file=stream, color=self.enable_color)

    def print(self, text: str = "", *, nl: bool = True) -> None:
        """Write ``text`` to the output stream."""
        self._echo(text, to_err=False, nl=nl)

    def status(self, text: str) -> None:
        """Report the outcome of a command; silent under ``--quiet``."""
        if self.verbosity >= 0:
            self._echo(text, to_err=False, fg="green")

    def warn(self, text: str) -> None:
        """Write a warning to the diagnostic stream."""
        self._echo(text, to_err=True, fg="yellow")

    def error(self, text: str) -> None:
        """Write an error to the diagnostic stream."""
        self._echo(text, to_err=True, fg="bright_red")

    def styled(self, text: str, **style_kwargs: Any) -> str:
        """Return ``text`` passed through `click.style`, or unchanged without color."""
        return click.style(text, **style_kwargs) if self.enable_color else text


def get_console_safely() -> ConsoleLike:
    """Return the console of the active Click context, or an uncolored default."""
    ctx = click.get_current_context(silent=True)
    obj = ctx.obj if ctx is not None else None
    console = obj.get("console") if isinstance(obj, dict) else None
    return console if console is not None else ClickConsole(enable_color=False)
