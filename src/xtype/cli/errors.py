# topmark:header:start
#
#   project      : xType
#   file         : errors.py
#   file_relpath : src/xtype/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""CLI exceptions and their exit codes.

Each class pins one [`ExitCode`][xtype.cli.exit_codes.ExitCode]. Engine
exceptions never reach Click directly: `translate_engine_errors` wraps the
code that talks to the engine and re-raises configuration and backend
failures as `XtypeConfigError`.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import IO, TYPE_CHECKING, Any

import click

from xtype.cli.exit_codes import ExitCode
from xtype.core.errors import BackendError, ConfigError

if TYPE_CHECKING:
    from collections.abc import Iterator


class XtypeCliError(click.ClickException):
    """Error that ends the command with ``exit_code`` and an ``Error:`` line on stderr."""

    exit_code = ExitCode.FAILURE

    def show(self, file: IO[Any] | None = None) -> None:
        """Print through the context console when there is one."""
        ctx = click.get_current_context(silent=True)
        console = ctx.obj.get("console") if ctx is not None and isinstance(ctx.obj, dict) else None
        if console is None:
            super().show(file)
        else:
            console.error(f"Error: {self.message}")


class XtypeUsageError(XtypeCliError):
    """Options that cannot be combined."""

    exit_code = ExitCode.USAGE_ERROR


class XtypeNotFoundError(XtypeCliError):
    """An application path given on the command line does not exist."""

    exit_code = ExitCode.FILE_NOT_FOUND


class XtypeConfigError(XtypeCliError):
    """Configuration cannot be loaded or the backend cannot be created."""

    exit_code = ExitCode.CONFIG_ERROR


@contextmanager
def translate_engine_errors() -> Iterator[None]:
    """Re-raise `ConfigError` and `BackendError` as `XtypeConfigError`."""
    try:
        yield
    except (ConfigError, BackendError) as e:
        raise XtypeConfigError(str(e)) from e
