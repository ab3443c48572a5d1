# topmark:header:start
#
#   project      : xType
#   file         : conftest.py
#   file_relpath : tests/cli/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""CLI test helpers.

`run_cli` invokes the Click group in-process. `static_args` builds the global
options that point the CLI at a static catalog and a private state file, so
no test ever touches the host's desktop database.
"""

from __future__ import annotations

from typing import IO, TYPE_CHECKING, Any, Sequence

from click.testing import CliRunner, Result

from xtype.cli.exit_codes import ExitCode
from xtype.cli.main import cli

if TYPE_CHECKING:
    from pathlib import Path


def static_args(catalog_file: Path, state_file: Path | None = None) -> list[str]:
    """Global options selecting the static backend over ``catalog_file``.

    Args:
        catalog_file (Path): Static backend catalog.
        state_file (Path | None): Persisted catalog location; defaults to a
            ``state.json`` next to the catalog.

    Returns:
        list[str]: Options to put before the sub-command.
    """
    state = state_file or catalog_file.parent / "state.json"
    return [
        "--no-color",
        "--backend",
        "static",
        "--catalog",
        str(catalog_file),
        "--state-file",
        str(state),
    ]


def run_cli(
    argv: str | Sequence[str] | None,
    *,
    input_text: str | bytes | IO[Any] | None = None,
) -> Result:
    """Invoke the CLI without changing the working directory.

    Args:
        argv (str | Sequence[str] | None): CLI argument vector, e.g. ``["--help"]``.
        input_text (str | bytes | IO[Any] | None): Optional standard input.

    Returns:
        Result: The `click.testing.Result` produced by
            `click.testing.CliRunner.invoke`.

    Example:
        ```python
        result = run_cli(["version"])
        assert result.exit_code == ExitCode.SUCCESS
        ```
    """
    runner = CliRunner()
    return runner.invoke(cli, argv, input=input_text)


def assert_SUCCESS(result: Result) -> None:
    """Assert that the command exited successfully (code 0)."""
    assert result.exit_code == ExitCode.SUCCESS, result.output


def assert_USAGE_ERROR(result: Result) -> None:
    """Assert that the command exited with USAGE_ERROR (code 64)."""
    # Click's own UsageError exits with 2; xType maps its usage errors to 64.
    assert result.exit_code == ExitCode.USAGE_ERROR, result.output


def assert_FILE_NOT_FOUND(result: Result) -> None:
    """Assert that the command exited with FILE_NOT_FOUND (code 66)."""
    assert result.exit_code == ExitCode.FILE_NOT_FOUND, result.output


def assert_CONFIG_ERROR(result: Result) -> None:
    """Assert that the command exited with CONFIG_ERROR (code 78)."""
    assert result.exit_code == ExitCode.CONFIG_ERROR, result.output
