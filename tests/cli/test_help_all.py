# topmark:header:start
#
#   project      : xType
#   file         : test_help_all.py
#   file_relpath : tests/cli/test_help_all.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""CLI tests: `--help` output for all commands.

Ensures that:

- The top-level `xtype --help` exits with code 0.
- Each registered subcommand provides a working `--help` page.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tests.cli.conftest import assert_SUCCESS, run_cli

if TYPE_CHECKING:
    from click.testing import Result

COMMANDS: list[str] = [
    "list",
    "categories",
    "set",
    "set-category",
    "refresh",
    "reset",
    "config",
    "version",
]


def test_group_help() -> None:
    """It should exit successfully (0) when running `xtype --help`."""
    result: Result = run_cli(["--help"])

    assert_SUCCESS(result)
    assert "--backend" in result.output
    assert "--state-file" in result.output


@pytest.mark.parametrize("command", COMMANDS)
def test_each_command_has_help(command: str) -> None:
    """It should provide a `--help` page for each known subcommand."""
    result: Result = run_cli([command, "-h"])

    assert_SUCCESS(result)
    assert f"{command} [OPTIONS]" in result.output


@pytest.mark.parametrize("args", [["-v"], ["-vvv"], ["-q"], ["-qq"]])
def test_verbose_and_quiet_flags_parse(args: list[str]) -> None:
    """It should accept verbosity and quietness flags and exit with code 0."""
    result: Result = run_cli([*args, "version"])

    assert_SUCCESS(result)
