# topmark:header:start
#
#   project      : xType
#   file         : test_version.py
#   file_relpath : tests/cli/test_version.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""CLI test: `version` command output."""

from __future__ import annotations

import json

import pytest

from tests.cli.conftest import assert_SUCCESS, run_cli
from xtype.constants import XTYPE_VERSION


def test_version_outputs_the_version() -> None:
    """It should output the project version exactly."""
    result = run_cli(
        [
            "--no-color",  # Disable color mode for exact matching
            "version",
        ]
    )

    assert_SUCCESS(result)
    assert result.output.strip() == XTYPE_VERSION


@pytest.mark.parametrize("fmt", ["json", "ndjson"])
def test_version_machine_formats(fmt: str) -> None:
    """`version --format json|ndjson` returns parseable JSON with the version."""
    result = run_cli(["version", "--format", fmt])

    assert_SUCCESS(result)
    assert json.loads(result.output) == {"version": XTYPE_VERSION}


def test_version_markdown() -> None:
    result = run_cli(["--no-color", "version", "--format", "markdown"])

    assert_SUCCESS(result)
    assert result.output.splitlines()[0] == "# xType Version"
    assert f"**xType version: {XTYPE_VERSION}**" in result.output


def test_version_verbose() -> None:
    result = run_cli(["--no-color", "-v", "version"])

    assert_SUCCESS(result)
    lines = [line.strip() for line in result.output.splitlines() if line.strip()]
    assert lines == ["xType version:", XTYPE_VERSION]
