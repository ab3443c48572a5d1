# topmark:header:start
#
#   project      : xType
#   file         : noxfile.py
#   file_relpath : noxfile.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""xType project automation via Nox.

Sessions:
  - `lint`: Ruff lint checks.
  - `lint_fixall`: Ruff lint autofix.
  - `format_check`: Verify formatting (ruff).
  - `format`: Apply formatting (ruff).
  - `qa`: Per-Python session that runs pytest and pyright.

Common invocations:
  - `nox -s lint`
  - `nox -s qa` (runs for all configured Python versions)
  - `nox -s qa -- -k freedesktop` (arguments after `--` go to pytest)
"""

from __future__ import annotations

import pathlib
import sys
import tomllib
import warnings
from typing import Any, cast

import nox

CURRENT_PYTHON_VERSION: str = f"{sys.version_info[0]}.{sys.version_info[1]}"
CLASSIFIER_PREFIX: str = "Programming Language :: Python :: "


def _parse_pyproject_toml() -> dict[str, Any]:
    """Parse `pyproject.toml` at noxfile import time (stdlib only).

    Returns:
        dict[str, Any]: Parsed TOML document, empty if missing or invalid.
    """
    path = pathlib.Path(__file__).parent / "pyproject.toml"
    if not path.exists():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError:
        return {}


def get_supported_pythons() -> list[str]:
    """Resolve supported Python versions from the `pyproject.toml` classifiers.

    Returns:
        list[str]: Versions like ["3.11", "3.12"], sorted numerically; the
            running interpreter when none are declared.
    """
    project_any = _parse_pyproject_toml().get("project")
    project: dict[str, Any] = cast("dict[str, Any]", project_any or {})
    classifiers = cast("list[str]", project.get("classifiers") or [])

    versions: set[tuple[int, int]] = set()
    for c in classifiers:
        if not c.startswith(CLASSIFIER_PREFIX):
            continue
        parts = c.removeprefix(CLASSIFIER_PREFIX).strip().split(".")
        # Accept only X.Y numeric versions.
        if len(parts) == 2 and all(p.isdigit() for p in parts):
            versions.add((int(parts[0]), int(parts[1])))

    if not versions:
        warnings.warn(
            f"No Python versions found in classifiers. Falling back to {CURRENT_PYTHON_VERSION}.",
            RuntimeWarning,
            stacklevel=2,
        )
        return [CURRENT_PYTHON_VERSION]
    return [f"{major}.{minor}" for major, minor in sorted(versions)]


# Resolve versions once at startup
PYTHONS: list[str] = get_supported_pythons()

# Keep defaults fast; run QA (multi-Python) explicitly or in CI.
nox.options.sessions = ["lint", "format_check"]


@nox.session(python=PYTHONS)
def qa(session: nox.Session) -> None:
    """Run tests + pyright (per Python version)."""
    session.log("Supported Python versions: " + ", ".join(PYTHONS))

    session.install("-e", ".[dev]")

    session.run("pytest", "-q", "tests", "-m", "not slow", *session.posargs)

    py_ver = session.python
    if not isinstance(py_ver, str) or not py_ver:
        raise RuntimeError(f"Unexpected session.python value: {py_ver!r}")

    session.run("pyright", "--pythonversion", py_ver)


@nox.session
def lint(session: nox.Session) -> None:
    """Static analysis."""
    session.install("-e", ".[dev]")

    session.run("ruff", "check", ".")


@nox.session
def lint_fixall(session: nox.Session) -> None:
    """Run ruff with --fix (auto-fix lint issues)."""
    session.install("-e", ".[dev]")

    session.run("ruff", "check", "--fix", ".")


@nox.session
def format_check(session: nox.Session) -> None:
    """Check code formatting."""
    session.install("-e", ".[dev]")

    session.run("ruff", "format", "--check", ".")


@nox.session
def format(session: nox.Session) -> None:
    """Format code (auto-fix)."""
    session.install("-e", ".[dev]")

    session.run("ruff", "format", ".")
