# topmark:header:start
#
#   project      : xType
#   file         : test_cli_set.py
#   file_relpath : tests/cli/test_cli_set.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""CLI tests: `set`, `set-category`, `refresh` and `reset`.

Each CLI run is a new process from the point of view of the static backend:
bindings made through it are forgotten, while the catalog persisted in the
state file is kept. `refresh` therefore brings back the catalog defaults.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from tests.cli.conftest import assert_FILE_NOT_FOUND, assert_SUCCESS, run_cli, static_args

if TYPE_CHECKING:
    from pathlib import Path


def _handlers(catalog_file: Path, state: Path) -> dict[str, Any]:
    result = run_cli([*static_args(catalog_file, state), "list", "--format", "json"])
    assert_SUCCESS(result)
    return {t["id"]: t["default_handler_name"] for t in json.loads(result.output)["types"]}


def test_set_handler(tmp_path: Path, catalog_file: Path, apps: dict[str, Path]) -> None:
    state = tmp_path / "state.json"
    result = run_cli([*static_args(catalog_file, state), "set", "public.mp3", str(apps["VLC"])])
    assert_SUCCESS(result)
    assert result.output.strip() == "VLC is now the default application for MP3 audio"

    handlers = _handlers(catalog_file, state)
    assert handlers["public.mp3"] == "VLC"
    assert handlers["public.mpeg-4-audio"] == "Music"


def test_set_handler_quiet(catalog_file: Path, apps: dict[str, Path]) -> None:
    result = run_cli([*static_args(catalog_file), "-q", "set", "public.png", str(apps["VLC"])])
    assert_SUCCESS(result)
    assert result.output == ""


def test_set_unknown_type_is_a_warning(catalog_file: Path, apps: dict[str, Path]) -> None:
    result = run_cli([*static_args(catalog_file), "set", "public.nope", str(apps["VLC"])])
    assert_SUCCESS(result)
    assert "Unknown file type 'public.nope': nothing changed." in result.output


def test_set_missing_application(tmp_path: Path, catalog_file: Path) -> None:
    missing = tmp_path / "Applications" / "Nope.app"
    result = run_cli([*static_args(catalog_file), "set", "public.mp3", str(missing)])
    assert_FILE_NOT_FOUND(result)
    assert "Application not found" in result.output


def test_set_unregistered_application(tmp_path: Path, catalog_file: Path) -> None:
    """The catalog follows the user even when the OS cannot bind the application."""
    state = tmp_path / "state.json"
    other = tmp_path / "Other.app"
    other.mkdir()
    result = run_cli([*static_args(catalog_file, state), "set", "public.png", str(other)])
    assert_SUCCESS(result)
    assert "Other is now the default application for PNG image" in result.output
    assert _handlers(catalog_file, state)["public.png"] == "Other"


def test_set_category(tmp_path: Path, catalog_file: Path, apps: dict[str, Path]) -> None:
    state = tmp_path / "state.json"
    result = run_cli(
        [*static_args(catalog_file, state), "set-category", "archives", str(apps["Keka"])]
    )
    assert_SUCCESS(result)
    assert result.output.strip() == "Keka is now the default application for 3 archive file types"

    handlers = _handlers(catalog_file, state)
    assert handlers["org.7-zip.7-zip-archive"] == "Keka"
    assert handlers["com.rarlab.rar-archive"] == "Keka"
    assert handlers["public.mp3"] == "Music"


def test_set_category_singular(catalog_file: Path, apps: dict[str, Path]) -> None:
    result = run_cli([*static_args(catalog_file), "set-category", "other", str(apps["VLC"])])
    assert_SUCCESS(result)
    assert result.output.strip() == "VLC is now the default application for 1 other file type"


def test_set_category_invalid(catalog_file: Path, apps: dict[str, Path]) -> None:
    result = run_cli([*static_args(catalog_file), "set-category", "fonts", str(apps["VLC"])])
    assert result.exit_code == 2
    assert "Invalid value 'fonts'" in result.output


def test_refresh_reads_the_os_again(
    tmp_path: Path, catalog_file: Path, apps: dict[str, Path]
) -> None:
    state = tmp_path / "state.json"
    assert_SUCCESS(
        run_cli([*static_args(catalog_file, state), "set", "public.mp3", str(apps["VLC"])])
    )
    assert _handlers(catalog_file, state)["public.mp3"] == "VLC"

    result = run_cli([*static_args(catalog_file, state), "refresh"])
    assert_SUCCESS(result)
    assert result.output.strip() == "Default applications refreshed"
    assert _handlers(catalog_file, state)["public.mp3"] == "Music"


def test_reset_rebuilds_the_catalog(tmp_path: Path, catalog_file: Path) -> None:
    state = tmp_path / "state.json"
    state.write_text("{not json", encoding="utf-8")

    result = run_cli([*static_args(catalog_file, state), "reset"])
    assert_SUCCESS(result)
    assert result.output.strip() == "Catalog rebuilt with 14 file types"
    assert len(json.loads(state.read_text(encoding="utf-8"))["types"]) == 14


def test_refresh_quiet(catalog_file: Path) -> None:
    result = run_cli([*static_args(catalog_file), "--quiet", "refresh"])
    assert_SUCCESS(result)
    assert result.output == ""
