# topmark:header:start
#
#   project      : xType
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Pytest configuration for the xType test suite.

Sets up verbose logging for test runs, isolates every test from the
developer's XDG directories, and provides a small static backend catalog
(with fake application bundles under ``tmp_path``) shared by the registry,
backend and CLI tests.

Notes:
    The fixture catalog is designed so that each resolution strategy and
    each category is represented:

    - ``public.aiff-audio`` is bound to an application that is *not* on disk
      and therefore resolves to no handler;
    - ``org.xiph.flac`` only has a role handler;
    - ``7z`` and ``rar`` carry no archive conformance and are classified by
      extension;
    - ``com.example.private`` is undeclared and must never be cataloged.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar, cast

import pytest

from xtype.backends.static import load_static_catalog
from xtype.config import logging
from xtype.filetypes.model import Category
from xtype.registry.persistence import CatalogStateFile
from xtype.registry.status import StatusChannel
from xtype.registry.store import RegistryStore

if TYPE_CHECKING:
    from xtype.backends.static import StaticHandlerService, StaticTypeMetadata

F = TypeVar("F", bound=Callable[..., object])


def hookimpl(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.hookimpl`."""
    return cast("Callable[[F], F]", pytest.hookimpl(*args, **kwargs))


# Installed application bundles (directory names under ``Applications/``).
INSTALLED_APPS: tuple[str, ...] = (
    "VLC.app",
    "IINA.app",
    "Music.app",
    "Preview.app",
    "TextEdit.app",
    "Keka.app",
)

CATALOG_TOML = """\
[applications]
"org.videolan.vlc" = "Applications/VLC.app"
"com.colliderli.iina" = "Applications/IINA.app"
"com.apple.Music" = "Applications/Music.app"
"com.apple.Preview" = "Applications/Preview.app"
"com.apple.TextEdit" = "Applications/TextEdit.app"
"com.aone.keka" = "Applications/Keka.app"
"com.example.gone" = "Applications/Gone.app"

[[types]]
identifier = "public.mp3"
description = "MP3 audio"
extensions = ["mp3"]
conforms_to = ["audio", "data"]
default = "com.apple.Music"

[[types]]
identifier = "public.mpeg-4-audio"
extensions = ["m4a", "m4b"]
preferred_extension = "m4a"
conforms_to = ["audio"]
default = "com.apple.Music"

[[types]]
identifier = "public.aiff-audio"
description = "AIFF audio"
extensions = ["aiff", "aif"]
preferred_extension = "aiff"
conforms_to = ["audio"]
default = "com.example.gone"

[[types]]
identifier = "org.xiph.flac"
description = "FLAC audio"
extensions = ["flac"]
conforms_to = ["audio"]
role_handler = "org.videolan.vlc"

[[types]]
identifier = "public.mpeg-4"
description = "MPEG-4 movie"
extensions = ["mp4"]
conforms_to = ["movie"]
default = "com.colliderli.iina"

[[types]]
identifier = "com.apple.quicktime-movie"
description = "QuickTime movie"
extensions = ["mov", "qt"]
preferred_extension = "mov"
conforms_to = ["movie"]
default = "com.colliderli.iina"

[[types]]
identifier = "public.png"
description = "PNG image"
extensions = ["png"]
conforms_to = ["image"]
default = "com.apple.Preview"

[[types]]
identifier = "public.jpeg"
description = "JPEG image"
extensions = ["jpeg", "jpg"]
preferred_extension = "jpeg"
conforms_to = ["image"]
default = "com.apple.Preview"

[[types]]
identifier = "public.plain-text"
description = "Plain text"
extensions = ["txt", "text"]
preferred_extension = "txt"
conforms_to = ["text"]
default = "com.apple.TextEdit"

[[types]]
identifier = "net.daringfireball.markdown"
description = "Markdown document"
extensions = ["md", "markdown"]
preferred_extension = "md"
conforms_to = ["plain-text"]
default = "com.apple.TextEdit"

[[types]]
identifier = "public.zip-archive"
description = "ZIP archive"
extensions = ["zip"]
conforms_to = ["archive"]
default = "com.aone.keka"

[[types]]
identifier = "org.7-zip.7-zip-archive"
description = "7-Zip archive"
extensions = ["7z"]

[[types]]
identifier = "com.rarlab.rar-archive"
description = "RAR archive"
extensions = ["rar"]

[[types]]
identifier = "com.example.widget"
description = "Widget bundle"
extensions = ["wdgt"]
conforms_to = ["data"]

[[types]]
identifier = "com.example.private"
description = "Private data"
extensions = ["priv"]
conforms_to = ["data"]
declared = false

[[types]]
identifier = "public.folder"
description = "Folder"
"""

# What discovery over CATALOG_TOML must produce, by category.
EXPECTED_CATEGORIES: dict[str, Category] = {
    "public.mp3": Category.AUDIO,
    "public.mpeg-4-audio": Category.AUDIO,
    "public.aiff-audio": Category.AUDIO,
    "org.xiph.flac": Category.AUDIO,
    "public.mpeg-4": Category.VIDEO,
    "com.apple.quicktime-movie": Category.VIDEO,
    "public.png": Category.IMAGE,
    "public.jpeg": Category.IMAGE,
    "public.plain-text": Category.TEXT,
    "net.daringfireball.markdown": Category.TEXT,
    "public.zip-archive": Category.ARCHIVE,
    "org.7-zip.7-zip-archive": Category.ARCHIVE,
    "com.rarlab.rar-archive": Category.ARCHIVE,
    "com.example.widget": Category.OTHER,
}


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def write_catalog(directory: Path, text: str = CATALOG_TOML) -> Path:
    """Write a static catalog plus its installed application bundles under ``directory``."""
    apps_dir = directory / "Applications"
    for name in INSTALLED_APPS:
        (apps_dir / name).mkdir(parents=True, exist_ok=True)
    path = directory / "catalog.toml"
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from the developer's environment and XDG directories.

    Args:
        tmp_path (Path): The pytest-provided temporary directory for the test.
        monkeypatch (pytest.MonkeyPatch): Fixture used to manipulate environment variables.
    """
    # Ensure environment never forces DEBUG during test runs
    monkeypatch.delenv(logging.LOG_LEVEL_ENV, raising=False)
    monkeypatch.delenv("XTYPE_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg" / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "xdg" / "state"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg" / "data"))


@hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Set the xType log level to TRACE for the whole test session."""
    logging.setup_logging(level=logging.TRACE_LEVEL)


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    """Static catalog file with its applications installed under ``tmp_path``."""
    return write_catalog(tmp_path)


@pytest.fixture
def apps(catalog_file: Path) -> dict[str, Path]:
    """Installed application bundles by name (``"VLC"`` → ``.../VLC.app``)."""
    apps_dir = (catalog_file.parent / "Applications").resolve()
    return {Path(name).stem: apps_dir / name for name in INSTALLED_APPS}


@pytest.fixture
def static_backend(catalog_file: Path) -> tuple[StaticTypeMetadata, StaticHandlerService]:
    """Metadata and handler services loaded from `catalog_file`."""
    return load_static_catalog(catalog_file)


@pytest.fixture
def clock() -> FakeClock:
    """A manually advanced clock."""
    return FakeClock()


@pytest.fixture
def state_path(tmp_path: Path) -> Path:
    """Location of the persisted catalog."""
    return tmp_path / "state" / "catalog.json"


@pytest.fixture
def store(
    static_backend: tuple[StaticTypeMetadata, StaticHandlerService],
    state_path: Path,
    clock: FakeClock,
) -> Iterator[RegistryStore]:
    """A not yet loaded store over the static backend."""
    metadata, handlers = static_backend
    with RegistryStore(
        metadata=metadata,
        handlers=handlers,
        state_file=CatalogStateFile(state_path),
        status=StatusChannel(visibility_seconds=3.0, clock=clock),
    ) as s:
        yield s


@pytest.fixture
def loaded_store(store: RegistryStore) -> RegistryStore:
    """`store` after its first discovery has been published."""
    store.load()
    assert store.wait_until_idle(timeout=10)
    return store
