# topmark:header:start
#
#   project      : xType
#   file         : test_freedesktop_backend.py
#   file_relpath : tests/backends/test_freedesktop_backend.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Tests for the freedesktop.org backend over a fake XDG tree.

The tree holds a tiny shared-mime-info database, two desktop files (one in a
vendor sub directory) and ``mimeapps.list`` files at the three places the
backend reads them from. ``xdg-mime`` is replaced by a recording runner.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from xtype.backends.freedesktop import (
    FreedesktopHandlerService,
    FreedesktopTypeMetadata,
    MimeDatabase,
    load_mime_database,
    read_mime_comment,
)
from xtype.core.errors import BindingError
from xtype.filetypes.classifier import Classifier
from xtype.filetypes.discovery import CatalogBuilder
from xtype.filetypes.model import Category
from xtype.filetypes.resolver import HandlerResolver
from xtype.filetypes.services import Anchor

GLOBS2 = """\
# This file was automatically generated
50:audio/mpeg:*.mp3
50:video/mp4:*.mp4
50:text/markdown:*.md
40:text/markdown:*.markdown
50:application/zip:*.zip
50:application/x-7z-compressed:*.7z
50:application/x-vendor-thing:*.vnd
10:text/x-readme:README*
50:application/x-hidden:__NOGLOBS__
bogus line
"""

SUBCLASSES = "application/x-vendor-thing application/zip\n"
ALIASES = "audio/x-mp3 audio/mpeg\n"

MPEG_XML = """\
<?xml version="1.0" encoding="utf-8"?>
<mime-type xmlns="http://www.freedesktop.org/standards/shared-mime-info" type="audio/mpeg">
  <comment xml:lang="de">MP3-Audio</comment>
  <comment>MP3 audio</comment>
</mime-type>
"""

USER_MIMEAPPS = """\
[Default Applications]
audio/mpeg=vlc.desktop;

[Added Associations]
application/zip=kde-ark.desktop;vlc.desktop;
"""

SYSTEM_DEFAULTS = """\
[Default Applications]
video/mp4=vlc.desktop
"""


@dataclass
class XdgTree:
    """Locations of the fake XDG tree."""

    data_dir: Path
    config_dir: Path

    @property
    def vlc(self) -> Path:
        return self.data_dir / "applications" / "vlc.desktop"

    @property
    def ark(self) -> Path:
        return self.data_dir / "applications" / "kde" / "ark.desktop"

    @property
    def user_mimeapps(self) -> Path:
        return self.config_dir / "mimeapps.list"


@dataclass
class RecordingRunner:
    """Stand-in for `subprocess.run` answering ``xdg-mime`` calls."""

    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    calls: list[list[str]] = field(default_factory=list)

    def __call__(self, cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        assert kwargs == {"capture_output": True, "text": True, "timeout": 5.0}
        self.calls.append(cmd)
        return subprocess.CompletedProcess(cmd, self.returncode, self.stdout, self.stderr)


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


@pytest.fixture
def xdg(tmp_path: Path) -> XdgTree:
    """A fake XDG data and config tree."""
    tree = XdgTree(data_dir=tmp_path / "share", config_dir=tmp_path / "config")
    mime = tree.data_dir / "mime"
    _write(mime / "globs2", GLOBS2)
    _write(mime / "subclasses", SUBCLASSES)
    _write(mime / "aliases", ALIASES)
    _write(mime / "audio" / "mpeg.xml", MPEG_XML)
    _write(tree.vlc, "[Desktop Entry]\nName=VLC\n")
    _write(tree.ark, "[Desktop Entry]\nName=Ark\n")
    _write(tree.data_dir / "applications" / "defaults.list", SYSTEM_DEFAULTS)
    _write(tree.user_mimeapps, USER_MIMEAPPS)
    return tree


@pytest.fixture
def metadata(xdg: XdgTree) -> FreedesktopTypeMetadata:
    return FreedesktopTypeMetadata([xdg.data_dir])


def _handlers(
    xdg: XdgTree,
    metadata: FreedesktopTypeMetadata,
    runner: RecordingRunner | None = None,
) -> FreedesktopHandlerService:
    if runner is None:
        return FreedesktopHandlerService(
            metadata, data_dirs=[xdg.data_dir], config_dirs=[xdg.config_dir]
        )
    return FreedesktopHandlerService(
        metadata,
        data_dirs=[xdg.data_dir],
        config_dirs=[xdg.config_dir],
        xdg_mime="xdg-mime",
        runner=runner,
    )


def test_load_mime_database(xdg: XdgTree) -> None:
    db = load_mime_database([xdg.data_dir])
    assert db.globs["mp3"] == (50, "audio/mpeg")
    assert db.extensions["text/markdown"] == ["md", "markdown"]
    assert "readme" not in db.globs
    assert "application/x-hidden" not in db.extensions
    assert db.parents == {"application/x-vendor-thing": {"application/zip"}}
    assert db.canonical("audio/x-mp3") == "audio/mpeg"
    assert db.lineage("text/markdown") == {
        "text/markdown",
        "text/plain",
        "application/octet-stream",
    }


def test_heavier_glob_owns_a_shared_extension() -> None:
    db = MimeDatabase()
    db.add_glob(20, "text/x-vendor", "vnd")
    db.add_glob(50, "application/x-vendor-thing", "vnd")
    db.add_glob(10, "text/x-other", "vnd")
    assert db.globs["vnd"] == (50, "application/x-vendor-thing")
    assert db.extensions["text/x-vendor"] == ["vnd"]


def test_mimetypes_fallback_without_database(tmp_path: Path) -> None:
    db = load_mime_database([tmp_path / "empty"])
    assert db.globs["png"][1] == "image/png"
    assert db.xml_roots == []


def test_read_mime_comment(xdg: XdgTree, tmp_path: Path) -> None:
    assert read_mime_comment(xdg.data_dir / "mime" / "audio" / "mpeg.xml") == "MP3 audio"
    assert read_mime_comment(xdg.data_dir / "mime" / "audio" / "missing.xml") is None
    broken = tmp_path / "broken.xml"
    broken.write_text("<mime-type", encoding="utf-8")
    assert read_mime_comment(broken) is None


def test_type_lookups(metadata: FreedesktopTypeMetadata) -> None:
    mp3 = metadata.type_for_extension(".MP3")
    assert mp3 is not None
    assert mp3.identifier == "audio/mpeg"
    assert mp3.description == "MP3 audio"
    assert mp3.primary_extension == "mp3"
    assert mp3.is_stable

    assert metadata.type_for_extension("nosuchext") is None

    aliased = metadata.type_for_identifier("audio/x-mp3")
    assert aliased is not None and aliased.identifier == "audio/mpeg"
    assert metadata.type_for_identifier("application/x-unknown") is None

    markdown = metadata.type_for_identifier("text/markdown")
    assert markdown is not None
    assert markdown.extensions == ("md", "markdown")
    assert markdown.description is None


def test_conformance(metadata: FreedesktopTypeMetadata) -> None:
    markdown = metadata.type_for_identifier("text/markdown")
    vendor = metadata.type_for_identifier("application/x-vendor-thing")
    mp4 = metadata.type_for_identifier("video/mp4")
    assert markdown is not None and vendor is not None and mp4 is not None

    assert metadata.conforms_to(markdown, Anchor.TEXT)
    assert metadata.conforms_to(markdown, Anchor.PLAIN_TEXT)
    assert not metadata.conforms_to(markdown, Anchor.ARCHIVE)
    assert metadata.conforms_to(vendor, Anchor.ARCHIVE)
    assert metadata.conforms_to(vendor, Anchor.ZIP)
    assert not metadata.conforms_to(vendor, Anchor.AUDIO)
    assert metadata.conforms_to(mp4, Anchor.MOVIE)
    assert metadata.conforms_to(mp4, Anchor.VIDEO)
    assert all(
        metadata.conforms_to(t, Anchor.DATA) for t in (markdown, vendor, mp4)
    )

    archives = [t.identifier for t in metadata.types_conforming_to(Anchor.ARCHIVE)]
    assert archives == [
        "application/x-7z-compressed",
        "application/x-vendor-thing",
        "application/zip",
    ]


def test_anchor_types(metadata: FreedesktopTypeMetadata) -> None:
    assert metadata.anchor_type(Anchor.AUDIO) is None
    # Known to the database through its glob
    zip_type = metadata.anchor_type(Anchor.ZIP)
    assert zip_type is not None and zip_type.identifier == "application/zip"
    # Not in this database at all
    assert metadata.anchor_type(Anchor.PDF) is None


def test_role_handlers_from_mimeapps(xdg: XdgTree, metadata: FreedesktopTypeMetadata) -> None:
    handlers = _handlers(xdg, metadata)
    assert handlers.default_role_handler("audio/mpeg") == "vlc.desktop"
    # [Added Associations] is consulted after [Default Applications]
    assert handlers.default_role_handler("application/zip") == "kde-ark.desktop"
    # Legacy defaults.list in the data directory
    assert handlers.default_role_handler("video/mp4") == "vlc.desktop"
    assert handlers.default_role_handler("text/markdown") is None

    assert handlers.default_application_for_type("audio/mpeg") == xdg.vlc
    assert handlers.default_application_for_type("text/markdown") is None
    assert handlers.application_to_open(Path("/tmp/x.zip")) == xdg.ark
    assert handlers.application_to_open(Path("/tmp/x.nosuchext")) is None


def test_desktop_ids(xdg: XdgTree, metadata: FreedesktopTypeMetadata) -> None:
    handlers = _handlers(xdg, metadata)
    assert handlers.application_for_identity("vlc.desktop") == xdg.vlc
    assert handlers.application_for_identity("kde-ark.desktop") == xdg.ark
    assert handlers.application_for_identity("gone.desktop") is None

    assert handlers.identity_for_application(xdg.ark) == "kde-ark.desktop"
    assert handlers.identity_for_application(xdg.vlc) == "vlc.desktop"
    assert handlers.identity_for_application(Path("/elsewhere/vlc.desktop")) == "vlc.desktop"
    assert handlers.identity_for_application(Path("/Applications/VLC.app")) is None


def test_binding_without_xdg_mime_writes_mimeapps(
    xdg: XdgTree, metadata: FreedesktopTypeMetadata
) -> None:
    handlers = _handlers(xdg, metadata)
    handlers.set_default_handler("text/markdown", "kde-ark.desktop")

    text = xdg.user_mimeapps.read_text(encoding="utf-8")
    assert "text/markdown=kde-ark.desktop;" in text
    # Existing entries survive the rewrite
    assert "audio/mpeg=vlc.desktop;" in text
    assert handlers.default_role_handler("text/markdown") == "kde-ark.desktop"
    assert handlers.default_application_for_type("text/markdown") == xdg.ark


def test_binding_creates_the_user_file(tmp_path: Path, xdg: XdgTree) -> None:
    config_dir = tmp_path / "fresh-config"
    handlers = FreedesktopHandlerService(
        None, data_dirs=[xdg.data_dir], config_dirs=[config_dir]
    )
    handlers.set_default_handler("video/mp4", "vlc.desktop")
    text = (config_dir / "mimeapps.list").read_text(encoding="utf-8")
    assert "[Default Applications]" in text
    assert "video/mp4=vlc.desktop;" in text


def test_binding_to_missing_desktop_file(
    xdg: XdgTree, metadata: FreedesktopTypeMetadata
) -> None:
    runner = RecordingRunner()
    handlers = _handlers(xdg, metadata, runner)
    with pytest.raises(BindingError, match="no such desktop file"):
        handlers.set_default_handler("audio/mpeg", "gone.desktop")
    assert runner.calls == []


def test_xdg_mime_query_and_default(xdg: XdgTree, metadata: FreedesktopTypeMetadata) -> None:
    runner = RecordingRunner(stdout="kde-ark.desktop\n")
    handlers = _handlers(xdg, metadata, runner)

    assert handlers.default_application_for_type("audio/mpeg") == xdg.ark
    assert runner.calls == [["xdg-mime", "query", "default", "audio/mpeg"]]

    handlers.set_default_handler("text/markdown", "vlc.desktop")
    assert runner.calls[-1] == ["xdg-mime", "default", "vlc.desktop", "text/markdown"]
    # xdg-mime did the work; the user file is left alone
    assert "text/markdown" not in xdg.user_mimeapps.read_text(encoding="utf-8")


def test_xdg_mime_empty_answer_means_no_default(
    xdg: XdgTree, metadata: FreedesktopTypeMetadata
) -> None:
    handlers = _handlers(xdg, metadata, RecordingRunner(stdout="\n"))
    assert handlers.default_application_for_type("audio/mpeg") is None


def test_xdg_mime_failures(xdg: XdgTree, metadata: FreedesktopTypeMetadata) -> None:
    runner = RecordingRunner(returncode=2)
    handlers = _handlers(xdg, metadata, runner)

    # A failed query falls back to mimeapps.list
    assert handlers.default_application_for_type("audio/mpeg") == xdg.vlc

    with pytest.raises(BindingError, match="xdg-mime exited with 2"):
        handlers.set_default_handler("text/markdown", "vlc.desktop")

    runner.stderr = "permission denied\n"
    with pytest.raises(BindingError, match="permission denied"):
        handlers.set_default_handler("text/markdown", "vlc.desktop")


def test_missing_xdg_mime_falls_back(xdg: XdgTree, metadata: FreedesktopTypeMetadata) -> None:
    calls: list[list[str]] = []

    def _missing(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        calls.append(cmd)
        raise FileNotFoundError(cmd[0])

    handlers = FreedesktopHandlerService(
        metadata,
        data_dirs=[xdg.data_dir],
        config_dirs=[xdg.config_dir],
        xdg_mime="/nonexistent/xdg-mime",
        runner=_missing,
    )
    handlers.set_default_handler("text/markdown", "vlc.desktop")
    assert "text/markdown=vlc.desktop;" in xdg.user_mimeapps.read_text(encoding="utf-8")

    # The tool is not tried again once known to be missing
    assert handlers.default_application_for_type("text/markdown") == xdg.vlc
    assert len(calls) == 1


def test_discovery_over_freedesktop(xdg: XdgTree, metadata: FreedesktopTypeMetadata) -> None:
    handlers = _handlers(xdg, metadata)
    resolver = HandlerResolver(metadata, handlers)
    catalog = CatalogBuilder(metadata, resolver, seed_extensions=["mp3"]).discover()

    by_id = {d.id: d for d in catalog}
    assert set(by_id) == {
        "audio/mpeg",
        "video/mp4",
        "text/markdown",
        "application/zip",
        "application/x-7z-compressed",
        "application/x-vendor-thing",
    }
    assert by_id["audio/mpeg"].description == "MP3 audio"
    assert by_id["audio/mpeg"].default_handler_location == xdg.vlc
    assert by_id["application/zip"].default_handler_location == xdg.ark
    assert by_id["text/markdown"].default_handler_location is None

    classify = Classifier(metadata)
    assert {type_id: classify(d) for type_id, d in by_id.items()} == {
        "audio/mpeg": Category.AUDIO,
        "video/mp4": Category.VIDEO,
        "text/markdown": Category.TEXT,
        "application/zip": Category.ARCHIVE,
        "application/x-7z-compressed": Category.ARCHIVE,
        "application/x-vendor-thing": Category.ARCHIVE,
    }
