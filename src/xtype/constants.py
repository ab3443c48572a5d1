# topmark:header:start
#
#   project      : xType
#   file         : constants.py
#   file_relpath : src/xtype/constants.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""xType Constants."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from typing import Final

try:
    XTYPE_VERSION: str = get_version("xtype")
except PackageNotFoundError:  # running from a source checkout
    XTYPE_VERSION = "0.0.0"

# Well-known extensions probed first during discovery, grouped by family.
SEED_EXTENSIONS: Final[tuple[str, ...]] = (
    # Audio
    "mp3", "wav", "aac", "m4a", "flac", "aiff", "ogg", "wma", "m4b", "alac",
    # Video
    "mp4", "mov", "avi", "mkv", "flv", "wmv", "m4v", "mpeg", "mpg", "webm", "3gp", "m2ts",
    # Images
    "jpg", "jpeg", "png", "gif", "bmp", "tiff", "heic", "webp", "svg", "ico", "icns",
    # Documents
    "pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx", "txt", "rtf", "md", "html", "htm",
    # Archives
    "zip", "rar", "7z", "tar", "gz", "bz2", "xz", "dmg", "pkg", "iso", "cab", "arj", "lzh", "zipx",
)  # fmt: skip

# Archive formats the OS does not always declare as conforming to an archive type.
ARCHIVE_EXTENSIONS: Final[frozenset[str]] = frozenset(
    {"rar", "7z", "tar", "dmg", "pkg", "iso", "cab", "arj", "lzh", "zipx"}
)

# Namespace prefix stripped when humanizing a type identifier.
PUBLIC_TYPE_PREFIX: Final[str] = "public."

# Throwaway file used to ask the OS "what would open a file with this extension".
PROBE_FILE_STEM: Final[str] = "/tmp/temp_file"

DEFAULT_STATUS_SECONDS: Final[float] = 3.0

STATE_SCHEMA_VERSION: Final[int] = 1
STATE_FILE_NAME: Final[str] = "catalog.json"
CONFIG_FILE_NAME: Final[str] = "xtype.toml"
CONFIG_ENV: Final[str] = "XTYPE_CONFIG"

BACKEND_ENTRYPOINT_GROUP: Final[str] = "xtype.backends"

VALUE_NOT_SET: Final[str] = "<not set>"
