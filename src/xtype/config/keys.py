# topmark:header:start
#
#   project      : xType
#   file         : keys.py
#   file_relpath : src/xtype/config/keys.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Canonical TOML section and key names for xType configuration.

Keys defined here are the *external configuration API* of ``xtype.toml``:
renaming or removing one is a breaking change.
"""

from __future__ import annotations

from typing import Final


class Toml:
    """TOML section names and keys used by xType configuration.

    The ordering mirrors the output of ``xtype config``.
    """

    # [backend]
    SECTION_BACKEND: Final[str] = "backend"

    KEY_BACKEND_NAME: Final[str] = "name"
    KEY_BACKEND_CATALOG: Final[str] = "catalog"

    # [store]
    SECTION_STORE: Final[str] = "store"

    KEY_STATE_FILE: Final[str] = "state_file"

    # [status]
    SECTION_STATUS: Final[str] = "status"

    KEY_VISIBILITY_SECONDS: Final[str] = "visibility_seconds"

    # [discovery]
    SECTION_DISCOVERY: Final[str] = "discovery"

    KEY_EXTRA_EXTENSIONS: Final[str] = "extra_extensions"

    ALL_SECTIONS: Final[frozenset[str]] = frozenset(
        {SECTION_BACKEND, SECTION_STORE, SECTION_STATUS, SECTION_DISCOVERY}
    )
