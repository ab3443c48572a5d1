# topmark:header:start
#
#   project      : xType
#   file         : enum_mixins.py
#   file_relpath : src/xtype/core/enum_mixins.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Keyed string enums with display labels and forgiving parsing.

`KeyedStrEnum` members are declared as ``(key, label, aliases)`` triples. The
key is the member value and is what gets persisted or printed in machine
output; the label is for people; the aliases widen what `parse` accepts, so
``xtype list -c music`` and ``-c Audio`` select the same category.

Example:
    ```python
    class Category(KeyedStrEnum):
        VIDEO = ("video", "Video", ("movie", "movies"))

    assert Category.parse("Movie") is Category.VIDEO
    assert Category.keys() == ("video",)
    ```
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from collections.abc import Iterable

_KS = TypeVar("_KS", bound="KeyedStrEnum")

_TOKEN_TABLE_ATTR = "_xtype_token_table"


def normalize_token(raw: str) -> str:
    """Fold case and treat ``-``, ``_`` and blanks alike (``"Plain text"`` → ``"plain_text"``)."""
    return "_".join(raw.strip().lower().replace("-", " ").replace("_", " ").split())


class KeyedStrEnum(str, Enum):
    """``str`` enum whose value is a machine key, with a label and parse aliases.

    Attributes:
        label (str): Human-readable name.
        aliases (tuple[str, ...]): Extra tokens accepted by `parse`.
    """

    label: str
    aliases: tuple[str, ...]

    def __new__(cls: type[_KS], key: str, label: str, aliases: Iterable[str] = ()) -> _KS:
        member: _KS = str.__new__(cls, key)
        member._value_ = key
        member.label = label
        member.aliases = tuple(aliases)
        return member

    def __str__(self) -> str:
        return str(self.value)

    @classmethod
    def keys(cls) -> tuple[str, ...]:
        """Machine keys of every member, in declaration order."""
        return tuple(str(m.value) for m in cls)

    @classmethod
    def _token_table(cls: type[_KS]) -> dict[str, _KS]:
        # Built on first use and stored on the concrete enum class
        table: dict[str, Any] | None = cls.__dict__.get(_TOKEN_TABLE_ATTR)
        if table is None:
            table = {}
            for m in cls:
                for token in (m.value, m.name, *m.aliases):
                    table.setdefault(normalize_token(token), m)
            setattr(cls, _TOKEN_TABLE_ATTR, table)
        return table

    @classmethod
    def parse(cls: type[_KS], raw: str | None) -> _KS | None:
        """Return the member whose key, name or alias matches ``raw``, else ``None``.

        Matching uses `normalize_token` on both sides.
        """
        if raw is None:
            return None
        return cls._token_table().get(normalize_token(raw))
