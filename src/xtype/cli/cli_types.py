# topmark:header:start
#
#   project      : xType
#   file         : cli_types.py
#   file_relpath : src/xtype/cli/cli_types.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Click parameter types for xType.

`KeyedChoice` turns a command-line token into an enum member. Categories
accept their aliases (``music`` selects ``audio``), plain enums such as
`OutputFormat` match their values without regard to case.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar

import click

from xtype.core.enum_mixins import KeyedStrEnum, normalize_token

if TYPE_CHECKING:
    from click.shell_completion import CompletionItem

    class ParamTypeBase(Protocol):
        """Typed stand-in for `click.ParamType` while type checking."""

        name: str

else:
    ParamTypeBase = click.ParamType  # type: ignore[assignment]

E = TypeVar("E", bound=Enum)


class KeyedChoice(ParamTypeBase, Generic[E]):
    """Click type converting a token to a member of ``enum_cls``.

    Args:
        enum_cls (type[E]): Target enum. A `KeyedStrEnum` subclass is matched
            through its own ``parse``; any other enum by value, case-folded.
    """

    def __init__(self, enum_cls: type[E]) -> None:
        self.enum_cls = enum_cls
        self.name = enum_cls.__name__.lower()
        self.choices: tuple[str, ...] = tuple(str(m.value) for m in enum_cls)

    def get_metavar(self, param: click.Parameter, ctx: click.Context | None = None) -> str:
        """Show the accepted keys, e.g. ``[audio|video|...]``."""
        return "[" + "|".join(self.choices) + "]"

    def _lookup(self, token: str) -> E | None:
        if issubclass(self.enum_cls, KeyedStrEnum):
            return self.enum_cls.parse(token)  # type: ignore[return-value]
        wanted = normalize_token(token)
        for member in self.enum_cls:
            if normalize_token(str(member.value)) == wanted:
                return member
        return None

    def convert(
        self,
        value: Any,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> E:
        """Return the member named by ``value`` or fail with the accepted keys."""
        if isinstance(value, self.enum_cls):
            return value
        member = self._lookup(str(value))
        if member is None:
            raise click.BadParameter(
                f"Invalid value '{value}'. Must be one of: {', '.join(self.choices)}",
                param=param,
                ctx=ctx,
            )
        return member

    def shell_complete(
        self,
        ctx: click.Context,
        param: click.Parameter,
        incomplete: str,
    ) -> list[CompletionItem]:
        """Complete on the member keys.

        Bash: `eval "$(_XTYPE_COMPLETE=bash_source xtype)"`
        """
        from click.shell_completion import CompletionItem

        prefix = incomplete.lower()
        return [CompletionItem(c) for c in self.choices if c.startswith(prefix)]
