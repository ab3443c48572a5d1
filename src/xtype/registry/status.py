# topmark:header:start
#
#   project      : xType
#   file         : status.py
#   file_relpath : src/xtype/registry/status.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Single-slot, self-expiring status messages ("Refresh complete", ...).

A message stays visible for a fixed window after `StatusChannel.publish`. A
new publish replaces the pending message and restarts the window. Expiry is
evaluated lazily against a monotonic clock when the slot is read, so no timer
thread is involved and the channel can be driven by a fake clock in tests.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Callable

from xtype.config.logging import XtypeLogger, get_logger
from xtype.constants import DEFAULT_STATUS_SECONDS

if TYPE_CHECKING:
    from collections.abc import Iterable

logger: XtypeLogger = get_logger(__name__)

StatusListener = Callable[[str], None]


class StatusChannel:
    """Transient user-facing status slot.

    Args:
        visibility_seconds (float): How long a message stays visible.
        clock (Callable[[], float]): Monotonic time source.
        listeners (Iterable[StatusListener]): Callables notified on every publish.
    """

    def __init__(
        self,
        *,
        visibility_seconds: float = DEFAULT_STATUS_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        listeners: Iterable[StatusListener] = (),
    ) -> None:
        if visibility_seconds <= 0:
            raise ValueError("visibility_seconds must be positive")
        self.visibility_seconds = visibility_seconds
        self._clock = clock
        self._listeners: list[StatusListener] = list(listeners)
        self._message: str | None = None
        self._expires_at: float = 0.0

    def subscribe(self, listener: StatusListener) -> None:
        """Register a callable invoked with each published message."""
        self._listeners.append(listener)

    def publish(self, message: str) -> None:
        """Show ``message``, replacing any visible one, for the visibility window."""
        self._message = message
        self._expires_at = self._clock() + self.visibility_seconds
        logger.info("%s", message)
        for listener in self._listeners:
            listener(message)

    @property
    def message(self) -> str | None:
        """The visible message, or ``None`` once its window has elapsed."""
        if self._message is None or self._clock() >= self._expires_at:
            return None
        return self._message

    @property
    def last_message(self) -> str | None:
        """The most recent message, ignoring expiry (``None`` after `clear`)."""
        return self._message

    def clear(self) -> None:
        """Drop the visible message immediately."""
        self._message = None
