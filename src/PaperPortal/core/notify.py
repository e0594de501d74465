"""Transient user-facing notifications.

Operations that recover locally from a failure report it here instead of
raising. A view (or the CLI) drains the notifier after each operation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from PaperPortal.core.errors import PortalError
from PaperPortal.utils.log import log


@dataclass(frozen=True, slots=True)
class Notification:
    """One transient notification.

    Attributes:
        title: Short headline.
        description: Detail text.
        variant: "default" or "destructive".
        error: Error class that caused a destructive notification.
    """

    title: str
    description: str = ""
    variant: str = "default"
    error: Optional[type[PortalError]] = None

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"


@dataclass(slots=True)
class Notifier:
    """Collect notifications in emission order and mirror them to the log."""

    items: list[Notification] = field(default_factory=list)

    def success(self, title: str, description: str = "") -> Notification:
        note = Notification(title=title, description=description)
        log.info("%s: %s", title, description)
        self.items.append(note)
        return note

    def failure(
        self,
        title: str,
        description: str = "",
        *,
        error: type[PortalError] | None = None,
    ) -> Notification:
        note = Notification(title=title, description=description, variant="destructive", error=error)
        log.warning("%s: %s", title, description)
        self.items.append(note)
        return note

    def drain(self) -> list[Notification]:
        """Return and clear pending notifications."""
        pending = list(self.items)
        self.items.clear()
        return pending
