"""Co-author directory accessor with role-based email masking."""

from __future__ import annotations

from dataclasses import dataclass, replace

from PaperPortal.core.errors import FetchError
from PaperPortal.core.models import MASKED_EMAIL, CoAuthor
from PaperPortal.core.notify import Notifier
from PaperPortal.storage.coauthors import CoAuthorStore


@dataclass(slots=True)
class CoAuthorDirectory:
    """List active co-authors; emails are visible to admins only.

    Masking happens here and nowhere else, so callers never see a real
    address unless ``caller_is_admin`` is true.
    """

    store: CoAuthorStore
    notifier: Notifier

    def list(self, caller_is_admin: bool) -> list[CoAuthor]:
        """Return active entries ordered by full name.

        An empty list is returned (with a notification) when the directory
        cannot be read.
        """
        try:
            entries = self.store.list_active()
        except FetchError as error:
            self.notifier.failure("Failed to load co-authors", str(error), error=FetchError)
            return []
        if caller_is_admin:
            return entries
        return [replace(entry, email=MASKED_EMAIL) for entry in entries]
