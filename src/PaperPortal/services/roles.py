"""Role resolution for authenticated identities."""

from __future__ import annotations

from dataclasses import dataclass

from PaperPortal.core.errors import FetchError
from PaperPortal.core.models import ROLES
from PaperPortal.storage.roles import RoleStore
from PaperPortal.utils.log import log


@dataclass(slots=True)
class RoleResolver:
    """Derive admin / teacher / none from the role side-table.

    Identities without a row, and failed lookups, resolve to ``fallback``.
    Nothing is cached; every call reads the table.
    """

    store: RoleStore
    fallback: str = "teacher"

    def resolve(self, identity: str | None) -> str:
        if not identity:
            return "none"
        try:
            role = self.store.get_role(identity)
        except FetchError as error:
            log.error("Error fetching role for %s: %s", identity, error)
            return self.fallback
        if role is None or role not in ROLES:
            log.debug("No role row for %s, using %s", identity, self.fallback)
            return self.fallback
        return role

    def is_admin(self, identity: str | None) -> bool:
        return self.resolve(identity) == "admin"

    def can_manage_papers(self, identity: str | None) -> bool:
        """Teachers and admins may upload and import papers."""
        return self.resolve(identity) in ("admin", "teacher")
