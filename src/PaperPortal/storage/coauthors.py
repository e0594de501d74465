"""Read access to the co-author directory."""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING, Iterable

from PaperPortal.core.errors import FetchError
from PaperPortal.core.models import CoAuthor, CoAuthorRef
from PaperPortal.utils.log import log

if TYPE_CHECKING:
    from PaperPortal.storage.db import DatabaseManager


class CoAuthorStore:
    """SQLite-backed reader for the ``co_authors`` table.

    The directory is maintained outside the portal; this store never writes.
    """

    def __init__(self, db_manager: DatabaseManager):
        log.debug("Initializing CoAuthorStore")
        self.conn = db_manager.get_connection()

    def list_active(self) -> list[CoAuthor]:
        """Return active directory entries ordered by full name.

        Raises:
            FetchError: If the query fails.
        """
        try:
            rows = self.conn.execute(
                """
                SELECT id, full_name, email, department, is_active
                FROM co_authors
                WHERE is_active = 1
                ORDER BY full_name
                """
            ).fetchall()
        except sqlite3.Error as error:
            raise FetchError(str(error)) from error
        return [
            CoAuthor(
                id=row["id"],
                full_name=row["full_name"],
                email=row["email"],
                department=row["department"],
                is_active=bool(row["is_active"]),
            )
            for row in rows
        ]

    def resolve(self, ids: Iterable[str]) -> dict[str, CoAuthorRef]:
        """Look up ``{id, full_name, department}`` for the given ids.

        Unknown ids are absent from the result.

        Raises:
            FetchError: If the query fails.
        """
        unique_ids = sorted(set(ids))
        if not unique_ids:
            return {}
        placeholders = ",".join("?" for _ in unique_ids)
        try:
            rows = self.conn.execute(
                f"SELECT id, full_name, department FROM co_authors WHERE id IN ({placeholders})",
                unique_ids,
            ).fetchall()
        except sqlite3.Error as error:
            raise FetchError(str(error)) from error
        return {
            row["id"]: CoAuthorRef(id=row["id"], full_name=row["full_name"], department=row["department"])
            for row in rows
        }
