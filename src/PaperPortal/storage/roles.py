"""Read access to the role side-table."""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING

from PaperPortal.core.errors import FetchError

if TYPE_CHECKING:
    from PaperPortal.storage.db import DatabaseManager


class RoleStore:
    """SQLite-backed reader for ``user_roles``."""

    def __init__(self, db_manager: DatabaseManager):
        self.conn = db_manager.get_connection()

    def get_role(self, identity: str) -> str | None:
        """Return the role stored for ``identity``, or None without a row.

        Raises:
            FetchError: If the query fails.
        """
        try:
            row = self.conn.execute("SELECT role FROM user_roles WHERE user_id = ?", (identity,)).fetchone()
        except sqlite3.Error as error:
            raise FetchError(str(error)) from error
        return row["role"] if row else None
