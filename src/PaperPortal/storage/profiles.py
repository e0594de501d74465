"""Per-user profile settings (linked Google Scholar ID)."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from PaperPortal.core.errors import FetchError, PersistError
from PaperPortal.utils.log import log

if TYPE_CHECKING:
    from PaperPortal.storage.db import DatabaseManager


class ProfileStore:
    """SQLite-backed store for ``user_profiles``."""

    def __init__(self, db_manager: DatabaseManager):
        self.conn = db_manager.get_connection()

    def get_scholar_id(self, identity: str) -> str | None:
        """Return the saved Scholar author id, or None.

        Raises:
            FetchError: If the query fails.
        """
        try:
            row = self.conn.execute(
                "SELECT google_scholar_id FROM user_profiles WHERE user_id = ?", (identity,)
            ).fetchone()
        except sqlite3.Error as error:
            raise FetchError(str(error)) from error
        return row["google_scholar_id"] if row else None

    def save_scholar_id(self, identity: str, scholar_id: str) -> None:
        """Insert or update the Scholar author id for ``identity``.

        Raises:
            PersistError: If the write fails.
        """
        try:
            self.conn.execute(
                """
                INSERT INTO user_profiles (user_id, google_scholar_id, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    google_scholar_id = excluded.google_scholar_id,
                    updated_at = excluded.updated_at
                """,
                (identity, scholar_id, datetime.now(timezone.utc).isoformat()),
            )
            self.conn.commit()
        except sqlite3.Error as error:
            self.conn.rollback()
            raise PersistError(str(error)) from error
        log.debug("Saved scholar id for %s", identity)
