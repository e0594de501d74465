"""Relational storage for paper records."""

from __future__ import annotations

import json
import sqlite3
import uuid
from dataclasses import fields
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Any, Sequence

from PaperPortal.core.errors import FetchError, PersistError
from PaperPortal.core.models import Paper, PaperDraft
from PaperPortal.utils.log import log

if TYPE_CHECKING:
    from PaperPortal.storage.db import DatabaseManager

_COLUMNS = (
    "id, owner, title, paper_number, collaborators, co_author_ids, upload_date, "
    "publish_date, status, keywords, pdf_url, department, authors, publication_year, "
    "source_url, doi, created_at"
)


class PaperStore:
    """SQLite-backed store for the ``papers`` table.

    List-valued fields are stored as JSON text. Co-author resolution is not
    done here; returned papers carry empty ``co_authors``.
    """

    def __init__(self, db_manager: DatabaseManager):
        """Initialize paper store.

        Args:
            db_manager: Shared database manager instance.
        """
        log.debug("Initializing PaperStore")
        self.conn = db_manager.get_connection()

    def insert(self, owner: str, draft: PaperDraft) -> Paper:
        """Insert a new paper owned by ``owner``.

        Args:
            owner: Identity of the creator.
            draft: Paper fields, stored verbatim.

        Returns:
            The persisted paper.

        Raises:
            PersistError: If the insert is rejected by the database.
        """
        paper_id = uuid.uuid4().hex
        created_at = datetime.now(timezone.utc)
        now = _iso(created_at)
        try:
            self.conn.execute(
                f"INSERT INTO papers ({_COLUMNS}, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (paper_id, owner, *_draft_values(draft), now, now),
            )
            self.conn.commit()
        except sqlite3.Error as error:
            self.conn.rollback()
            raise PersistError(str(error)) from error

        log.debug("Inserted paper %s for owner %s", paper_id, owner)
        # Built from the committed values.
        values = {f.name: getattr(draft, f.name) for f in fields(draft)}
        return Paper(id=paper_id, owner=owner, created_at=created_at, **values)

    def replace(self, paper_id: str, draft: PaperDraft) -> Paper:
        """Overwrite every caller-editable field of an existing paper.

        ``owner``, ``id`` and ``created_at`` are never changed.

        Raises:
            PersistError: If the paper does not exist or the update fails.
            FetchError: If the updated row cannot be read back.
        """
        try:
            cursor = self.conn.execute(
                """
                UPDATE papers SET
                    title = ?, paper_number = ?, collaborators = ?, co_author_ids = ?,
                    upload_date = ?, publish_date = ?, status = ?, keywords = ?,
                    pdf_url = ?, department = ?, authors = ?, publication_year = ?,
                    source_url = ?, doi = ?, updated_at = ?
                WHERE id = ?
                """,
                (*_draft_values(draft), _now_iso(), paper_id),
            )
            self.conn.commit()
        except sqlite3.Error as error:
            self.conn.rollback()
            raise PersistError(str(error)) from error

        if cursor.rowcount == 0:
            raise PersistError(f"Paper {paper_id} not found")
        paper = self.get(paper_id)
        if paper is None:
            raise PersistError(f"Paper {paper_id} missing after update")
        return paper

    def get(self, paper_id: str) -> Paper | None:
        """Return one paper by id, or None.

        Raises:
            FetchError: If the query fails or the stored row is malformed.
        """
        try:
            row = self.conn.execute(f"SELECT {_COLUMNS} FROM papers WHERE id = ?", (paper_id,)).fetchone()
        except sqlite3.Error as error:
            raise FetchError(str(error)) from error
        if not row:
            return None
        try:
            return row_to_paper(row)
        except (TypeError, ValueError) as error:
            raise FetchError(f"Paper {paper_id} is malformed: {error}") from error

    def list_visible(self, identity: str) -> list[Paper]:
        """Return papers owned by ``identity`` or listing it as co-author.

        Newest first by creation time.

        Raises:
            FetchError: If the query fails.
        """
        try:
            cursor = self.conn.execute(
                f"""
                SELECT {_COLUMNS} FROM papers AS p
                WHERE p.owner = ?
                   OR EXISTS (SELECT 1 FROM json_each(p.co_author_ids) WHERE json_each.value = ?)
                ORDER BY p.created_at DESC, p.rowid DESC
                """,
                (identity, identity),
            )
            rows = cursor.fetchall()
        except sqlite3.Error as error:
            raise FetchError(str(error)) from error
        return _map_rows(rows)

    def list_all(self) -> list[Paper]:
        """Return every paper, newest first (admin reporting).

        Raises:
            FetchError: If the query fails.
        """
        try:
            rows = self.conn.execute(
                f"SELECT {_COLUMNS} FROM papers ORDER BY created_at DESC, rowid DESC"
            ).fetchall()
        except sqlite3.Error as error:
            raise FetchError(str(error)) from error
        return _map_rows(rows)


def _map_rows(rows: Sequence[sqlite3.Row]) -> list[Paper]:
    """Map rows to papers, skipping rows that cannot be decoded."""
    papers: list[Paper] = []
    for row in rows:
        try:
            papers.append(row_to_paper(row))
        except (TypeError, ValueError) as error:
            log.warning("Skipping malformed paper row %s: %s", row["id"], error)
    return papers


def row_to_paper(row: sqlite3.Row) -> Paper:
    """Map a ``papers`` row to a Paper."""
    return Paper(
        id=row["id"],
        owner=row["owner"],
        title=row["title"],
        paper_number=row["paper_number"] or "",
        collaborators=_load_list(row["collaborators"]),
        co_author_ids=_load_list(row["co_author_ids"]),
        upload_date=date.fromisoformat(row["upload_date"]),
        publish_date=date.fromisoformat(row["publish_date"]) if row["publish_date"] else None,
        status=row["status"],
        keywords=_load_list(row["keywords"]),
        pdf_url=row["pdf_url"],
        department=row["department"],
        authors=_load_list(row["authors"]),
        publication_year=row["publication_year"],
        source_url=row["source_url"],
        doi=row["doi"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def _draft_values(draft: PaperDraft) -> tuple[Any, ...]:
    """Column values of a draft in the order used by insert and replace."""
    return (
        draft.title,
        draft.paper_number,
        _dump_list(draft.collaborators),
        _dump_list(draft.co_author_ids),
        draft.upload_date.isoformat(),
        draft.publish_date.isoformat() if draft.publish_date else None,
        draft.status,
        _dump_list(draft.keywords),
        draft.pdf_url,
        draft.department,
        _dump_list(draft.authors),
        draft.publication_year,
        draft.source_url,
        draft.doi,
    )


def _dump_list(values: Sequence[str]) -> str:
    return json.dumps(list(values), ensure_ascii=False)


def _load_list(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    data = json.loads(raw)
    return tuple(str(item) for item in data) if isinstance(data, list) else ()


def _iso(value: datetime) -> str:
    return value.isoformat(timespec="microseconds")


def _now_iso() -> str:
    return _iso(datetime.now(timezone.utc))
