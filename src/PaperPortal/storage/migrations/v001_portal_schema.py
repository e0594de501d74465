"""Migration v001: papers, co-author directory and role side-table."""

from __future__ import annotations

from PaperPortal.storage.migration import Migration

MIGRATION = Migration(
    version=1,
    description="Initial schema: papers, co_authors, user_roles",
    sql="""
        CREATE TABLE IF NOT EXISTS co_authors (
          id TEXT PRIMARY KEY,
          full_name TEXT NOT NULL,
          email TEXT NOT NULL,
          department TEXT CHECK (
            department IS NULL
            OR department IN ('csed', 'eced', 'mced', 'eid', 'med', 'btd', 'ees', 'ced')
          ),
          is_active INTEGER NOT NULL DEFAULT 1,
          created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
        );

        CREATE INDEX IF NOT EXISTS idx_co_authors_name
          ON co_authors(full_name);

        CREATE TABLE IF NOT EXISTS papers (
          id TEXT PRIMARY KEY,
          owner TEXT NOT NULL CHECK (owner <> ''),
          title TEXT NOT NULL CHECK (title <> ''),
          paper_number TEXT NOT NULL DEFAULT '',
          collaborators TEXT NOT NULL DEFAULT '[]',
          co_author_ids TEXT NOT NULL DEFAULT '[]',
          upload_date TEXT NOT NULL,
          publish_date TEXT,
          status TEXT NOT NULL CHECK (status IN ('draft', 'in-review', 'published')),
          keywords TEXT NOT NULL DEFAULT '[]',
          pdf_url TEXT,
          department TEXT CHECK (
            department IS NULL
            OR department IN ('csed', 'eced', 'mced', 'eid', 'med', 'btd', 'ees', 'ced')
          ),
          authors TEXT NOT NULL DEFAULT '[]',
          publication_year INTEGER,
          source_url TEXT,
          doi TEXT,
          created_at TEXT NOT NULL,
          updated_at TEXT NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_papers_owner
          ON papers(owner);

        CREATE INDEX IF NOT EXISTS idx_papers_created
          ON papers(created_at DESC);

        CREATE TABLE IF NOT EXISTS user_roles (
          id INTEGER PRIMARY KEY AUTOINCREMENT,
          user_id TEXT NOT NULL UNIQUE,
          role TEXT NOT NULL CHECK (role IN ('admin', 'teacher'))
        )
    """,
)
