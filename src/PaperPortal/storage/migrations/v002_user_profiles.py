"""Migration v002: per-user profile with a linked Google Scholar ID."""

from __future__ import annotations

from PaperPortal.storage.migration import Migration

MIGRATION = Migration(
    version=2,
    description="Add user_profiles with google_scholar_id",
    sql="""
        CREATE TABLE IF NOT EXISTS user_profiles (
          user_id TEXT PRIMARY KEY,
          google_scholar_id TEXT,
          updated_at TEXT NOT NULL
        )
    """,
)
