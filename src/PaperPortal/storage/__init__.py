"""Storage layer for PaperPortal.

Relational storage (papers, co-author directory, roles, profiles) on a shared
SQLite connection, plus a directory-backed object store for uploads.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from PaperPortal.storage.coauthors import CoAuthorStore
from PaperPortal.storage.db import DatabaseManager
from PaperPortal.storage.files import FileStore
from PaperPortal.storage.migration import run_migrations
from PaperPortal.storage.papers import PaperStore
from PaperPortal.storage.profiles import ProfileStore
from PaperPortal.storage.roles import RoleStore
from PaperPortal.utils.log import log

if TYPE_CHECKING:
    from PaperPortal.config import AppConfig


def create_file_store(config: AppConfig) -> FileStore:
    """Create the object store from storage configuration."""
    return FileStore(
        Path(config.storage.files_dir),
        config.storage.public_base_url,
        max_bytes=config.storage.max_upload_bytes,
        allowed_content_types=config.storage.allowed_content_types,
    )


def open_database(config: AppConfig) -> DatabaseManager:
    """Open (and migrate) the configured database."""
    db_path = Path(config.storage.db_path)
    manager = DatabaseManager(db_path)
    log.debug("Database opened: %s", db_path)
    return manager


__all__ = [
    "CoAuthorStore",
    "DatabaseManager",
    "FileStore",
    "PaperStore",
    "ProfileStore",
    "RoleStore",
    "create_file_store",
    "open_database",
    "run_migrations",
]
