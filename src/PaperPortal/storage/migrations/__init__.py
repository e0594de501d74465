"""Versioned migration files for PaperPortal's SQLite schema.

Each module in this package must expose a single ``MIGRATION`` constant of
type :class:`~PaperPortal.storage.migration.Migration`. Modules are
discovered and sorted by :func:`~PaperPortal.storage.migration.load_migrations`;
file names follow the ``vNNN_<description>.py`` convention.
"""
