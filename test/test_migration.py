"""Tests for schema migration mechanism.

Covers:
  1. fresh database    - all tables created, schema_version written
  2. already at latest - second run executes no DDL
  3. new migration     - v3 applied to an existing DB, old data intact
  4. broken migration  - transaction rolled back, version unchanged
Plus: version-gap validation raises ValueError before anything runs.
"""

import sqlite3
import sys
import tempfile
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from PaperPortal.storage.migration import Migration, current_version, load_migrations, run_migrations

MIGRATIONS = load_migrations()
_LATEST_VERSION = max(m.version for m in MIGRATIONS)


def _connect(path: Path) -> sqlite3.Connection:
    return sqlite3.connect(str(path))


def _table_names(conn: sqlite3.Connection) -> set[str]:
    return {
        row[0]
        for row in conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table'"
        ).fetchall()
    }


def _insert_paper(conn: sqlite3.Connection, paper_id: str) -> None:
    conn.execute(
        """
        INSERT INTO papers (id, owner, title, upload_date, status, created_at, updated_at)
        VALUES (?, 'u1', 'Existing Paper', '2024-01-01', 'draft', '2024-01-01T00:00:00', '2024-01-01T00:00:00')
        """,
        (paper_id,),
    )
    conn.commit()


class TestDiscovery(unittest.TestCase):
    def test_migrations_are_consecutive_from_one(self):
        self.assertEqual([m.version for m in MIGRATIONS], list(range(1, len(MIGRATIONS) + 1)))


class TestFreshDatabase(unittest.TestCase):
    """First run on a database file that does not yet exist."""

    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self._conn = _connect(Path(self._tmpdir.name) / "portal.db")

    def tearDown(self):
        self._conn.close()
        self._tmpdir.cleanup()

    def test_schema_version_equals_latest(self):
        run_migrations(self._conn)
        self.assertEqual(current_version(self._conn), _LATEST_VERSION)

    def test_main_tables_created(self):
        run_migrations(self._conn)
        tables = _table_names(self._conn)
        for name in ("papers", "co_authors", "user_roles", "user_profiles", "schema_version"):
            with self.subTest(table=name):
                self.assertIn(name, tables)

    def test_status_check_constraint(self):
        run_migrations(self._conn)
        with self.assertRaises(sqlite3.IntegrityError):
            self._conn.execute(
                """
                INSERT INTO papers (id, owner, title, upload_date, status, created_at, updated_at)
                VALUES ('p1', 'u1', 'T', '2024-01-01', 'archived', 'x', 'x')
                """
            )


class TestAlreadyUpToDate(unittest.TestCase):
    """Second run after DB is already at the latest version."""

    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self._conn = _connect(Path(self._tmpdir.name) / "portal.db")
        run_migrations(self._conn)

    def tearDown(self):
        self._conn.close()
        self._tmpdir.cleanup()

    def test_version_unchanged_on_second_run(self):
        version_before = current_version(self._conn)
        run_migrations(self._conn)
        self.assertEqual(current_version(self._conn), version_before)

    def test_no_new_tables_on_second_run(self):
        tables_before = _table_names(self._conn)
        run_migrations(self._conn)
        self.assertEqual(_table_names(self._conn), tables_before)


class TestNewMigration(unittest.TestCase):
    """Simulated next migration applied to a database at the latest version."""

    _NEXT = Migration(
        version=_LATEST_VERSION + 1,
        description="Add abstract column to papers",
        sql="ALTER TABLE papers ADD COLUMN abstract TEXT;",
    )

    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self._conn = _connect(Path(self._tmpdir.name) / "portal.db")
        run_migrations(self._conn)
        _insert_paper(self._conn, "p-old")

    def tearDown(self):
        self._conn.close()
        self._tmpdir.cleanup()

    def test_version_advances(self):
        run_migrations(self._conn, MIGRATIONS + [self._NEXT])
        self.assertEqual(current_version(self._conn), self._NEXT.version)

    def test_new_column_exists_and_old_data_preserved(self):
        run_migrations(self._conn, MIGRATIONS + [self._NEXT])
        row = self._conn.execute("SELECT abstract FROM papers WHERE id = 'p-old'").fetchone()
        self.assertIsNotNone(row)
        self.assertIsNone(row[0])


class TestRollbackOnError(unittest.TestCase):
    """Bad migration SQL raises; version number must not change."""

    _BAD = Migration(
        version=_LATEST_VERSION + 1,
        description="Intentionally broken migration",
        sql="CREATE TABLE scratch (id INTEGER); THIS IS NOT VALID SQL;",
    )

    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self._conn = _connect(Path(self._tmpdir.name) / "portal.db")
        run_migrations(self._conn)

    def tearDown(self):
        self._conn.close()
        self._tmpdir.cleanup()

    def test_exception_raised(self):
        with self.assertRaises(sqlite3.Error):
            run_migrations(self._conn, MIGRATIONS + [self._BAD])

    def test_version_and_tables_unchanged_after_bad_migration(self):
        version_before = current_version(self._conn)
        with self.assertRaises(sqlite3.Error):
            run_migrations(self._conn, MIGRATIONS + [self._BAD])
        self.assertEqual(current_version(self._conn), version_before)
        self.assertNotIn("scratch", _table_names(self._conn))


class TestVersionContinuityValidation(unittest.TestCase):
    def test_gap_raises_value_error(self):
        gap = MIGRATIONS + [Migration(version=_LATEST_VERSION + 2, description="Gap", sql="SELECT 1;")]
        with tempfile.TemporaryDirectory() as tmpdir:
            conn = _connect(Path(tmpdir) / "portal.db")
            try:
                with self.assertRaises(ValueError):
                    run_migrations(conn, gap)
                self.assertNotIn("papers", _table_names(conn))
            finally:
                conn.close()


if __name__ == "__main__":
    unittest.main()
