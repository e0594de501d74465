"""Tests for the SQLite paper, co-author, role and profile stores."""

from __future__ import annotations

import sys
import tempfile
import unittest
from datetime import date
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from PaperPortal.core.errors import PersistError
from PaperPortal.core.models import PaperDraft
from PaperPortal.storage import CoAuthorStore, DatabaseManager, PaperStore, ProfileStore, RoleStore


class _StoreTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        self.manager = DatabaseManager(Path(self._tmpdir.name) / "portal.db")
        self.conn = self.manager.get_connection()

    def tearDown(self) -> None:
        self.manager.close()
        self._tmpdir.cleanup()


class TestPaperStore(_StoreTestCase):
    def test_insert_round_trips_fields(self) -> None:
        store = PaperStore(self.manager)
        draft = PaperDraft(
            title="Graph Neural Networks",
            paper_number="CS-042",
            collaborators=["Dr. Rao", "Prof. Sen"],
            co_author_ids=["ca1"],
            upload_date=date(2024, 3, 1),
            publish_date=date(2024, 6, 15),
            status="published",
            keywords=["gnn", "graphs"],
            department="csed",
            doi="10.1000/xyz",
        )

        paper = store.insert("teacher-1", draft)

        self.assertEqual(len(paper.id), 32)
        self.assertEqual(paper.owner, "teacher-1")
        self.assertEqual(paper.collaborators, ("Dr. Rao", "Prof. Sen"))
        self.assertEqual(paper.keywords, ("gnn", "graphs"))
        self.assertEqual(paper.publish_date, date(2024, 6, 15))
        self.assertEqual(paper.doi, "10.1000/xyz")
        self.assertEqual(paper.co_authors, ())
        self.assertIsNotNone(paper.created_at)
        self.assertEqual(store.get(paper.id), paper)

    def test_list_skips_malformed_rows(self) -> None:
        store = PaperStore(self.manager)
        good = store.insert("owner-a", PaperDraft(title="Good"))
        bad = store.insert("owner-a", PaperDraft(title="Bad"))
        self.conn.execute("UPDATE papers SET keywords = 'not json' WHERE id = ?", (bad.id,))
        self.conn.execute("UPDATE papers SET created_at = 'yesterday' WHERE id = ?", (good.id,))
        store.insert("owner-a", PaperDraft(title="Fine"))
        self.conn.commit()

        with self.assertLogs("PaperPortal", level="WARNING") as captured:
            titles = [p.title for p in store.list_all()]

        self.assertEqual(titles, ["Fine"])
        self.assertEqual(len(captured.records), 2)

    def test_list_visible_owner_or_co_author_newest_first(self) -> None:
        store = PaperStore(self.manager)
        first = store.insert("owner-a", PaperDraft(title="First"))
        shared = store.insert("owner-b", PaperDraft(title="Shared", co_author_ids=["owner-a"]))
        store.insert("owner-b", PaperDraft(title="Private"))

        visible = store.list_visible("owner-a")

        self.assertEqual([p.id for p in visible], [shared.id, first.id])
        self.assertEqual(len(store.list_all()), 3)

    def test_co_author_membership_is_exact(self) -> None:
        store = PaperStore(self.manager)
        store.insert("owner-b", PaperDraft(title="Shared", co_author_ids=["owner-ab"]))
        self.assertEqual(store.list_visible("owner-a"), [])

    def test_replace_keeps_owner_and_id(self) -> None:
        store = PaperStore(self.manager)
        paper = store.insert("owner-a", PaperDraft(title="Old", keywords=["x"]))

        updated = store.replace(paper.id, PaperDraft(title="New", status="in-review"))

        self.assertEqual(updated.id, paper.id)
        self.assertEqual(updated.owner, "owner-a")
        self.assertEqual(updated.title, "New")
        self.assertEqual(updated.keywords, ())
        self.assertEqual(updated.created_at, paper.created_at)

    def test_replace_unknown_paper_raises(self) -> None:
        with self.assertRaises(PersistError):
            PaperStore(self.manager).replace("missing", PaperDraft(title="X"))

    def test_insert_empty_title_rejected(self) -> None:
        with self.assertRaises(PersistError):
            PaperStore(self.manager).insert("owner-a", PaperDraft(title=""))


class TestDirectoryStores(_StoreTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.conn.executemany(
            "INSERT INTO co_authors (id, full_name, email, department, is_active) VALUES (?, ?, ?, ?, ?)",
            [
                ("ca2", "Zoya Khan", "zoya@example.edu", "eced", 1),
                ("ca1", "Arjun Mehta", "arjun@example.edu", "csed", 1),
                ("ca3", "Retired Person", "old@example.edu", None, 0),
            ],
        )
        self.conn.execute("INSERT INTO user_roles (user_id, role) VALUES ('boss', 'admin')")
        self.conn.commit()

    def test_list_active_sorted_by_name(self) -> None:
        entries = CoAuthorStore(self.manager).list_active()
        self.assertEqual([e.id for e in entries], ["ca1", "ca2"])
        self.assertTrue(all(e.is_active for e in entries))

    def test_resolve_drops_unknown_ids(self) -> None:
        refs = CoAuthorStore(self.manager).resolve(["ca1", "ghost", "ca3"])
        self.assertEqual(set(refs), {"ca1", "ca3"})
        self.assertEqual(refs["ca1"].full_name, "Arjun Mehta")
        self.assertEqual(CoAuthorStore(self.manager).resolve([]), {})

    def test_role_lookup(self) -> None:
        store = RoleStore(self.manager)
        self.assertEqual(store.get_role("boss"), "admin")
        self.assertIsNone(store.get_role("nobody"))

    def test_profile_scholar_id_upsert(self) -> None:
        store = ProfileStore(self.manager)
        self.assertIsNone(store.get_scholar_id("u1"))
        store.save_scholar_id("u1", "AAAA")
        store.save_scholar_id("u1", "BBBB")
        self.assertEqual(store.get_scholar_id("u1"), "BBBB")


if __name__ == "__main__":
    unittest.main()
