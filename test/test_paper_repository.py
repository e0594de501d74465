"""Tests for PaperRepository create/list/update/upload behavior."""

from __future__ import annotations

import sys
import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from PaperPortal.cli.commands import AddPaperCommand
from PaperPortal.core.errors import (
    AuthenticationRequired,
    AuthorizationError,
    FetchError,
    PersistError,
    UploadError,
)
from PaperPortal.core.models import PaperDraft, UploadFile
from PaperPortal.core.notify import Notifier
from PaperPortal.services.papers import PaperRepository
from PaperPortal.storage import CoAuthorStore, DatabaseManager, FileStore, PaperStore

_BASE_URL = "http://files.test/papers"


class _FailingPaperStore:
    def list_visible(self, identity: str):
        raise FetchError("connection reset")


class _RejectingPaperStore:
    def insert(self, owner: str, draft):
        raise PersistError("disk full")


class _CountingDirectory:
    def __init__(self, inner: CoAuthorStore) -> None:
        self.inner = inner
        self.calls: list[set[str]] = []

    def resolve(self, ids):
        self.calls.append(set(ids))
        return self.inner.resolve(ids)


class TestPaperRepository(unittest.TestCase):
    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        root = Path(self._tmpdir.name)
        self.manager = DatabaseManager(root / "portal.db")
        conn = self.manager.get_connection()
        conn.executemany(
            "INSERT INTO co_authors (id, full_name, email, department) VALUES (?, ?, ?, ?)",
            [("ca1", "Arjun Mehta", "arjun@example.edu", "csed"), ("ca2", "Zoya Khan", "zoya@example.edu", "eced")],
        )
        conn.commit()
        self.files_root = root / "files"
        self.notifier = Notifier()
        self.repo = self._make_repo()

    def tearDown(self) -> None:
        self.manager.close()
        self._tmpdir.cleanup()

    def _make_repo(self, **overrides) -> PaperRepository:
        fields = dict(
            store=PaperStore(self.manager),
            directory=CoAuthorStore(self.manager),
            files=FileStore(self.files_root, _BASE_URL, max_bytes=1024),
            notifier=self.notifier,
        )
        fields.update(overrides)
        return PaperRepository(**fields)

    def _paper_count(self) -> int:
        return self.manager.get_connection().execute("SELECT COUNT(*) FROM papers").fetchone()[0]

    def test_create_without_identity_is_rejected(self) -> None:
        result = self.repo.create(None, PaperDraft(title="Anonymous"))

        self.assertIsNone(result)
        notes = self.notifier.drain()
        self.assertEqual(len(notes), 1)
        self.assertTrue(notes[0].is_error)
        self.assertIs(notes[0].error, AuthenticationRequired)
        self.assertEqual(self._paper_count(), 0)

    def test_create_sets_owner_and_prepends(self) -> None:
        older = self.repo.create("t1", PaperDraft(title="Older"))
        newer = self.repo.create("t1", PaperDraft(title="Newer", co_author_ids=["ca1"]))

        self.assertEqual(newer.owner, "t1")
        self.assertEqual([p.id for p in self.repo.papers], [newer.id, older.id])
        self.assertEqual([ref.full_name for ref in newer.co_authors], ["Arjun Mehta"])
        titles = [note.title for note in self.notifier.drain()]
        self.assertEqual(titles, ["Paper uploaded", "Paper uploaded"])

    def test_list_visibility_and_order(self) -> None:
        own = self.repo.create("t1", PaperDraft(title="Own"))
        shared = self.repo.create("t2", PaperDraft(title="Shared", co_author_ids=["t1"]))
        self.repo.create("t2", PaperDraft(title="Hidden"))

        listed = self.repo.list("t1")

        self.assertEqual([p.id for p in listed], [shared.id, own.id])
        self.assertEqual(self.repo.list(None), [])

    def test_enrichment_drops_unknown_ids(self) -> None:
        self.repo.create("t1", PaperDraft(title="P", co_author_ids=["ca2", "ghost", "ca1"]))

        paper = self.repo.list("t1")[0]

        self.assertEqual(paper.co_author_ids, ("ca2", "ghost", "ca1"))
        self.assertEqual([ref.id for ref in paper.co_authors], ["ca2", "ca1"])

    def test_enrichment_uses_one_lookup_per_window(self) -> None:
        directory = _CountingDirectory(CoAuthorStore(self.manager))
        repo = self._make_repo(directory=directory, enrich_batch_size=2)
        store = PaperStore(self.manager)
        for idx in range(5):
            store.insert("t1", PaperDraft(title=f"P{idx}", co_author_ids=["ca1"]))

        papers = repo.list("t1")

        self.assertEqual(len(papers), 5)
        self.assertEqual(len(directory.calls), 3)
        self.assertTrue(all(p.co_authors for p in papers))

    def test_refresh_failure_keeps_previous_state(self) -> None:
        self.repo.create("t1", PaperDraft(title="Kept"))
        before = list(self.repo.papers)
        self.notifier.drain()
        self.repo.store = _FailingPaperStore()

        result = self.repo.refresh("t1")

        self.assertEqual(result, before)
        notes = self.notifier.drain()
        self.assertEqual([n.title for n in notes], ["Failed to load papers"])
        self.assertIs(notes[0].error, FetchError)

    def test_refresh_skips_malformed_row(self) -> None:
        good = self.repo.create("t1", PaperDraft(title="Good"))
        bad = self.repo.create("t1", PaperDraft(title="Bad"))
        conn = self.manager.get_connection()
        conn.execute("UPDATE papers SET keywords = 'not json' WHERE id = ?", (bad.id,))
        conn.commit()
        self.notifier.drain()

        result = self.repo.refresh("t1")

        self.assertEqual([p.id for p in result], [good.id])
        self.assertEqual(self.notifier.drain(), [])

    def test_get_of_malformed_row_raises_fetch_error(self) -> None:
        paper = self.repo.create("t1", PaperDraft(title="Dated"))
        conn = self.manager.get_connection()
        conn.execute("UPDATE papers SET upload_date = 'April' WHERE id = ?", (paper.id,))
        conn.commit()

        with self.assertRaises(FetchError):
            PaperStore(self.manager).get(paper.id)

    def test_update_by_other_teacher_is_denied(self) -> None:
        paper = self.repo.create("t1", PaperDraft(title="Mine"))
        self.notifier.drain()

        result = self.repo.update("t2", paper.id, PaperDraft(title="Hijacked"))

        self.assertIsNone(result)
        self.assertIs(self.notifier.drain()[0].error, AuthorizationError)
        self.assertEqual(PaperStore(self.manager).get(paper.id).title, "Mine")

    def test_update_by_admin_keeps_owner(self) -> None:
        paper = self.repo.create("t1", PaperDraft(title="Mine"))

        updated = self.repo.update("admin-1", paper.id, PaperDraft(title="Edited", status="published"), is_admin=True)

        self.assertEqual(updated.owner, "t1")
        self.assertEqual(updated.status, "published")
        self.assertEqual(self.repo.papers[0].title, "Edited")

    def test_upload_stores_under_identity(self) -> None:
        url = self.repo.upload_binary("t1", UploadFile("Paper.PDF", b"%PDF-1.7 data"))

        self.assertTrue(url.startswith(f"{_BASE_URL}/t1/"))
        self.assertTrue(url.endswith(".pdf"))
        stored = self.files_root / url[len(_BASE_URL) + 1:]
        self.assertEqual(stored.read_bytes(), b"%PDF-1.7 data")

    def test_upload_rejects_wrong_type_and_size(self) -> None:
        bad_type = UploadFile("notes.txt", b"hello", content_type="text/plain")
        too_big = UploadFile("big.pdf", b"x" * 2048)

        self.assertIsNone(self.repo.upload_binary("t1", bad_type))
        self.assertIsNone(self.repo.upload_binary("t1", too_big))
        self.assertIsNone(self.repo.upload_binary(None, UploadFile("a.pdf", b"x")))

        errors = [note.error for note in self.notifier.drain()]
        self.assertEqual(errors, [UploadError, UploadError, AuthenticationRequired])
        self.assertFalse(self.files_root.exists())

    def test_discard_binary_removes_stored_file(self) -> None:
        url = self.repo.upload_binary("t1", UploadFile("paper.pdf", b"%PDF"))
        stored = self.files_root / url[len(_BASE_URL) + 1:]

        self.repo.discard_binary(url)
        self.repo.discard_binary(url)

        self.assertFalse(stored.exists())

    def test_discard_binary_ignores_foreign_urls(self) -> None:
        outside = Path(self._tmpdir.name) / "portal.db"

        with self.assertLogs("PaperPortal", level="WARNING"):
            self.repo.discard_binary("http://elsewhere.test/t1/x.pdf")
        with self.assertLogs("PaperPortal", level="WARNING"):
            self.repo.discard_binary(f"{_BASE_URL}/../portal.db")

        self.assertTrue(outside.exists())

    def test_add_paper_removes_upload_when_create_fails(self) -> None:
        pdf = Path(self._tmpdir.name) / "paper.pdf"
        pdf.write_bytes(b"%PDF-1.7 data")
        repo = self._make_repo(store=_RejectingPaperStore())
        roles = MagicMock()
        roles.can_manage_papers.return_value = True
        ctx = SimpleNamespace(roles=roles, notifier=self.notifier, papers=repo)

        AddPaperCommand("t1", PaperDraft(title="Doomed"), pdf_path=pdf).execute(ctx)

        self.assertEqual(list((self.files_root / "t1").iterdir()), [])
        titles = [note.title for note in self.notifier.drain()]
        self.assertEqual(titles, ["File uploaded", "Upload failed"])


if __name__ == "__main__":
    unittest.main()
