"""Paper repository: the view-facing accessor for paper records."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Sequence

from PaperPortal.core.errors import (
    AuthenticationRequired,
    AuthorizationError,
    FetchError,
    PersistError,
    UploadError,
)
from PaperPortal.core.models import Paper, PaperDraft, UploadFile
from PaperPortal.core.notify import Notifier
from PaperPortal.storage.coauthors import CoAuthorStore
from PaperPortal.storage.files import FileStore
from PaperPortal.storage.papers import PaperStore
from PaperPortal.utils.log import log


@dataclass(slots=True)
class PaperRepository:
    """Load, create and update papers for one view.

    ``papers`` is the view's in-memory collection. It is replaced by a
    successful ``refresh`` and grows at the front on ``create``; it is never
    shared between views.
    """

    store: PaperStore
    directory: CoAuthorStore
    files: FileStore
    notifier: Notifier
    enrich_batch_size: int = 20
    papers: list[Paper] = field(default_factory=list)

    def list(self, identity: str | None) -> list[Paper]:
        """Return papers visible to ``identity`` with co-authors attached.

        Raises:
            FetchError: If the paper store cannot be read.
        """
        if not identity:
            return []
        papers = self.store.list_visible(identity)
        log.debug("Loaded %d papers for %s", len(papers), identity)
        return self.attach_co_authors(papers)

    def list_all(self) -> list[Paper]:
        """Return the whole catalog with co-authors attached (admin reports).

        Raises:
            FetchError: If the paper store cannot be read.
        """
        return self.attach_co_authors(self.store.list_all())

    def refresh(self, identity: str | None) -> list[Paper]:
        """Reload the in-memory collection, keeping it on failure."""
        try:
            self.papers = self.list(identity)
        except FetchError as error:
            self.notifier.failure("Failed to load papers", str(error), error=FetchError)
        return self.papers

    def create(self, identity: str | None, draft: PaperDraft) -> Paper | None:
        """Persist a new paper owned by ``identity``.

        Returns:
            The new paper (also prepended to ``papers``), or None on failure.
        """
        if not identity:
            self.notifier.failure(
                "Authentication required",
                "Please log in to upload papers.",
                error=AuthenticationRequired,
            )
            return None

        try:
            paper = self.store.insert(identity, draft)
        except PersistError as error:
            self.notifier.failure("Upload failed", str(error), error=PersistError)
            return None

        paper = self.attach_co_authors([paper])[0]
        self.papers.insert(0, paper)
        self.notifier.success("Paper uploaded", "Your research paper has been successfully uploaded.")
        return paper

    def update(
        self,
        identity: str | None,
        paper_id: str,
        draft: PaperDraft,
        *,
        is_admin: bool = False,
    ) -> Paper | None:
        """Replace a paper's fields; only the owner or an admin may do so.

        Returns:
            The updated paper, or None on failure.
        """
        if not identity:
            self.notifier.failure(
                "Authentication required",
                "Please log in to edit papers.",
                error=AuthenticationRequired,
            )
            return None

        try:
            existing = self.store.get(paper_id)
        except FetchError as error:
            self.notifier.failure("Update failed", str(error), error=FetchError)
            return None
        if existing is None:
            self.notifier.failure("Update failed", f"Paper {paper_id} not found.", error=PersistError)
            return None
        if existing.owner != identity and not is_admin:
            self.notifier.failure(
                "Update not allowed",
                "Only the owner or an administrator can edit this paper.",
                error=AuthorizationError,
            )
            return None

        try:
            paper = self.store.replace(paper_id, draft)
        except (PersistError, FetchError) as error:
            self.notifier.failure("Update failed", str(error), error=type(error))
            return None

        paper = self.attach_co_authors([paper])[0]
        self.papers = [paper if p.id == paper.id else p for p in self.papers]
        self.notifier.success("Paper updated", "Your changes have been saved.")
        return paper

    def upload_binary(self, identity: str | None, file: UploadFile) -> str | None:
        """Store a file for ``identity`` and return its public URL."""
        try:
            url = self.files.save(identity, file)
        except AuthenticationRequired as error:
            self.notifier.failure("Authentication required", str(error), error=AuthenticationRequired)
            return None
        except UploadError as error:
            self.notifier.failure("Upload failed", str(error), error=UploadError)
            return None

        self.notifier.success("File uploaded", "Your PDF has been uploaded successfully.")
        return url

    def discard_binary(self, url: str) -> None:
        """Remove an uploaded file that no paper ended up referencing."""
        try:
            self.files.delete(url)
        except UploadError as error:
            log.warning("Orphaned upload %s left in storage: %s", url, error)
            return
        log.info("Removed unreferenced upload %s", url)

    def attach_co_authors(self, papers: Sequence[Paper]) -> list[Paper]:
        """Resolve ``co_author_ids`` into ``co_authors`` for each paper.

        Papers are resolved in windows of ``enrich_batch_size`` with one
        directory lookup per window. A failed lookup is logged and its papers
        keep empty attachments; ids missing from the directory are dropped.
        """
        out: list[Paper] = []
        size = max(1, self.enrich_batch_size)
        for start in range(0, len(papers), size):
            window = papers[start:start + size]
            wanted = {cid for paper in window for cid in paper.co_author_ids}
            refs = {}
            if wanted:
                try:
                    refs = self.directory.resolve(wanted)
                except FetchError as error:
                    log.warning("Co-author lookup failed for %d papers: %s", len(window), error)
            for paper in window:
                attached = tuple(refs[cid] for cid in paper.co_author_ids if cid in refs)
                out.append(replace(paper, co_authors=attached))
        return out
