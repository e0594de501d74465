"""Google Scholar import: fetch, stage and commit publications."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from PaperPortal.core.errors import AuthenticationRequired, PortalError
from PaperPortal.core.models import PaperDraft, ScholarAuthor, ScholarPublication
from PaperPortal.sources.scholar.client import ScholarApiClient
from PaperPortal.sources.scholar.parser import parse_articles, parse_author
from PaperPortal.storage.papers import PaperStore
from PaperPortal.utils.log import log

PROFILE_URL_TEMPLATE = "https://scholar.google.com/citations?user={author_id}"
NO_RESULTS_MESSAGE = "No publications found. The profile may be private or the ID may be incorrect."


@dataclass(frozen=True, slots=True)
class ScholarFetchResult:
    """Successful provider response, possibly with zero publications."""

    author_id: str
    author: ScholarAuthor
    publications: Sequence[ScholarPublication] = field(default_factory=tuple)
    profile_url: str = ""
    message: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.publications


@dataclass(slots=True)
class ScholarImportService:
    """Fetch an author's publications and import selected ones as drafts.

    Imports are written straight to the paper store, one record at a time,
    without the create-path notifications or co-author resolution.
    """

    client: ScholarApiClient
    store: PaperStore

    def fetch_publications(self, author_id: str) -> ScholarFetchResult:
        """Fetch and normalize an author's publications.

        Raises:
            ValueError: If ``author_id`` is blank.
            ImportProviderError: If the provider call fails.
        """
        author_id = author_id.strip()
        if not author_id:
            raise ValueError("Scholar ID is required")

        payload = self.client.fetch_author(author_id)
        author = parse_author(payload)
        publications = tuple(parse_articles(payload))
        if publications:
            message = f"Found {len(publications)} publications"
        else:
            message = NO_RESULTS_MESSAGE
        log.info("Found %d publications for %s", len(publications), author.name or author_id)
        return ScholarFetchResult(
            author_id=author_id,
            author=author,
            publications=publications,
            profile_url=PROFILE_URL_TEMPLATE.format(author_id=author_id),
            message=message,
        )

    def commit_import(self, drafts: Sequence[PaperDraft], identity: str | None) -> int:
        """Insert staged drafts one by one for ``identity``.

        A failing record is logged and skipped; earlier inserts are kept.

        Returns:
            Number of records actually persisted.

        Raises:
            AuthenticationRequired: If ``identity`` is missing.
        """
        if not identity:
            raise AuthenticationRequired("Please log in to import publications.")

        committed = 0
        for draft in drafts:
            try:
                self.store.insert(identity, draft)
            except PortalError as error:
                log.warning("Import insert failed for %r: %s", draft.title, error)
                continue
            committed += 1
        log.info("Imported %d/%d publications as drafts", committed, len(drafts))
        return committed

    def close(self) -> None:
        self.client.close()


def stage_for_import(
    selected_indices: Iterable[int],
    publications: Sequence[ScholarPublication],
) -> list[PaperDraft]:
    """Turn selected publications into draft papers.

    Indices are applied in the given order; out-of-range indices and
    duplicates are skipped.
    """
    drafts: list[PaperDraft] = []
    seen: set[int] = set()
    for index in selected_indices:
        if index in seen or not 0 <= index < len(publications):
            continue
        seen.add(index)
        pub = publications[index]
        drafts.append(
            PaperDraft(
                title=pub.title,
                authors=split_authors(pub.authors),
                publication_year=parse_year(pub.year),
                source_url=pub.link or None,
                status="draft",
            )
        )
    return drafts


def split_authors(authors: str) -> tuple[str, ...]:
    """Split a comma-joined author string into trimmed names."""
    if not authors:
        return ()
    return tuple(name.strip() for name in authors.split(",") if name.strip())


def parse_year(year: str) -> int | None:
    """Parse a year string; None when it is not an integer."""
    try:
        return int(year.strip())
    except (AttributeError, ValueError):
        return None
