from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import Final, Mapping, Optional, Sequence

PAPER_STATUSES: Final[tuple[str, ...]] = ("draft", "in-review", "published")

DEPARTMENTS: Final[Mapping[str, str]] = MappingProxyType(
    {
        "csed": "Computer Science & Engineering",
        "eced": "Electronics & Communication Engineering",
        "mced": "Mechanical Engineering",
        "eid": "Electrical & Instrumentation Engineering",
        "med": "Metallurgical Engineering",
        "btd": "Biotechnology",
        "ees": "Energy & Environmental Sciences",
        "ced": "Civil Engineering",
    }
)

ROLES: Final[tuple[str, ...]] = ("admin", "teacher", "none")

# Shown to non-admin viewers in place of a co-author's real address.
MASKED_EMAIL: Final[str] = "***@***.***"


def check_status(status: str) -> str:
    """Return ``status`` if it is a known paper status.

    Raises:
        ValueError: If status is not one of PAPER_STATUSES.
    """
    if status not in PAPER_STATUSES:
        raise ValueError(f"Unknown paper status: {status!r} (expected one of {list(PAPER_STATUSES)})")
    return status


def check_department(department: str | None) -> str | None:
    """Return ``department`` if it is None or a known department code.

    Raises:
        ValueError: If department is not one of DEPARTMENTS.
    """
    if department is not None and department not in DEPARTMENTS:
        raise ValueError(f"Unknown department: {department!r} (expected one of {sorted(DEPARTMENTS)})")
    return department


@dataclass(frozen=True, slots=True)
class CoAuthorRef:
    """Resolved co-author attachment on a paper."""

    id: str
    full_name: str
    department: Optional[str] = None


@dataclass(frozen=True, slots=True)
class CoAuthor:
    """Directory entry for an internal person eligible for attribution.

    Attributes:
        id: Directory identifier.
        full_name: Display name.
        email: Contact address, or MASKED_EMAIL for non-admin viewers.
        department: Department code.
        is_active: Only active entries are offered for selection.
    """

    id: str
    full_name: str
    email: str
    department: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class PaperDraft:
    """Caller-supplied fields of a paper, used for create and full update.

    Imported records also carry ``authors``, ``publication_year`` and
    ``source_url`` (the provider link, not a DOI).
    """

    title: str
    paper_number: str = ""
    collaborators: Sequence[str] = ()
    co_author_ids: Sequence[str] = ()
    upload_date: date = field(default_factory=date.today)
    publish_date: Optional[date] = None
    status: str = "draft"
    keywords: Sequence[str] = ()
    pdf_url: Optional[str] = None
    department: Optional[str] = None
    authors: Sequence[str] = ()
    publication_year: Optional[int] = None
    source_url: Optional[str] = None
    doi: Optional[str] = None

    def __post_init__(self) -> None:
        check_status(self.status)
        check_department(self.department)
        for name in ("collaborators", "co_author_ids", "keywords", "authors"):
            object.__setattr__(self, name, tuple(getattr(self, name)))


@dataclass(frozen=True, slots=True)
class Paper:
    """Persisted research-paper record.

    Attributes:
        id: Opaque system-assigned identifier.
        owner: Identity of the creator, set once at creation.
        title: Paper title.
        paper_number: User-assigned number, not guaranteed unique.
        collaborators: External collaborator names, in entry order.
        co_author_ids: Internal co-author directory references.
        upload_date: Calendar date of upload.
        publish_date: Publication date if known.
        status: One of PAPER_STATUSES.
        keywords: Search keywords, in entry order.
        pdf_url: URL or storage path of the PDF.
        department: One of DEPARTMENTS, if set.
        co_authors: Directory records resolved from ``co_author_ids``.
        authors: Author list of imported records.
        publication_year: Publication year of imported records.
        source_url: External link an imported record came from.
        doi: Digital Object Identifier, when one is actually known.
        created_at: Insertion timestamp used for listing order.
    """

    id: str
    owner: str
    title: str
    paper_number: str = ""
    collaborators: Sequence[str] = ()
    co_author_ids: Sequence[str] = ()
    upload_date: date = field(default_factory=date.today)
    publish_date: Optional[date] = None
    status: str = "draft"
    keywords: Sequence[str] = ()
    pdf_url: Optional[str] = None
    department: Optional[str] = None
    co_authors: Sequence[CoAuthorRef] = ()
    authors: Sequence[str] = ()
    publication_year: Optional[int] = None
    source_url: Optional[str] = None
    doi: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        check_status(self.status)
        check_department(self.department)
        for name in ("collaborators", "co_author_ids", "keywords", "co_authors", "authors"):
            object.__setattr__(self, name, tuple(getattr(self, name)))


@dataclass(frozen=True, slots=True)
class UploadFile:
    """Binary payload handed to the object store."""

    name: str
    content: bytes
    content_type: str = "application/pdf"

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        """File extension without the dot, lowercased; empty if none."""
        _, dot, ext = self.name.rpartition(".")
        return ext.lower() if dot else ""


@dataclass(frozen=True, slots=True)
class ScholarAuthor:
    """Author profile returned by the citation provider."""

    name: Optional[str] = None
    affiliations: Optional[str] = None
    email: Optional[str] = None
    thumbnail: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ScholarPublication:
    """One normalized publication from the citation provider.

    Attributes:
        title: Publication title ("Untitled" when the provider omits it).
        authors: Comma-joined author string exactly as provided.
        year: Year text as provided (may be empty).
        citation_count: Citation count, 0 when unknown.
        link: Provider link to the publication, if any.
        venue: Journal/conference string, may be empty.
    """

    title: str
    authors: str = ""
    year: str = ""
    citation_count: int = 0
    link: Optional[str] = None
    venue: str = ""
