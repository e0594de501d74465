from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Final, Optional

ALL: Final[str] = "all"

CONTENT_TYPES: Final[tuple[str, ...]] = (ALL, "pdf", "metadata")


@dataclass(frozen=True, slots=True)
class FilterSpec:
    """Catalog browse/search filter.

    Every field left empty (or ``"all"``) matches every paper.

    Attributes:
        query: Free text matched against title, keywords, collaborators and
            resolved co-author names (case-insensitive).
        status: ``"all"`` or one paper status.
        department: ``"all"`` or one department code.
        collaborator: Substring of an external collaborator name.
        co_author: Co-author directory id; empty or ``"all"`` matches all.
        upload_from: Inclusive lower bound on upload date.
        upload_to: Inclusive upper bound on upload date.
        publish_from: Inclusive lower bound on publish date.
        publish_to: Inclusive upper bound on publish date. Papers without a
            publish date never satisfy a bounded publish-date range.
    """

    query: str = ""
    status: str = ALL
    department: str = ALL
    collaborator: str = ""
    co_author: str = ""
    upload_from: Optional[date] = None
    upload_to: Optional[date] = None
    publish_from: Optional[date] = None
    publish_to: Optional[date] = None


@dataclass(frozen=True, slots=True)
class ReportFilterSpec:
    """Admin report filter.

    Attributes:
        department: ``"all"`` or one department code.
        status: ``"all"`` or one paper status.
        title: Case-insensitive title substring.
        upload_from: Inclusive lower bound on upload date.
        upload_to: Inclusive upper bound on upload date.
        content_type: ``"all"``, ``"pdf"`` (has a PDF reference) or
            ``"metadata"`` (metadata only, no PDF).
    """

    department: str = ALL
    status: str = ALL
    title: str = ""
    upload_from: Optional[date] = None
    upload_to: Optional[date] = None
    content_type: str = ALL

    def __post_init__(self) -> None:
        if self.content_type not in CONTENT_TYPES:
            raise ValueError(f"content_type must be one of {list(CONTENT_TYPES)}")
