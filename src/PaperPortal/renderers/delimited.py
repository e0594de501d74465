"""Delimited-text (CSV) export of papers.

Fixed eight-column layout with a header row. Every field is double-quoted;
embedded double quotes are doubled (RFC 4180), so the output round-trips
through any CSV reader.
"""

from __future__ import annotations

import csv
import io
from typing import Final, Iterable

from PaperPortal.core.models import Paper

LIST_SEPARATOR: Final[str] = "; "

HEADER: Final[tuple[str, ...]] = (
    "Title",
    "Department",
    "Status",
    "Collaborators",
    "Keywords",
    "Upload Date",
    "Publish Date",
    "DOI",
)


def paper_row(paper: Paper) -> tuple[str, ...]:
    """Return the eight export fields of a paper; missing values are empty."""
    return (
        paper.title,
        paper.department or "",
        paper.status,
        LIST_SEPARATOR.join(paper.collaborators),
        LIST_SEPARATOR.join(paper.keywords),
        paper.upload_date.isoformat(),
        paper.publish_date.isoformat() if paper.publish_date else "",
        paper.doi or "",
    )


def export_delimited(papers: Iterable[Paper]) -> bytes:
    """Serialize papers to UTF-8 CSV bytes.

    The header row is always written, even for no papers.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(HEADER)
    for paper in papers:
        writer.writerow(paper_row(paper))
    return buffer.getvalue().encode("utf-8")
