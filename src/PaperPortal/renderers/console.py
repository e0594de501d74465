"""Console text renderers for CLI output."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from PaperPortal.core.models import DEPARTMENTS, CoAuthor, Paper, ScholarPublication
from PaperPortal.core.notify import Notification
from PaperPortal.services.reports import PaperStats


def _fmt_date(value: date | None) -> str:
    return value.isoformat() if value else "-"


def render_text(papers: Iterable[Paper]) -> str:
    """Render papers into a human-readable text block.

    Args:
        papers: Iterable of papers.

    Returns:
        A formatted string ready to be printed.
    """
    lines: list[str] = []
    for idx, paper in enumerate(papers, start=1):
        number = f" [{paper.paper_number}]" if paper.paper_number else ""
        lines.append(f"{idx}. {paper.title}{number}")
        lines.append(f"   ID: {paper.id}  Status: {paper.status}")
        if paper.department:
            lines.append(f"   Department: {DEPARTMENTS.get(paper.department, paper.department)}")
        if paper.authors:
            lines.append(f"   Authors: {', '.join(paper.authors)}")
        if paper.collaborators:
            lines.append(f"   Collaborators: {', '.join(paper.collaborators)}")
        if paper.co_authors:
            lines.append(f"   Co-authors: {', '.join(ref.full_name for ref in paper.co_authors)}")
        if paper.keywords:
            lines.append(f"   Keywords: {', '.join(paper.keywords)}")
        lines.append(f"   Uploaded: {_fmt_date(paper.upload_date)}  Published: {_fmt_date(paper.publish_date)}")
        if paper.pdf_url:
            lines.append(f"   PDF: {paper.pdf_url}")
        if paper.source_url:
            lines.append(f"   Source: {paper.source_url}")
        lines.append("")
    if not lines:
        return "No papers found.\n"
    return "\n".join(lines).rstrip() + "\n"


def render_co_authors(entries: Iterable[CoAuthor]) -> str:
    lines = [
        f"{entry.full_name} ({(entry.department or '-').upper()})  {entry.email}  id={entry.id}"
        for entry in entries
    ]
    return "\n".join(lines) + "\n" if lines else "No co-authors found.\n"


def render_publications(publications: Iterable[ScholarPublication]) -> str:
    """Numbered publication list; the numbers are the import indices."""
    lines: list[str] = []
    for idx, pub in enumerate(publications):
        year = f" ({pub.year})" if pub.year else ""
        lines.append(f"[{idx}] {pub.title}{year}")
        if pub.authors:
            lines.append(f"    {pub.authors}")
        details = [f"cited by {pub.citation_count}"]
        if pub.venue:
            details.insert(0, pub.venue)
        lines.append(f"    {' | '.join(details)}")
    return "\n".join(lines) + "\n" if lines else ""


def render_stats(stats: PaperStats) -> str:
    lines = [
        f"Total papers: {stats.total}",
        f"Published:    {stats.published}",
        f"In review:    {stats.in_review}",
        f"Draft:        {stats.draft}",
    ]
    if stats.by_department:
        lines.append("By department:")
        lines.extend(f"  {dept}: {count}" for dept, count in stats.by_department.items())
    return "\n".join(lines) + "\n"


def render_notification(note: Notification) -> str:
    prefix = "ERROR" if note.is_error else "OK"
    return f"[{prefix}] {note.title}: {note.description}" if note.description else f"[{prefix}] {note.title}"
