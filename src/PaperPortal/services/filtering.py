"""In-memory filter/search over a paper collection.

Every function here is pure: inputs are never mutated and the output keeps
the input order.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Sequence

from PaperPortal.core.filters import ALL, FilterSpec
from PaperPortal.core.models import Paper


def apply_filters(papers: Sequence[Paper], spec: FilterSpec) -> list[Paper]:
    """Return the papers matching every clause of ``spec``.

    Args:
        papers: Collection to scan.
        spec: Filter specification; empty fields match everything.

    Returns:
        Matching papers in input order.
    """
    return [paper for paper in papers if matches(paper, spec)]


def matches(paper: Paper, spec: FilterSpec) -> bool:
    """Return True if ``paper`` satisfies all clauses of ``spec``."""
    return (
        _match_query(paper, spec.query)
        and _match_choice(paper.status, spec.status)
        and _match_collaborator(paper, spec.collaborator)
        and _match_choice(paper.department, spec.department)
        and _match_co_author(paper, spec.co_author)
        and in_date_range(paper.upload_date, spec.upload_from, spec.upload_to)
        and _match_publish_date(paper, spec)
    )


def owned_by(papers: Sequence[Paper], identity: str | None) -> list[Paper]:
    """Return the papers whose owner is ``identity``."""
    if not identity:
        return []
    return [paper for paper in papers if paper.owner == identity]


def quick_search(papers: Sequence[Paper], query: str) -> list[Paper]:
    """Title/keyword search used by the owner's dashboard."""
    needle = query.casefold()
    if not needle:
        return list(papers)
    return [
        paper
        for paper in papers
        if needle in paper.title.casefold() or _any_contains(paper.keywords, needle)
    ]


def in_date_range(value: date, start: date | None, end: date | None) -> bool:
    """Inclusive range check; a missing bound is open."""
    if start is not None and value < start:
        return False
    if end is not None and value > end:
        return False
    return True


def _match_query(paper: Paper, query: str) -> bool:
    needle = query.casefold()
    if not needle:
        return True
    return (
        needle in paper.title.casefold()
        or _any_contains(paper.keywords, needle)
        or _any_contains(paper.collaborators, needle)
        or _any_contains((ref.full_name for ref in paper.co_authors), needle)
    )


def _match_choice(value: str | None, selected: str) -> bool:
    return not selected or selected == ALL or value == selected


def _match_collaborator(paper: Paper, collaborator: str) -> bool:
    needle = collaborator.casefold()
    if not needle:
        return True
    return _any_contains(paper.collaborators, needle)


def _match_co_author(paper: Paper, co_author: str) -> bool:
    if not co_author or co_author == ALL:
        return True
    return co_author in paper.co_author_ids


def _match_publish_date(paper: Paper, spec: FilterSpec) -> bool:
    # A paper without a publish date never satisfies a bounded range.
    if spec.publish_from is None and spec.publish_to is None:
        return True
    if paper.publish_date is None:
        return False
    return in_date_range(paper.publish_date, spec.publish_from, spec.publish_to)


def _any_contains(values: Iterable[str], needle: str) -> bool:
    return any(needle in value.casefold() for value in values)
