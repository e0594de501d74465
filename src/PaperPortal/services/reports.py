"""Admin report filtering and aggregate statistics."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from PaperPortal.core.filters import ALL, ReportFilterSpec
from PaperPortal.core.models import Paper
from PaperPortal.services.filtering import in_date_range


@dataclass(frozen=True, slots=True)
class PaperStats:
    """Counts shown on dashboard and report summary cards."""

    total: int = 0
    published: int = 0
    in_review: int = 0
    draft: int = 0
    by_department: Mapping[str, int] = field(default_factory=dict)


def apply_report_filter(papers: Sequence[Paper], spec: ReportFilterSpec) -> list[Paper]:
    """Return papers matching the report filter, in input order."""
    title = spec.title.casefold()
    out: list[Paper] = []
    for paper in papers:
        if spec.department != ALL and paper.department != spec.department:
            continue
        if spec.status != ALL and paper.status != spec.status:
            continue
        if title and title not in paper.title.casefold():
            continue
        if not in_date_range(paper.upload_date, spec.upload_from, spec.upload_to):
            continue
        if spec.content_type == "pdf" and not paper.pdf_url:
            continue
        if spec.content_type == "metadata" and paper.pdf_url:
            continue
        out.append(paper)
    return out


def summarize(papers: Sequence[Paper]) -> PaperStats:
    """Count papers by status and by department.

    Papers without a department are counted under ``"unassigned"``.
    """
    statuses = Counter(paper.status for paper in papers)
    departments = Counter(paper.department or "unassigned" for paper in papers)
    return PaperStats(
        total=len(papers),
        published=statuses["published"],
        in_review=statuses["in-review"],
        draft=statuses["draft"],
        by_department=dict(sorted(departments.items())),
    )
