"""JSON export of papers.

Same logical fields as the delimited export, as a pretty-printed array of
keyed records. Lists stay lists and missing values are null.
"""

from __future__ import annotations

import json
from typing import Iterable

from PaperPortal.core.models import Paper


def render_json(papers: Iterable[Paper]) -> list[dict]:
    """Render papers into JSON-serializable records."""
    return [
        {
            "title": paper.title,
            "department": paper.department,
            "status": paper.status,
            "collaborators": list(paper.collaborators),
            "keywords": list(paper.keywords),
            "upload_date": paper.upload_date.isoformat(),
            "publish_date": paper.publish_date.isoformat() if paper.publish_date else None,
            "doi": paper.doi,
        }
        for paper in papers
    ]


def export_structured(papers: Iterable[Paper]) -> bytes:
    """Serialize papers to pretty-printed UTF-8 JSON bytes."""
    return json.dumps(render_json(papers), ensure_ascii=False, indent=2).encode("utf-8")
