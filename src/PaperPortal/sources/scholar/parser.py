"""SerpAPI author payload parser."""

from __future__ import annotations

from typing import Any, Mapping

from PaperPortal.core.models import ScholarAuthor, ScholarPublication


def parse_author(payload: Mapping[str, Any]) -> ScholarAuthor:
    """Extract the author profile from a payload."""
    author = payload.get("author")
    if not isinstance(author, Mapping):
        return ScholarAuthor()
    return ScholarAuthor(
        name=_safe_str(author.get("name")) or None,
        affiliations=_safe_str(author.get("affiliations")) or None,
        email=_safe_str(author.get("email")) or None,
        thumbnail=_safe_str(author.get("thumbnail")) or None,
    )


def parse_articles(payload: Mapping[str, Any]) -> list[ScholarPublication]:
    """Normalize ``articles`` into publications.

    The author string is kept comma-joined, as the provider sends it.
    """
    articles = payload.get("articles")
    if not isinstance(articles, list):
        return []

    publications: list[ScholarPublication] = []
    for article in articles:
        if not isinstance(article, Mapping):
            continue
        publications.append(
            ScholarPublication(
                title=_safe_str(article.get("title")) or "Untitled",
                authors=_safe_str(article.get("authors")),
                year=_safe_str(article.get("year")),
                citation_count=_citation_count(article.get("cited_by")),
                link=_safe_str(article.get("link")) or None,
                venue=_safe_str(article.get("publication")),
            )
        )
    return publications


def _citation_count(raw: Any) -> int:
    if not isinstance(raw, Mapping):
        return 0
    value = raw.get("value")
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return value


def _safe_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if not isinstance(value, str):
        return ""
    return value.strip()
