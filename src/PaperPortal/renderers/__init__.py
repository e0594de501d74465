"""Renderers for paper collections.

Download formats (delimited CSV, structured JSON) and console text used by
the CLI.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Iterable

from PaperPortal.core.models import Paper
from PaperPortal.renderers.console import render_text
from PaperPortal.renderers.delimited import export_delimited
from PaperPortal.renderers.json import export_structured, render_json

Exporter = Callable[[Iterable[Paper]], bytes]

EXPORTERS: dict[str, tuple[Exporter, str]] = {
    "csv": (export_delimited, "text/csv"),
    "json": (export_structured, "application/json"),
}


def get_exporter(fmt: str) -> Exporter:
    """Return the exporter for ``fmt`` ("csv" or "json").

    Raises:
        ValueError: If the format is unknown.
    """
    entry = EXPORTERS.get(fmt.lower())
    if entry is None:
        raise ValueError(f"Unknown export format: {fmt} (expected one of {sorted(EXPORTERS)})")
    return entry[0]


__all__ = [
    "EXPORTERS",
    "export_delimited",
    "export_structured",
    "get_exporter",
    "render_json",
    "render_text",
]
