"""CLI package for PaperPortal command orchestration.

Click groups live in ``ui``, command objects in ``commands`` and the
service wiring in ``runner``.
"""

from __future__ import annotations

__all__ = ["CommandRunner", "main"]

from PaperPortal.cli.runner import CommandRunner
from PaperPortal.cli.ui import cli


def main() -> None:
    """Run PaperPortal CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()
