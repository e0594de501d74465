"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands
to their respective runners.
"""

from __future__ import annotations

import re
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

import click
from dateutil import parser as dt_parser
from dotenv import load_dotenv

from PaperPortal.cli.commands import (
    AddPaperCommand,
    LinkScholarCommand,
    ListCoAuthorsCommand,
    ListPapersCommand,
    ReportCommand,
    ScholarImportCommand,
    ShowRoleCommand,
    UpdatePaperCommand,
    UploadPdfCommand,
)
from PaperPortal.cli.runner import CommandRunner
from PaperPortal.config import DEFAULT_CONFIG_PATH, load_config_with_defaults
from PaperPortal.core.filters import ALL, CONTENT_TYPES, FilterSpec, ReportFilterSpec
from PaperPortal.core.models import DEPARTMENTS, PAPER_STATUSES, PaperDraft
from PaperPortal.renderers import EXPORTERS

_ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


class IsoDate(click.ParamType):
    """Calendar date in ISO form (YYYY-MM-DD).

    Partial dates such as ``2024`` or ``2024-05`` are rejected rather than
    padded to the first day.
    """

    name = "date"

    def convert(self, value, param, ctx) -> date:
        if isinstance(value, date):
            return value
        if not isinstance(value, str) or not _ISO_DATE_RE.fullmatch(value):
            self.fail(f"{value!r} is not an ISO date (YYYY-MM-DD)", param, ctx)
        try:
            return dt_parser.isoparse(value).date()
        except ValueError:
            self.fail(f"{value!r} is not a valid calendar date", param, ctx)


ISO_DATE = IsoDate()
_STATUS_CHOICE = click.Choice(PAPER_STATUSES)
_DEPARTMENT_CHOICE = click.Choice(sorted(DEPARTMENTS))

user_option = click.option(
    "--user",
    "identity",
    envvar="PAPER_PORTAL_USER",
    default=None,
    help="Authenticated user id (or PAPER_PORTAL_USER).",
)


def _run(ctx: click.Context, command) -> None:
    runner = CommandRunner(ctx.obj)
    runner.run(action=ctx.command_path.split(" ", 1)[-1].replace(" ", "-"), command=command)


def _split_csv(values: Sequence[str]) -> tuple[str, ...]:
    """Flatten repeated and comma-separated option values."""
    return tuple(part.strip() for value in values for part in value.split(",") if part.strip())


def _paper_options(func):
    options = [
        click.option("--title", required=True, help="Paper title."),
        click.option("--number", "paper_number", default="", help="Paper number."),
        click.option("--collaborator", "collaborators", multiple=True, help="External collaborator (repeatable)."),
        click.option("--co-author", "co_author_ids", multiple=True, help="Co-author directory id (repeatable)."),
        click.option("--keyword", "keywords", multiple=True, help="Keyword (repeatable, comma-separated ok)."),
        click.option("--upload-date", type=ISO_DATE, default=None, help="Upload date, defaults to today."),
        click.option("--publish-date", type=ISO_DATE, default=None, help="Publish date."),
        click.option("--status", type=_STATUS_CHOICE, default="draft", show_default=True),
        click.option("--department", type=_DEPARTMENT_CHOICE, default=None),
        click.option("--doi", default=None, help="Digital Object Identifier."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_draft(
    *,
    title: str,
    paper_number: str,
    collaborators: Sequence[str],
    co_author_ids: Sequence[str],
    keywords: Sequence[str],
    upload_date: Optional[date],
    publish_date: Optional[date],
    status: str,
    department: Optional[str],
    doi: Optional[str],
    pdf_url: Optional[str] = None,
) -> PaperDraft:
    fields = dict(
        title=title.strip(),
        paper_number=paper_number.strip(),
        collaborators=_split_csv(collaborators),
        co_author_ids=_split_csv(co_author_ids),
        keywords=_split_csv(keywords),
        publish_date=publish_date,
        status=status,
        department=department,
        doi=doi or None,
        pdf_url=pdf_url or None,
    )
    if upload_date is not None:
        fields["upload_date"] = upload_date
    if not fields["title"]:
        raise click.BadParameter("title must not be empty", param_hint="--title")
    return PaperDraft(**fields)


@click.group(help="PaperPortal: manage departmental research papers.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to YAML config file (merged over the defaults).",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path) -> None:
    """CLI entry group.

    Loads environment variables from .env file before processing config.
    """
    load_dotenv()
    ctx.obj = load_config_with_defaults(config_path)


@cli.group("papers")
def papers_group() -> None:
    """Browse, upload and edit papers."""


@papers_group.command("list")
@user_option
@click.option("--mine", is_flag=True, help="Only papers you own.")
@click.option("--search", default="", help="Quick title/keyword search (with --mine).")
@click.option("--query", default="", help="Free text over title, keywords, collaborators and co-authors.")
@click.option("--status", type=click.Choice((ALL, *PAPER_STATUSES)), default=ALL, show_default=True)
@click.option("--department", type=click.Choice((ALL, *sorted(DEPARTMENTS))), default=ALL, show_default=True)
@click.option("--collaborator", default="", help="Collaborator name substring.")
@click.option("--co-author", "co_author", default="", help="Co-author directory id.")
@click.option("--upload-from", type=ISO_DATE, default=None)
@click.option("--upload-to", type=ISO_DATE, default=None)
@click.option("--publish-from", type=ISO_DATE, default=None)
@click.option("--publish-to", type=ISO_DATE, default=None)
@click.pass_context
def papers_list(ctx: click.Context, identity, mine, search, query, status, department, collaborator,
                co_author, upload_from, upload_to, publish_from, publish_to) -> None:
    """List papers you own or co-author."""
    spec = FilterSpec(
        query=query,
        status=status,
        department=department,
        collaborator=collaborator,
        co_author=co_author,
        upload_from=upload_from,
        upload_to=upload_to,
        publish_from=publish_from,
        publish_to=publish_to,
    )
    _run(ctx, ListPapersCommand(identity=identity, spec=spec, mine=mine, search=search))


@papers_group.command("add")
@user_option
@_paper_options
@click.option("--pdf", "pdf_path", type=click.Path(path_type=Path, dir_okay=False, exists=True), default=None)
@click.pass_context
def papers_add(ctx: click.Context, identity, pdf_path, **fields) -> None:
    """Upload a new paper."""
    _run(ctx, AddPaperCommand(identity=identity, draft=_build_draft(**fields), pdf_path=pdf_path))


@papers_group.command("update")
@user_option
@click.argument("paper_id")
@_paper_options
@click.option("--pdf-url", default=None, help="URL of an already uploaded PDF.")
@click.pass_context
def papers_update(ctx: click.Context, identity, paper_id, pdf_url, **fields) -> None:
    """Replace all fields of PAPER_ID (owner or admin only)."""
    draft = _build_draft(pdf_url=pdf_url, **fields)
    _run(ctx, UpdatePaperCommand(identity=identity, paper_id=paper_id, draft=draft))


@papers_group.command("upload-pdf")
@user_option
@click.argument("path", type=click.Path(path_type=Path, dir_okay=False, exists=True))
@click.pass_context
def papers_upload_pdf(ctx: click.Context, identity, path) -> None:
    """Store a PDF and print its public URL."""
    _run(ctx, UploadPdfCommand(identity=identity, path=path))


@cli.group("coauthors")
def coauthors_group() -> None:
    """Co-author directory."""


@coauthors_group.command("list")
@user_option
@click.pass_context
def coauthors_list(ctx: click.Context, identity) -> None:
    """List active co-authors (emails visible to admins only)."""
    _run(ctx, ListCoAuthorsCommand(identity=identity))


@cli.group("role")
def role_group() -> None:
    """Role lookup."""


@role_group.command("show")
@user_option
@click.pass_context
def role_show(ctx: click.Context, identity) -> None:
    """Print the caller's role: admin, teacher or none."""
    _run(ctx, ShowRoleCommand(identity=identity))


@cli.group("scholar")
def scholar_group() -> None:
    """Google Scholar import."""


@scholar_group.command("link")
@user_option
@click.argument("scholar_id")
@click.pass_context
def scholar_link(ctx: click.Context, identity, scholar_id) -> None:
    """Save your Google Scholar author id."""
    _run(ctx, LinkScholarCommand(identity=identity, scholar_id=scholar_id))


@scholar_group.command("fetch")
@user_option
@click.argument("scholar_id", required=False)
@click.pass_context
def scholar_fetch(ctx: click.Context, identity, scholar_id) -> None:
    """List an author's publications (defaults to your saved id)."""
    _run(ctx, ScholarImportCommand(identity=identity, scholar_id=scholar_id))


@scholar_group.command("import")
@user_option
@click.argument("scholar_id", required=False)
@click.option("--select", "selected", type=int, multiple=True, help="Index from 'scholar fetch' (repeatable).")
@click.option("--all", "select_all", is_flag=True, help="Import every publication.")
@click.pass_context
def scholar_import(ctx: click.Context, identity, scholar_id, selected, select_all) -> None:
    """Import selected publications as draft papers."""
    if not selected and not select_all:
        raise click.UsageError("Pass --select INDEX (repeatable) or --all")
    _run(ctx, ScholarImportCommand(
        identity=identity, scholar_id=scholar_id, selected=selected, select_all=select_all,
    ))


def _report_options(func):
    options = [
        click.option("--department", type=click.Choice((ALL, *sorted(DEPARTMENTS))), default=ALL, show_default=True),
        click.option("--status", type=click.Choice((ALL, *PAPER_STATUSES)), default=ALL, show_default=True),
        click.option("--title", default="", help="Title substring."),
        click.option("--upload-from", type=ISO_DATE, default=None),
        click.option("--upload-to", type=ISO_DATE, default=None),
        click.option("--content-type", type=click.Choice(CONTENT_TYPES), default=ALL, show_default=True),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@cli.group("report")
def report_group() -> None:
    """Statistics and exports."""


@report_group.command("stats")
@user_option
@_report_options
@click.pass_context
def report_stats(ctx: click.Context, identity, **fields) -> None:
    """Paper counts by status and department."""
    _run(ctx, ReportCommand(identity=identity, spec=ReportFilterSpec(**fields)))


@report_group.command("export")
@user_option
@_report_options
@click.option("--format", "export_format", type=click.Choice(sorted(EXPORTERS)), default="csv", show_default=True)
@click.option("--output", type=click.Path(path_type=Path, dir_okay=False), default=None,
              help="Write to file instead of stdout.")
@click.pass_context
def report_export(ctx: click.Context, identity, export_format, output, **fields) -> None:
    """Download the filtered catalog (admin only)."""
    _run(ctx, ReportCommand(
        identity=identity, spec=ReportFilterSpec(**fields), export_format=export_format, output=output,
    ))
