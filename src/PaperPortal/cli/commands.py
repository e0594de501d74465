"""Command implementations for the PaperPortal CLI.

Each command is a small object with an ``execute`` method that receives the
wired services. Failures are recovered into notifications here, the same
way a view would surface them; only configuration errors propagate.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional, Sequence

import click

from PaperPortal.config import AppConfig
from PaperPortal.core.errors import (
    AuthenticationRequired,
    AuthorizationError,
    FetchError,
    ImportProviderError,
    PersistError,
)
from PaperPortal.core.filters import FilterSpec, ReportFilterSpec
from PaperPortal.core.models import PaperDraft, UploadFile
from PaperPortal.core.notify import Notifier
from PaperPortal.renderers import get_exporter
from PaperPortal.renderers.console import (
    render_co_authors,
    render_publications,
    render_stats,
    render_text,
)
from PaperPortal.services import (
    apply_filters,
    apply_report_filter,
    create_scholar_service,
    owned_by,
    quick_search,
    stage_for_import,
    summarize,
)
from PaperPortal.services.coauthors import CoAuthorDirectory
from PaperPortal.services.papers import PaperRepository
from PaperPortal.services.roles import RoleResolver
from PaperPortal.storage import DatabaseManager, ProfileStore
from PaperPortal.utils.log import log


@dataclass(slots=True)
class PortalContext:
    """Services shared by one CLI invocation."""

    config: AppConfig
    db_manager: DatabaseManager
    notifier: Notifier
    papers: PaperRepository
    roles: RoleResolver
    directory: CoAuthorDirectory


def _require_manager(ctx: PortalContext, identity: str | None) -> bool:
    """Teachers and admins only; missing identity is left to the operation."""
    if identity and not ctx.roles.can_manage_papers(identity):
        ctx.notifier.failure(
            "Access denied",
            "Only teachers and administrators can manage papers.",
            error=AuthorizationError,
        )
        return False
    return True


@dataclass(slots=True)
class ListPapersCommand:
    """Browse papers visible to the caller."""

    identity: Optional[str]
    spec: FilterSpec = field(default_factory=FilterSpec)
    mine: bool = False
    search: str = ""

    def execute(self, ctx: PortalContext) -> None:
        papers = ctx.papers.refresh(self.identity)
        if self.mine:
            papers = quick_search(owned_by(papers, self.identity), self.search)
        papers = apply_filters(papers, self.spec)
        click.echo(f"Found {len(papers)} papers")
        click.echo(render_text(papers), nl=False)


@dataclass(slots=True)
class AddPaperCommand:
    """Upload a new paper, optionally with its PDF."""

    identity: Optional[str]
    draft: PaperDraft
    pdf_path: Optional[Path] = None

    def execute(self, ctx: PortalContext) -> None:
        if not _require_manager(ctx, self.identity):
            return
        draft = self.draft
        url = None
        if self.pdf_path is not None:
            url = ctx.papers.upload_binary(self.identity, _read_upload(self.pdf_path))
            if url is None:
                return
            draft = replace(draft, pdf_url=url)
        paper = ctx.papers.create(self.identity, draft)
        if paper is None:
            if url is not None:
                ctx.papers.discard_binary(url)
            return
        click.echo(render_text([paper]), nl=False)


@dataclass(slots=True)
class UpdatePaperCommand:
    """Replace every editable field of an existing paper."""

    identity: Optional[str]
    paper_id: str
    draft: PaperDraft

    def execute(self, ctx: PortalContext) -> None:
        is_admin = ctx.roles.is_admin(self.identity)
        paper = ctx.papers.update(self.identity, self.paper_id, self.draft, is_admin=is_admin)
        if paper is not None:
            click.echo(render_text([paper]), nl=False)


@dataclass(slots=True)
class UploadPdfCommand:
    """Store a PDF and print its public URL."""

    identity: Optional[str]
    path: Path

    def execute(self, ctx: PortalContext) -> None:
        url = ctx.papers.upload_binary(self.identity, _read_upload(self.path))
        if url is not None:
            click.echo(url)


@dataclass(slots=True)
class ListCoAuthorsCommand:
    identity: Optional[str]

    def execute(self, ctx: PortalContext) -> None:
        entries = ctx.directory.list(ctx.roles.is_admin(self.identity))
        click.echo(render_co_authors(entries), nl=False)


@dataclass(slots=True)
class ShowRoleCommand:
    identity: Optional[str]

    def execute(self, ctx: PortalContext) -> None:
        click.echo(ctx.roles.resolve(self.identity))


@dataclass(slots=True)
class LinkScholarCommand:
    """Save the caller's Google Scholar author id to their profile."""

    identity: Optional[str]
    scholar_id: str

    def execute(self, ctx: PortalContext) -> None:
        if not self.identity:
            ctx.notifier.failure("Authentication required", "Please log in first.", error=AuthenticationRequired)
            return
        try:
            ProfileStore(ctx.db_manager).save_scholar_id(self.identity, self.scholar_id.strip())
        except PersistError as error:
            ctx.notifier.failure("Error", str(error), error=PersistError)
            return
        ctx.notifier.success("Saved", "Google Scholar ID saved to your profile")


@dataclass(slots=True)
class ScholarImportCommand:
    """Fetch an author's publications and optionally import a selection.

    With no selection the publications are only listed.
    """

    identity: Optional[str]
    scholar_id: Optional[str] = None
    selected: Sequence[int] = ()
    select_all: bool = False

    def execute(self, ctx: PortalContext) -> None:
        if not _require_manager(ctx, self.identity):
            return
        scholar_id = self._resolve_scholar_id(ctx)
        if not scholar_id:
            ctx.notifier.failure("Error", "Please enter a Google Scholar ID")
            return

        service = create_scholar_service(ctx.config, ctx.db_manager)
        try:
            try:
                result = service.fetch_publications(scholar_id)
            except ImportProviderError as error:
                ctx.notifier.failure("Error", error.message, error=ImportProviderError)
                return
            if result.is_empty:
                ctx.notifier.success("No Results", result.message)
                return

            ctx.notifier.success("Success", result.message)
            if result.author.name:
                click.echo(f"Author: {result.author.name}  {result.profile_url}")
            click.echo(render_publications(result.publications), nl=False)

            indices = range(len(result.publications)) if self.select_all else self.selected
            if not indices:
                return
            drafts = stage_for_import(indices, result.publications)
            try:
                committed = service.commit_import(drafts, self.identity)
            except AuthenticationRequired as error:
                ctx.notifier.failure("Authentication required", str(error), error=AuthenticationRequired)
                return
            ctx.notifier.success("Success", f"Imported {committed} publications as drafts")
        finally:
            service.close()

    def _resolve_scholar_id(self, ctx: PortalContext) -> str:
        if self.scholar_id and self.scholar_id.strip():
            return self.scholar_id.strip()
        if not self.identity:
            return ""
        try:
            return ProfileStore(ctx.db_manager).get_scholar_id(self.identity) or ""
        except FetchError as error:
            log.warning("Could not read saved scholar id: %s", error)
            return ""


@dataclass(slots=True)
class ReportCommand:
    """Statistics or download export over the report-filtered catalog.

    Admins report over every paper; other callers get their own papers'
    statistics and cannot export.
    """

    identity: Optional[str]
    spec: ReportFilterSpec = field(default_factory=ReportFilterSpec)
    export_format: Optional[str] = None
    output: Optional[Path] = None

    def execute(self, ctx: PortalContext) -> None:
        is_admin = ctx.roles.is_admin(self.identity)
        if self.export_format and not is_admin:
            ctx.notifier.failure("Access denied", "Reports are available to administrators only.",
                                 error=AuthorizationError)
            return

        if is_admin:
            try:
                papers = ctx.papers.list_all()
            except FetchError as error:
                ctx.notifier.failure("Failed to load papers", str(error), error=FetchError)
                return
        else:
            papers = owned_by(ctx.papers.refresh(self.identity), self.identity)

        papers = apply_report_filter(papers, self.spec)
        if not self.export_format:
            click.echo(render_stats(summarize(papers)), nl=False)
            return

        payload = get_exporter(self.export_format)(papers)
        if self.output is None:
            click.echo(payload.decode("utf-8"), nl=False)
            return
        self.output.parent.mkdir(parents=True, exist_ok=True)
        self.output.write_bytes(payload)
        ctx.notifier.success("Export ready", f"{len(papers)} papers written to {self.output}")


def _read_upload(path: Path) -> UploadFile:
    content_type = "application/pdf" if path.suffix.lower() == ".pdf" else "application/octet-stream"
    return UploadFile(name=path.name, content=path.read_bytes(), content_type=content_type)
