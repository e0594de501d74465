"""Service layer for PaperPortal.

Wires storage components into the view-facing services and provides
factory functions for the CLI.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from PaperPortal.core.errors import ConfigError
from PaperPortal.services.coauthors import CoAuthorDirectory
from PaperPortal.services.filtering import apply_filters, owned_by, quick_search
from PaperPortal.services.papers import PaperRepository
from PaperPortal.services.reports import PaperStats, apply_report_filter, summarize
from PaperPortal.services.roles import RoleResolver
from PaperPortal.services.scholar import ScholarFetchResult, ScholarImportService, stage_for_import
from PaperPortal.sources.scholar.client import ScholarApiClient
from PaperPortal.storage import CoAuthorStore, PaperStore, RoleStore, create_file_store

if TYPE_CHECKING:
    from PaperPortal.config import AppConfig
    from PaperPortal.core.notify import Notifier
    from PaperPortal.storage import DatabaseManager


def create_paper_repository(
    config: AppConfig,
    db_manager: DatabaseManager,
    notifier: Notifier,
) -> PaperRepository:
    """Create a paper repository bound to the shared database."""
    return PaperRepository(
        store=PaperStore(db_manager),
        directory=CoAuthorStore(db_manager),
        files=create_file_store(config),
        notifier=notifier,
        enrich_batch_size=config.storage.enrich_batch_size,
    )


def create_role_resolver(config: AppConfig, db_manager: DatabaseManager) -> RoleResolver:
    return RoleResolver(store=RoleStore(db_manager), fallback=config.auth.missing_role_fallback)


def create_co_author_directory(db_manager: DatabaseManager, notifier: Notifier) -> CoAuthorDirectory:
    return CoAuthorDirectory(store=CoAuthorStore(db_manager), notifier=notifier)


def create_scholar_service(config: AppConfig, db_manager: DatabaseManager) -> ScholarImportService:
    """Create the Scholar import service.

    Raises:
        ConfigError: If the import is disabled or the API key is missing.
    """
    if not config.scholar.enabled:
        raise ConfigError("Scholar import is disabled (scholar.enabled=false)")
    client = ScholarApiClient(
        config.scholar.api_key,
        base_url=config.scholar.base_url,
        max_results=config.scholar.max_results,
        timeout=config.scholar.timeout,
    )
    return ScholarImportService(client=client, store=PaperStore(db_manager))


__all__ = [
    "CoAuthorDirectory",
    "PaperRepository",
    "PaperStats",
    "RoleResolver",
    "ScholarFetchResult",
    "ScholarImportService",
    "apply_filters",
    "apply_report_filter",
    "create_co_author_directory",
    "create_paper_repository",
    "create_role_resolver",
    "create_scholar_service",
    "owned_by",
    "quick_search",
    "stage_for_import",
    "summarize",
]
