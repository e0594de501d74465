"""Command runner for coordinating CLI execution.

Manages component lifecycle, resource cleanup, logging configuration,
and error handling for command execution.
"""

from __future__ import annotations

from typing import Protocol

import click

from PaperPortal.cli.commands import PortalContext
from PaperPortal.config import AppConfig
from PaperPortal.core.errors import PortalError
from PaperPortal.core.notify import Notifier
from PaperPortal.renderers.console import render_notification
from PaperPortal.services import (
    create_co_author_directory,
    create_paper_repository,
    create_role_resolver,
)
from PaperPortal.storage import open_database
from PaperPortal.utils.log import configure_logging, log


class Command(Protocol):
    def execute(self, ctx: PortalContext) -> None: ...


class CommandRunner:
    """Orchestrates command execution with proper resource management.

    Handles logging configuration, service wiring, database context
    management, notification output and error handling for CLI commands.
    """

    def __init__(self, config: AppConfig) -> None:
        """Initialize command runner.

        Args:
            config: Application configuration.
        """
        self.config = config

    def run(self, action: str, command: Command) -> None:
        """Execute one command with full resource management.

        Notifications emitted during the command are printed afterwards,
        errors to stderr.

        Args:
            action: The CLI command name (e.g., 'papers-list').
            command: Command object to execute.

        Raises:
            click.ClickException: When a portal error escapes the command.
            click.Abort: On any other failure.
        """
        configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
        )
        notifier = Notifier()
        try:
            with open_database(self.config) as db_manager:
                ctx = PortalContext(
                    config=self.config,
                    db_manager=db_manager,
                    notifier=notifier,
                    papers=create_paper_repository(self.config, db_manager, notifier),
                    roles=create_role_resolver(self.config, db_manager),
                    directory=create_co_author_directory(db_manager, notifier),
                )
                command.execute(ctx)
        except click.ClickException:
            raise
        except PortalError as e:
            log.error("%s failed: %s", action, e)
            raise click.ClickException(str(e)) from e
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("%s failed: %s", action, e)
            raise click.Abort from e
        finally:
            for note in notifier.drain():
                click.echo(render_notification(note), err=note.is_error)
