"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy store initialization and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from dbref.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from dbref.config.settings import DbrefSettings
    from dbref.infrastructure.store import DocumentStore
    from dbref.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The store is opened on first use so ``--help`` and ``--version``
    never touch the database.
    """

    def __init__(self, settings: DbrefSettings) -> None:
        self.settings = settings
        self._store: DocumentStore | None = None

        from dbref.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose, quiet=settings.quiet, log_json=settings.log_json
        )

        if settings.verbose:
            from dbref.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def store(self) -> DocumentStore:
        """The document store (opened lazily on first access)."""
        if self._store is None:
            from dbref.infrastructure.store import DocumentStore

            self._store = DocumentStore.connect(
                self.settings.root,
                Path(self.settings.store.path),
                id_field=self.settings.resolve.id_field,
            )
        return self._store

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
            self._store = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
