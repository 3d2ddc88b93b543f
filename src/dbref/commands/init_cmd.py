"""Standalone command: create the document store."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from dbref.commands._base import DbrefCommand
from dbref.services.store import StoreService

if TYPE_CHECKING:
    from dbref.commands._context import AppContext


@click.command(
    "init",
    cls=DbrefCommand,
    examples="""\
  dbref init
  dbref --json init""",
)
@click.pass_obj
def init_cmd(app: AppContext) -> None:
    """Create the store database if it does not exist yet."""
    app.emit(StoreService(app.store).describe())
