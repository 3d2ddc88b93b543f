"""Standalone commands: resolve DbRefs in stored or inline documents."""

from __future__ import annotations

from collections.abc import Callable
from typing import IO, TYPE_CHECKING, Any

import click

from dbref.commands._base import DbrefCommand
from dbref.commands._input import read_json
from dbref.services.resolve import ResolveService

if TYPE_CHECKING:
    from dbref.commands._context import AppContext


def _resolve_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the options shared by ``resolve`` and ``inline``."""
    func = click.option(
        "--strip-ids/--keep-ids",
        default=None,
        help="Remove _id fields from the resolved document.",
    )(func)
    func = click.option(
        "-d",
        "--depth",
        type=click.IntRange(min=0),
        default=None,
        help="Maximum resolution hops along any path (default: unbounded).",
    )(func)
    func = click.option(
        "--collection",
        "collections",
        multiple=True,
        help="Only resolve DbRefs to this collection (repeatable).",
    )(func)
    return func


@click.command(
    cls=DbrefCommand,
    examples="""\
  dbref resolve books 65a1f0c2e4b0a1b2c3d4e5f6
  dbref resolve books 65a1f0c2e4b0a1b2c3d4e5f6 --depth 1
  dbref --json resolve books 65a1f0c2e4b0a1b2c3d4e5f6 --collection authors""",
)
@click.argument("collection")
@click.argument("doc_id")
@_resolve_options
@click.pass_obj
def resolve(
    app: AppContext,
    collection: str,
    doc_id: str,
    collections: tuple[str, ...],
    depth: int | None,
    strip_ids: bool | None,
) -> None:
    """Resolve the DbRefs of a stored document."""
    service = ResolveService(app.store, app.settings.resolve)
    app.emit(
        service.resolve_stored(
            collection,
            doc_id,
            collections=collections or None,
            depth=depth,
            strip=strip_ids,
        )
    )


@click.command(
    cls=DbrefCommand,
    examples="""\
  dbref inline order.json
  cat order.json | dbref --quiet inline --depth 2
  dbref inline orders.json --collection customers --strip-ids""",
)
@click.argument("source", type=click.File("r"), default="-")
@_resolve_options
@click.pass_obj
def inline(
    app: AppContext,
    source: IO[str],
    collections: tuple[str, ...],
    depth: int | None,
    strip_ids: bool | None,
) -> None:
    """Resolve the DbRefs inside a JSON document read from SOURCE."""
    document, failure = read_json("resolve_document", source)
    if failure is not None:
        app.emit(failure)
        return
    service = ResolveService(app.store, app.settings.resolve)
    app.emit(
        service.resolve_document(
            document,
            collections=collections or None,
            depth=depth,
            strip=strip_ids,
        )
    )
