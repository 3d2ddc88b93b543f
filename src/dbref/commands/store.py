"""Command group: insert and read documents."""

from __future__ import annotations

from typing import IO, TYPE_CHECKING

import click

from dbref.commands._base import DbrefGroup
from dbref.commands._input import read_json
from dbref.services.store import StoreService

if TYPE_CHECKING:
    from dbref.commands._context import AppContext

_STORE_EXAMPLES = """\
  dbref store insert authors authors.json
  echo '{"name": "Ada"}' | dbref store insert authors
  dbref store get authors 65a1f0c2e4b0a1b2c3d4e5f6
  dbref store list authors"""


@click.group(cls=DbrefGroup, examples=_STORE_EXAMPLES)
def store() -> None:
    """Insert and read raw documents."""


@store.command(
    examples="""\
  dbref store insert books books.json
  dbref --quiet store insert books - < book.json"""
)
@click.argument("collection")
@click.argument("source", type=click.File("r"), default="-")
@click.pass_obj
def insert(app: AppContext, collection: str, source: IO[str]) -> None:
    """Insert a JSON object or an array of objects into COLLECTION."""
    payload, failure = read_json("insert", source)
    if failure is not None:
        app.emit(failure)
        return
    app.emit(StoreService(app.store).insert(collection, payload))


@store.command(
    examples="""\
  dbref store get books 65a1f0c2e4b0a1b2c3d4e5f6
  dbref --json store get books 65a1f0c2e4b0a1b2c3d4e5f6 --strip-ids"""
)
@click.argument("collection")
@click.argument("doc_id")
@click.option("--strip-ids", is_flag=True, help="Remove _id fields from the output.")
@click.pass_obj
def get(app: AppContext, collection: str, doc_id: str, strip_ids: bool) -> None:
    """Show one document without resolving its DbRefs."""
    app.emit(StoreService(app.store).get(collection, doc_id, strip=strip_ids))


@store.command(
    name="list",
    examples="""\
  dbref store list books
  dbref --quiet store list books""",
)
@click.argument("collection")
@click.option("--strip-ids", is_flag=True, help="Remove _id fields from the output.")
@click.pass_obj
def list_cmd(app: AppContext, collection: str, strip_ids: bool) -> None:
    """List every document in COLLECTION."""
    app.emit(StoreService(app.store).list_documents(collection, strip=strip_ids))
