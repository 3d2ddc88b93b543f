"""Shared pytest fixtures and test helpers for dbref tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from dbref.domain.errors import ReferenceNotFoundError
from dbref.infrastructure.database.engine import init_database
from dbref.infrastructure.store import DocumentStore
from dbref.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's DBREF_* environment out of the tests."""
    monkeypatch.delenv("DBREF_CONFIG", raising=False)
    monkeypatch.delenv("DBREF_ROOT", raising=False)


@pytest.fixture(autouse=True)
def _restore_global_state() -> Generator[None]:
    """Undo the logging and telemetry setup a CLI invocation leaves behind."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    dbref_level = logging.getLogger("dbref").level
    yield
    disable_telemetry()
    root.handlers = handlers
    logging.getLogger("dbref").setLevel(dbref_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Generator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def store(tmp_path: Path) -> Generator[DocumentStore]:
    """Document store on a temp directory."""
    s = DocumentStore.connect(tmp_path)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated store.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test
    classes.
    """
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def ref(collection: str, ref_id: str) -> dict[str, str]:
    """Build a DbRef node."""
    return {"collection": collection, "id": ref_id}


class FakeEntities:
    """In-memory fetch capability that records every call.

    Entities are keyed by ``(collection, id)``; missing keys raise
    :class:`ReferenceNotFoundError` like the real store.
    """

    def __init__(self, entities: dict[tuple[str, str], Any] | None = None) -> None:
        self.entities = dict(entities or {})
        self.calls: list[tuple[str, str]] = []

    def add(self, collection: str, ref_id: str, **fields: Any) -> dict[str, Any]:
        entity = {"_id": ref_id, **fields}
        self.entities[(collection, ref_id)] = entity
        return entity

    def __call__(self, collection: str, ref_id: str) -> Any:
        self.calls.append((collection, ref_id))
        try:
            return self.entities[(collection, ref_id)]
        except KeyError:
            raise ReferenceNotFoundError(collection, ref_id) from None


def insert_doc(store: DocumentStore, collection: str, **fields: Any) -> str:
    """Insert one document, returning its id."""
    result = store.insert_one(collection, fields)
    assert result.inserted_id is not None
    return result.inserted_id
