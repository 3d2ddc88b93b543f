"""Database engine setup for SQLite with WAL mode.

The store lives at {root}/.dbref/dbref.db unless configured otherwise.
SQLAlchemy Core (not ORM) is used: documents are opaque JSON bodies and
there is nothing to gain from an identity map.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from dbref.infrastructure.database.schema import metadata

DEFAULT_DB_PATH = Path(".dbref") / "dbref.db"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode and foreign keys enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def init_database(root: Path, db_path: Path | None = None) -> Engine:
    """Initialize the store database at ``{root}/{db_path}``.

    *db_path* defaults to ``.dbref/dbref.db``. Creates parent directories
    and all tables from :data:`schema.metadata`.

    Idempotent — safe to call on an existing store.
    """
    path = root / (db_path or DEFAULT_DB_PATH)
    path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(path)
    metadata.create_all(engine)
    return engine
