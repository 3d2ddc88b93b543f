"""SQLite database engine and schema via SQLAlchemy Core."""

from dbref.infrastructure.database.engine import DEFAULT_DB_PATH, create_db_engine, init_database
from dbref.infrastructure.database.schema import documents, metadata

__all__ = [
    "DEFAULT_DB_PATH",
    "create_db_engine",
    "documents",
    "init_database",
    "metadata",
]
