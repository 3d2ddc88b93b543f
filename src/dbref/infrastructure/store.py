"""DocumentStore — JSON documents in SQLite, addressed by ``(collection, id)``.

The store is the single dependency injected into every service. Its
:meth:`DocumentStore.fetch_entity` is the capability handed to the
resolution engine.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, insert, literal_column, select
from sqlalchemy.exc import SQLAlchemyError

from dbref.domain.errors import InvalidDocumentError, ReferenceNotFoundError
from dbref.domain.ids import ID_FIELD, InsertResult, generate_id
from dbref.infrastructure.database.engine import init_database
from dbref.infrastructure.database.schema import documents

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


class DocumentStore:
    """Collections of JSON documents backed by a SQLAlchemy engine."""

    def __init__(self, engine: Engine, *, id_field: str = ID_FIELD) -> None:
        self._engine = engine
        self.id_field = id_field

    @classmethod
    def connect(
        cls,
        root: Path,
        db_path: Path | None = None,
        *,
        id_field: str = ID_FIELD,
    ) -> DocumentStore:
        """Open (creating if needed) the store database under *root*."""
        try:
            engine = init_database(root, db_path)
        except (OSError, SQLAlchemyError) as exc:
            logger.error("Could not connect to database: %s", exc)
            raise
        logger.debug("Connected to database at %s", engine.url.database)
        return cls(engine, id_field=id_field)

    @property
    def engine(self) -> Engine:
        return self._engine

    def close(self) -> None:
        """Dispose of the engine's connection pool."""
        self._engine.dispose()

    def __enter__(self) -> DocumentStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert_one(self, collection: str, document: dict[str, Any]) -> InsertResult:
        """Insert *document*, assigning an id when it has none."""
        with self._engine.begin() as conn:
            doc_id = self._insert(conn, collection, document)
        return InsertResult(inserted_id=doc_id)

    def insert_many(self, collection: str, docs: Iterable[dict[str, Any]]) -> InsertResult:
        """Insert several documents in one transaction."""
        inserted: dict[int, str] = {}
        with self._engine.begin() as conn:
            for position, document in enumerate(docs):
                inserted[position] = self._insert(conn, collection, document)
        return InsertResult(inserted_ids=inserted)

    def _insert(self, conn: Connection, collection: str, document: dict[str, Any]) -> str:
        if not isinstance(document, dict):
            msg = f"Only objects can be stored, got {type(document).__name__}"
            raise InvalidDocumentError(msg)
        body = dict(document)
        raw_id = body.pop(self.id_field, None)
        doc_id = generate_id() if raw_id is None else str(raw_id)
        conn.execute(
            insert(documents).values(
                collection=collection,
                id=doc_id,
                body=json.dumps(body),
                created=datetime.now(UTC).isoformat(),
            )
        )
        logger.debug("Inserted %s/%s", collection, doc_id)
        return doc_id

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find_one(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Return the document with *doc_id* in *collection*, or None."""
        with self._engine.connect() as conn:
            row = conn.execute(
                select(documents.c.id, documents.c.body).where(
                    documents.c.collection == collection,
                    documents.c.id == str(doc_id),
                )
            ).first()
        if row is None:
            return None
        return self._load(row.id, row.body)

    def find(self, collection: str) -> list[dict[str, Any]]:
        """Return every document in *collection* in insertion order."""
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(documents.c.id, documents.c.body)
                .where(documents.c.collection == collection)
                .order_by(literal_column("rowid"))
            ).all()
        return [self._load(row.id, row.body) for row in rows]

    def fetch_entity(self, collection: str, ref_id: str) -> dict[str, Any]:
        """Resolve a DbRef target. Fails if the collection or the id doesn't exist.

        Raises:
            ReferenceNotFoundError: If no document matches.
        """
        found = self.find_one(collection, ref_id)
        if found is None:
            raise ReferenceNotFoundError(collection, ref_id)
        return found

    def _load(self, doc_id: str, body: str) -> dict[str, Any]:
        return {self.id_field: doc_id, **json.loads(body)}

    def counts(self) -> dict[str, int]:
        """Return the number of documents per collection."""
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(documents.c.collection, func.count().label("n"))
                .group_by(documents.c.collection)
                .order_by(documents.c.collection)
            ).all()
        return {row.collection: row.n for row in rows}
