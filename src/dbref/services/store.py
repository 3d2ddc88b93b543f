"""StoreService — insert and read documents in the store."""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import IntegrityError

from dbref.domain.errors import InvalidDocumentError
from dbref.domain.ids import extract_inserted_ids, strip_ids
from dbref.services.base import BaseService
from dbref.services.result import ServiceResult
from dbref.services.telemetry import traced


class StoreService(BaseService):
    """Handles writes and lookups that do not involve resolution."""

    @traced
    def describe(self) -> ServiceResult:
        """Report where the store lives and how many documents each collection holds."""
        counts = self._store.counts()
        return ServiceResult(
            ok=True,
            op="init_store",
            data={
                "path": str(self._store.engine.url.database),
                "collections": counts,
                "documents": sum(counts.values()),
            },
        )

    @traced
    def insert(self, collection: str, payload: Any) -> ServiceResult:
        """Insert a JSON object (one document) or array (many documents)."""
        op = "insert"
        try:
            if isinstance(payload, dict):
                result = self._store.insert_one(collection, payload)
            elif isinstance(payload, list):
                result = self._store.insert_many(collection, payload)
            else:
                msg = f"Expected an object or an array of objects, got {type(payload).__name__}"
                raise InvalidDocumentError(msg)
        except InvalidDocumentError as exc:
            return ServiceResult.failure(op, "INVALID_DOCUMENT", str(exc))
        except IntegrityError:
            return ServiceResult.failure(
                op, "DUPLICATE_ID", f"A document with that id already exists in '{collection}'"
            )

        ids = extract_inserted_ids(result)
        if isinstance(ids, str):
            ids = [ids]
        return ServiceResult(
            ok=True,
            op=op,
            data={"collection": collection, "count": len(ids or []), "ids": ids or []},
        )

    @traced
    def get(self, collection: str, doc_id: str, *, strip: bool = False) -> ServiceResult:
        """Fetch a single document without resolving its DbRefs."""
        document = self._store.find_one(collection, doc_id)
        if document is None:
            return ServiceResult.failure(
                "get",
                "NOT_FOUND",
                f"No document '{doc_id}' in collection '{collection}'",
                collection=collection,
                id=doc_id,
            )
        if strip:
            document = strip_ids(document, self._store.id_field)
        return ServiceResult(ok=True, op="get", data={"document": document})

    @traced
    def list_documents(self, collection: str, *, strip: bool = False) -> ServiceResult:
        """List every document in *collection*."""
        items = self._store.find(collection)
        if strip:
            items = strip_ids(items, self._store.id_field)
        return ServiceResult(
            ok=True,
            op="list_documents",
            data={"collection": collection, "count": len(items), "items": items},
        )
