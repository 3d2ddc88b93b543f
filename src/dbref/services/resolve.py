"""ResolveService — DbRef resolution against the document store.

Two entry points:
- resolve_document: resolve DbRefs inside a caller-supplied document
- resolve_stored: load a root document from the store, then resolve it

Both delegate to :class:`~dbref.domain.resolution.Resolver` with the
store's ``fetch_entity`` as the fetch capability. A missing DbRef target
aborts the whole resolution; no partial document is returned.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from dbref.config.models import ResolveConfig
from dbref.domain.errors import InvalidDocumentError, ReferenceNotFoundError
from dbref.domain.ids import strip_ids
from dbref.domain.resolution import Resolver
from dbref.services.base import BaseService
from dbref.services.result import ServiceResult
from dbref.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from dbref.infrastructure.store import DocumentStore


class ResolveService(BaseService):
    """Resolves DbRefs using defaults from the ``[resolve]`` config section.

    Keyword arguments left as None fall back to the config values.
    """

    def __init__(self, store: DocumentStore, config: ResolveConfig | None = None) -> None:
        super().__init__(store)
        self._config = config or ResolveConfig()

    @traced
    def resolve_document(
        self,
        document: Any,
        *,
        collections: Iterable[str] | None = None,
        depth: int | None = None,
        strip: bool | None = None,
    ) -> ServiceResult:
        """Resolve DbRefs inside *document*."""
        return self._resolve("resolve_document", document, collections, depth, strip)

    @traced
    def resolve_stored(
        self,
        collection: str,
        doc_id: str,
        *,
        collections: Iterable[str] | None = None,
        depth: int | None = None,
        strip: bool | None = None,
    ) -> ServiceResult:
        """Resolve DbRefs inside the stored document ``collection/doc_id``."""
        op = "resolve_stored"
        document = self._store.find_one(collection, doc_id)
        if document is None:
            return ServiceResult.failure(
                op,
                "NOT_FOUND",
                f"No document '{doc_id}' in collection '{collection}'",
                collection=collection,
                id=doc_id,
            )
        return self._resolve(op, document, collections, depth, strip)

    def _resolve(
        self,
        op: str,
        document: Any,
        collections: Iterable[str] | None,
        depth: int | None,
        strip: bool | None,
    ) -> ServiceResult:
        if collections is None:
            collections = self._config.collections
        if depth is None:
            depth = self._config.max_depth
        if strip is None:
            strip = self._config.strip_ids

        try:
            resolver = Resolver(
                self._store.fetch_entity, collections, depth, id_field=self._store.id_field
            )
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_INPUT", str(exc))

        with trace_span("resolver.resolve") as span:
            try:
                resolved = resolver.resolve(document)
            except InvalidDocumentError as exc:
                return ServiceResult.failure(op, "INVALID_DOCUMENT", str(exc))
            except ReferenceNotFoundError as exc:
                return ServiceResult.failure(
                    op, "NOT_FOUND", str(exc), collection=exc.collection, id=exc.id
                )
            if span:
                span.annotate("fetches", resolver.fetches)
                span.annotate("max_depth", depth)

        if strip:
            resolved = strip_ids(resolved, self._store.id_field)

        return ServiceResult(
            ok=True,
            op=op,
            data={"document": resolved, "fetches": resolver.fetches},
        )
