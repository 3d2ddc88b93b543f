"""BaseService — foundation for the dbref services.

Every service receives a :class:`DocumentStore` at construction time.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dbref.infrastructure.store import DocumentStore


class BaseService:
    """Base for service-layer classes.

    Usage::

        class StoreService(BaseService):
            def get(self, collection: str, doc_id: str) -> ServiceResult:
                document = self._store.find_one(collection, doc_id)
                ...
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
