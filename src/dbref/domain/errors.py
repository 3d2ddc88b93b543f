"""Exception taxonomy for reference resolution.

Domain code raises these; the service layer translates them into
:class:`~dbref.services.result.ServiceResult` error codes.
"""

from __future__ import annotations


class DbrefError(Exception):
    """Base class for all dbref errors."""


class InvalidDocumentError(DbrefError, TypeError):
    """A leaf value was given where an inner node (dict or list) was required."""


class ReferenceNotFoundError(DbrefError, LookupError):
    """The store holds no entity for a ``(collection, id)`` pair."""

    def __init__(self, collection: str, ref_id: str) -> None:
        self.collection = collection
        self.id = ref_id
        super().__init__(f"Referenced '{collection}' '{ref_id}' could not be resolved")
