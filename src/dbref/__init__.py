"""dbref — resolve DbRefs in JSON documents against a document store."""

from dbref.domain.errors import DbrefError, InvalidDocumentError, ReferenceNotFoundError
from dbref.domain.ids import extract_inserted_ids, strip_ids
from dbref.domain.resolution import Resolver, resolve, resolve_async, should_resolve
from dbref.domain.tree import DbRef, children, is_inner_node, is_leaf, is_reference

__version__ = "0.3.0"

__all__ = [
    "DbRef",
    "DbrefError",
    "InvalidDocumentError",
    "ReferenceNotFoundError",
    "Resolver",
    "__version__",
    "children",
    "extract_inserted_ids",
    "is_inner_node",
    "is_leaf",
    "is_reference",
    "resolve",
    "resolve_async",
    "should_resolve",
    "strip_ids",
]
