"""Tree model for documents containing DbRefs.

A document is treated as a tree: dicts and lists are inner nodes, every
other value is an opaque leaf. A DbRef is a dict carrying both a
``collection`` and an ``id`` key::

    {"collection": "nameOfACollection", "id": "documentIdInStringForm"}

Extra keys do not disqualify a dict from being a DbRef.

Pure functions, no infrastructure dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from dbref.domain.errors import InvalidDocumentError

type Key = str | int
type Path = tuple[Key, ...]


class NodeKind(StrEnum):
    """The four shapes a document node can take."""

    LEAF = "leaf"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    REFERENCE = "reference"


@dataclass(frozen=True)
class Child:
    """An inner-node child paired with its key in the parent."""

    key: Key
    node: Any


@dataclass(frozen=True)
class DbRef:
    """A pointer to an entity in a named collection."""

    collection: str
    id: str

    @classmethod
    def from_node(cls, node: dict[str, Any]) -> DbRef:
        return cls(collection=str(node["collection"]), id=str(node["id"]))

    def to_node(self) -> dict[str, str]:
        return {"collection": self.collection, "id": self.id}


def classify(node: Any) -> NodeKind:
    """Determine which :class:`NodeKind` *node* belongs to."""
    if isinstance(node, dict):
        if "collection" in node and "id" in node:
            return NodeKind.REFERENCE
        return NodeKind.MAPPING
    if isinstance(node, list):
        return NodeKind.SEQUENCE
    return NodeKind.LEAF


def is_inner_node(node: Any) -> bool:
    """True for lists and dicts, the values that can nest."""
    return classify(node) is not NodeKind.LEAF


def is_leaf(node: Any) -> bool:
    return classify(node) is NodeKind.LEAF


def is_reference(node: Any) -> bool:
    return classify(node) is NodeKind.REFERENCE


def children(node: Any) -> list[Child]:
    """Return the children of *node* that are themselves inner nodes.

    Leaf children are skipped since they can never hold a DbRef. Keys are
    list indices for list parents and dict keys for dict parents.

    Raises:
        InvalidDocumentError: If *node* is a leaf.
    """
    kind = classify(node)
    if kind is NodeKind.LEAF:
        msg = f"Leaf of type {type(node).__name__} has no children"
        raise InvalidDocumentError(msg)
    items = enumerate(node) if kind is NodeKind.SEQUENCE else node.items()
    return [Child(key=key, node=value) for key, value in items if is_inner_node(value)]


def get_path(root: Any, path: Path) -> Any:
    """Follow *path* from *root* and return the node found there."""
    node = root
    for key in path:
        node = node[key]
    return node


def set_path(root: Any, path: Path, value: Any) -> Any:
    """Return a copy of *root* with *value* placed at *path*.

    Only the containers along *path* are shallow-copied; everything off
    the path is shared with *root*, which is never mutated. A subtree
    reachable through several paths therefore changes only along the one
    written to. An empty path returns *value* itself.
    """
    if not path:
        return value
    key, rest = path[0], path[1:]
    container = list(root) if isinstance(root, list) else dict(root)
    container[key] = set_path(root[key], rest, value)  # type: ignore[index]
    return container
