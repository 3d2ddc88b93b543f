"""Resolution engine — breadth-first DbRef resolution with memoization.

Walks a document level by level, replacing every admitted DbRef with the
entity it points to. The walk:

- fetches each distinct entity id at most once per call (memo cache),
- refuses DbRefs whose target is an ancestor on the same path (cycle guard),
- refuses DbRefs to collections outside the allow-list, if one is given,
- stops descending once a path has taken ``max_depth`` resolution hops.

Depth counts resolved DbRefs along a path, not object nesting.

PRECONDITION: with ``max_depth=None`` the reachable DbRef graph must be
acyclic apart from direct ancestor cycles. Cross-branch cycles are not
detected and will not terminate.

The traversal is a generator that yields each DbRef it needs fetched and
receives the entity back, so the sync and async drivers share one
implementation and the same step order.
"""

from __future__ import annotations

import copy
import inspect
import logging
from collections import deque
from collections.abc import Callable, Generator, Iterable
from typing import Any

from dbref.domain.errors import InvalidDocumentError
from dbref.domain.ids import ID_FIELD, identity_matches
from dbref.domain.tree import DbRef, Path, children, is_leaf, is_reference, set_path

logger = logging.getLogger(__name__)

type FetchEntity = Callable[[str, str], Any]

REFUSED_COLLECTION = "collection"
REFUSED_CYCLE = "cycle"


def refusal_reason(
    root: Any,
    path: Path,
    collections: frozenset[str] | None,
    ref: DbRef,
    *,
    id_field: str = ID_FIELD,
) -> str | None:
    """Return why the DbRef at *path* must not be resolved, or None to admit it.

    Walks *root* from the top along *path* and refuses when any ancestor
    carries *id_field* equal to the DbRef id.
    """
    if collections is not None and ref.collection not in collections:
        return REFUSED_COLLECTION
    node = root
    for key in path:
        if isinstance(node, dict) and identity_matches(node.get(id_field), ref.id):
            return REFUSED_CYCLE
        node = node[key]
    return None


def should_resolve(
    root: Any,
    path: Path,
    collections: Iterable[str] | None,
    ref: DbRef,
    *,
    id_field: str = ID_FIELD,
) -> bool:
    """Admission policy for a DbRef located at *path* in *root*."""
    allowed = None if collections is None else frozenset(collections)
    return refusal_reason(root, path, allowed, ref, id_field=id_field) is None


class Resolver:
    """Resolve DbRefs in documents through an injected *fetch_entity* capability.

    Args:
        fetch_entity: ``fetch_entity(collection, id)`` returning the entity,
            or an awaitable of it when used with :meth:`resolve_async`. Must
            raise :class:`~dbref.domain.errors.ReferenceNotFoundError` when
            the entity does not exist. Failures propagate unchanged.
        collections: Collections whose DbRefs may be resolved. None means all,
            an empty collection means none.
        max_depth: Maximum resolution hops along any path. None is unbounded.
        id_field: Identity field used by the cycle guard.
    """

    def __init__(
        self,
        fetch_entity: FetchEntity,
        collections: Iterable[str] | None = None,
        max_depth: int | None = None,
        *,
        id_field: str = ID_FIELD,
    ) -> None:
        if max_depth is not None and max_depth < 0:
            msg = f"max_depth must be non-negative, got {max_depth}"
            raise ValueError(msg)
        self._fetch_entity = fetch_entity
        self.collections = None if collections is None else frozenset(collections)
        self.max_depth = max_depth
        self.id_field = id_field
        self.fetches = 0

    def resolve(self, document: Any) -> Any:
        """Return a copy of *document* with admitted DbRefs replaced."""
        walk = self._walk(document)
        try:
            ref = next(walk)
            while True:
                ref = walk.send(self._fetch(ref))
        except StopIteration as stop:
            return stop.value
        finally:
            walk.close()

    async def resolve_async(self, document: Any) -> Any:
        """Like :meth:`resolve`, awaiting *fetch_entity* when it returns an awaitable."""
        walk = self._walk(document)
        try:
            ref = next(walk)
            while True:
                entity = self._fetch(ref)
                if inspect.isawaitable(entity):
                    entity = await entity
                ref = walk.send(entity)
        except StopIteration as stop:
            return stop.value
        finally:
            walk.close()

    def _fetch(self, ref: DbRef) -> Any:
        self.fetches += 1
        logger.debug("reference.fetch: %s/%s", ref.collection, ref.id)
        return self._fetch_entity(ref.collection, ref.id)

    def _walk(self, document: Any) -> Generator[DbRef, Any, Any]:
        if is_leaf(document):
            msg = f"Invalid document type: {type(document).__name__}. Expected list or dict."
            raise InvalidDocumentError(msg)

        # Each entry keeps its path from the root so a resolved entity can
        # be written back into the result and ancestors checked for cycles.
        queue: deque[tuple[Any, int, Path]] = deque([(document, 0, ())])
        memo: dict[str, Any] = {}
        result = copy.deepcopy(document)
        steps = memo_hits = 0

        while queue:
            node, depth, path = queue.popleft()
            steps += 1
            if self.max_depth is not None and depth >= self.max_depth:
                continue

            if is_reference(node):
                ref = DbRef.from_node(node)
                reason = refusal_reason(
                    result, path, self.collections, ref, id_field=self.id_field
                )
                if reason is None:
                    if ref.id in memo:
                        memo_hits += 1
                        logger.debug("reference.memo_hit: %s/%s", ref.collection, ref.id)
                        node = memo[ref.id]
                    else:
                        node = yield ref
                        memo[ref.id] = node
                    # set_path copies the containers along the path, so a
                    # subtree shared with another path keeps its old value.
                    result = set_path(result, path, copy.deepcopy(node))
                    depth += 1
                else:
                    logger.debug(
                        "reference.refused: %s/%s reason=%s", ref.collection, ref.id, reason
                    )

            for child in children(node):
                queue.append((child.node, depth, (*path, child.key)))

        logger.debug(
            "resolve.complete: steps=%d fetches=%d memo_hits=%d", steps, len(memo), memo_hits
        )
        return result


def resolve(
    fetch_entity: FetchEntity,
    document: Any,
    collections: Iterable[str] | None = None,
    max_depth: int | None = None,
    *,
    id_field: str = ID_FIELD,
) -> Any:
    """Resolve DbRefs in *document* and return the resolved copy.

    See :class:`Resolver` for the meaning of the arguments.
    """
    return Resolver(fetch_entity, collections, max_depth, id_field=id_field).resolve(document)


async def resolve_async(
    fetch_entity: FetchEntity,
    document: Any,
    collections: Iterable[str] | None = None,
    max_depth: int | None = None,
    *,
    id_field: str = ID_FIELD,
) -> Any:
    """Async counterpart of :func:`resolve` for awaitable fetch capabilities."""
    resolver = Resolver(fetch_entity, collections, max_depth, id_field=id_field)
    return await resolver.resolve_async(document)
