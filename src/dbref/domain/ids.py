"""Identity helpers — id generation, inserted-id extraction, ``_id`` stripping.

Documents carry their identity in an ``_id`` field (configurable).
DbRefs carry the same identity as a string in their ``id`` field, so
all comparisons between the two are done on the string form.
"""

from __future__ import annotations

import re
import secrets
from dataclasses import dataclass
from typing import Any

ID_FIELD = "_id"

ID_PATTERN = re.compile(r"^[0-9a-f]{24}$")


@dataclass(frozen=True)
class InsertResult:
    """Outcome of a store insert: one id, or ids keyed by input position."""

    inserted_id: str | None = None
    inserted_ids: dict[int, str] | list[str] | None = None


def generate_id() -> str:
    """Return a random 24-character lowercase hex id."""
    return secrets.token_hex(12)


def validate_id(value: str) -> bool:
    """Check whether *value* looks like an id produced by :func:`generate_id`."""
    return ID_PATTERN.match(value) is not None


def identity_matches(value: Any, ref_id: str) -> bool:
    """Compare an identity field value with a DbRef id by string form."""
    if value is None:
        return False
    return str(value) == str(ref_id)


def extract_inserted_ids(result: InsertResult) -> str | list[str] | None:
    """Extract the id(s) produced by an insert.

    A multi-document insert yields a list of string ids ordered by input
    position. A single-document insert yields its ``inserted_id`` as-is.
    """
    inserted = result.inserted_ids
    if isinstance(inserted, dict):
        ids: list[str] = [""] * len(inserted)
        for position, value in inserted.items():
            ids[int(position)] = str(value)
        return ids
    if isinstance(inserted, list):
        return [str(value) for value in inserted]
    return result.inserted_id


def strip_ids(document: Any, id_field: str = ID_FIELD) -> Any:
    """Return a copy of *document* without any *id_field* keys, at any depth.

    Leaves are returned unchanged.
    """
    if isinstance(document, list):
        return [strip_ids(item, id_field) for item in document]
    if isinstance(document, dict):
        return {
            key: strip_ids(value, id_field) for key, value in document.items() if key != id_field
        }
    return document
