"""SQLAlchemy Core table definitions for the dbref document store.

Each row holds one JSON document. The ``_id`` field is stored in the
``id`` column and stripped from ``body``; :class:`DocumentStore` puts it
back on read.
"""

from __future__ import annotations

from sqlalchemy import Column, MetaData, PrimaryKeyConstraint, Table, Text

metadata = MetaData()

documents = Table(
    "documents",
    metadata,
    Column("collection", Text, nullable=False),
    Column("id", Text, nullable=False),
    Column("body", Text, nullable=False),  # JSON object
    Column("created", Text, nullable=False),
    PrimaryKeyConstraint("collection", "id"),
)
