"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, dbref.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from dbref.domain.ids import ID_FIELD


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    path: str = ".dbref/dbref.db"


class ResolveConfig(BaseModel):
    """[resolve] section.

    ``max_depth`` and ``collections`` left unset mean unbounded and
    all collections respectively.
    """

    model_config = {"frozen": True}

    max_depth: int | None = None
    collections: list[str] | None = None
    id_field: str = ID_FIELD
    strip_ids: bool = False

    @field_validator("max_depth")
    @classmethod
    def _non_negative(cls, value: int | None) -> int | None:
        if value is not None and value < 0:
            msg = "max_depth must be non-negative"
            raise ValueError(msg)
        return value


class DbrefConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    store: StoreConfig = Field(default_factory=StoreConfig)
    resolve: ResolveConfig = Field(default_factory=ResolveConfig)
