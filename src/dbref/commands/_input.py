"""JSON input handling shared by commands that read documents."""

from __future__ import annotations

import json
from typing import IO, Any

from dbref.services.result import ServiceResult


def read_json(op: str, source: IO[str]) -> tuple[Any, ServiceResult | None]:
    """Parse JSON from *source*.

    Returns ``(payload, None)`` on success or ``(None, failure)`` when the
    input is not valid JSON.
    """
    name = getattr(source, "name", "<stdin>")
    try:
        return json.load(source), None
    except json.JSONDecodeError as exc:
        return None, ServiceResult.failure(
            op, "INVALID_INPUT", f"Invalid JSON in {name}: {exc}", source=str(name)
        )
