"""Tests for ServiceResult and ServiceError."""

import json

import pytest
from pydantic import ValidationError

from dbref.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="insert", data={"ids": ["a"]})
        assert result.ok is True
        assert result.op == "insert"
        assert result.data == {"ids": ["a"]}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_failure_shorthand(self) -> None:
        result = ServiceResult.failure("get", "NOT_FOUND", "missing", collection="c", id="1")
        assert result.ok is False
        assert result.data == {}
        assert result.error == ServiceError(
            code="NOT_FOUND", message="missing", detail={"collection": "c", "id": "1"}
        )

    def test_json_serialization(self) -> None:
        result = ServiceResult(
            ok=True, op="resolve_document", data={"document": {"a": 1}}, meta={"x": 42}
        )
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["op"] == "resolve_document"
        assert parsed["data"]["document"] == {"a": 1}
        assert parsed["meta"]["x"] == 42

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="test")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]


class TestServiceError:
    def test_detail_defaults_empty(self) -> None:
        assert ServiceError(code="INVALID_INPUT", message="bad").detail == {}
