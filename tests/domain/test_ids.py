"""Tests for id generation, inserted-id extraction, and _id stripping."""

import pytest

from dbref.domain.ids import (
    InsertResult,
    extract_inserted_ids,
    generate_id,
    identity_matches,
    strip_ids,
    validate_id,
)


class TestGenerateId:
    def test_valid_format(self) -> None:
        assert validate_id(generate_id())

    def test_unique(self) -> None:
        assert len({generate_id() for _ in range(50)}) == 50


class TestValidateId:
    @pytest.mark.parametrize("value", ["0123456789abcdef01234567", "a" * 24])
    def test_accepts(self, value: str) -> None:
        assert validate_id(value)

    @pytest.mark.parametrize(
        "value",
        ["", "0123456789ABCDEF01234567", "0123456789abcdef0123456", "z" * 24, "a" * 25],
    )
    def test_rejects(self, value: str) -> None:
        assert not validate_id(value)


class TestIdentityMatches:
    def test_equal_strings(self) -> None:
        assert identity_matches("abc", "abc")

    def test_compares_string_form(self) -> None:
        assert identity_matches(7, "7")

    def test_none_never_matches(self) -> None:
        assert not identity_matches(None, "None")

    def test_different(self) -> None:
        assert not identity_matches("abc", "abd")


class TestExtractInsertedIds:
    def test_insert_one(self) -> None:
        result = InsertResult(inserted_id="someString")
        assert extract_inserted_ids(result) == "someString"

    def test_insert_many_positional_dict(self) -> None:
        result = InsertResult(inserted_ids={1: "test2", 0: "test1"})
        assert extract_inserted_ids(result) == ["test1", "test2"]

    def test_insert_many_list(self) -> None:
        result = InsertResult(inserted_ids=["a", "b"])
        assert extract_inserted_ids(result) == ["a", "b"]

    def test_nothing_inserted(self) -> None:
        assert extract_inserted_ids(InsertResult()) is None


class TestStripIds:
    def test_removes_at_every_depth(self) -> None:
        document = {
            "_id": "root",
            "child": {"_id": "c", "value": 1},
            "items": [{"_id": "i", "x": [{"_id": "deep"}]}],
        }
        assert strip_ids(document) == {"child": {"value": 1}, "items": [{"x": [{}]}]}

    def test_does_not_mutate(self) -> None:
        document = {"_id": "root", "child": {"_id": "c"}}
        strip_ids(document)
        assert document == {"_id": "root", "child": {"_id": "c"}}

    def test_custom_field(self) -> None:
        assert strip_ids({"uid": 1, "_id": 2}, "uid") == {"_id": 2}

    def test_leaf_unchanged(self) -> None:
        assert strip_ids("text") == "text"
