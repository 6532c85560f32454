"""Unit tests for JSON rendering."""

from __future__ import annotations

import json
import math

import pytest

from tagwire import (
    DecodeError,
    EncodeError,
    FieldSchema,
    FieldType,
    MessageSchema,
    UnknownField,
    from_json,
    to_json,
)


@pytest.fixture
def wide_schema() -> MessageSchema:
    """Schema exercising the JSON value mappings."""
    return MessageSchema(
        "Wide",
        [
            FieldSchema(1, "big", FieldType.INT64),
            FieldSchema(2, "ratio", FieldType.DOUBLE),
            FieldSchema(3, "raw", FieldType.BYTES),
            FieldSchema(4, "ids", FieldType.FIXED64, repeated=True),
            FieldSchema(5, "ok", FieldType.BOOL),
        ],
    )


class TestToJson:
    """Test record to JSON."""

    def test_person(self, person_schema: MessageSchema) -> None:
        """Test field numbers become names."""
        assert to_json({1: 123, 2: "Alice"}, person_schema) == '{"id": 123, "name": "Alice"}'

    def test_enum_names(
        self, contact_schema: MessageSchema, sample_contact: dict[int, object]
    ) -> None:
        """Test enum integers render as member names."""
        data = json.loads(to_json(sample_contact, contact_schema))

        assert data["phones"] == [
            {"number": "555-4321", "type": "HOME"},
            {"number": "555-0000", "type": "MOBILE"},
        ]
        assert data["tags"] == ["friend", "work"]
        assert data["avatar"] == "iVBORw=="

    def test_undeclared_enum_stays_numeric(self, phone_schema: MessageSchema) -> None:
        """Test values outside the enum class."""
        assert json.loads(to_json({2: 42}, phone_schema)) == {"type": 42}

    def test_value_mappings(self, wide_schema: MessageSchema) -> None:
        """Test 64-bit integers, bytes and floats."""
        data = json.loads(to_json({1: -(2**63), 2: math.inf, 3: b"hi", 4: [1, 2]}, wide_schema))

        assert data == {"big": str(-(2**63)), "ratio": "Infinity", "raw": "aGk=", "ids": ["1", "2"]}

    def test_nan(self, wide_schema: MessageSchema) -> None:
        """Test NaN renders as a string."""
        assert json.loads(to_json({2: math.nan}, wide_schema)) == {"ratio": "NaN"}

    def test_indent(self, person_schema: MessageSchema) -> None:
        """Test indent is passed through."""
        assert "\n" in to_json({1: 1}, person_schema, indent=2)

    def test_unknown_field(self, person_schema: MessageSchema) -> None:
        """Test records setting undeclared numbers."""
        with pytest.raises(UnknownField):
            to_json({5: 1}, person_schema)

    @pytest.mark.parametrize("value", [5, "abc", None])
    def test_repeated_requires_list(self, value: object) -> None:
        """Test repeated fields reject scalars, strings included."""
        schema = MessageSchema("Tags", [FieldSchema(1, "tags", FieldType.STRING, repeated=True)])
        with pytest.raises(EncodeError):
            to_json({1: value}, schema)

    def test_none_value(self, person_schema: MessageSchema) -> None:
        """Test None is not rendered as null."""
        with pytest.raises(EncodeError, match="None"):
            to_json({2: None}, person_schema)


class TestFromJson:
    """Test JSON to record."""

    def test_roundtrip(
        self, contact_schema: MessageSchema, sample_contact: dict[int, object]
    ) -> None:
        """Test to_json output parses back to the same record."""
        assert from_json(to_json(sample_contact, contact_schema), contact_schema) == sample_contact

    def test_wide_roundtrip(self, wide_schema: MessageSchema) -> None:
        """Test 64-bit strings, base64 and non-finite floats parse back."""
        record = {1: 2**62, 2: -math.inf, 3: b"\x00\xff", 4: [2**64 - 1], 5: False}
        assert from_json(to_json(record, wide_schema), wide_schema) == record

    def test_enum_by_number(self, phone_schema: MessageSchema) -> None:
        """Test enum fields accept integers."""
        assert from_json('{"type": 2}', phone_schema) == {2: 2}

    def test_unknown_enum_name(self, phone_schema: MessageSchema) -> None:
        """Test undeclared enum names fail."""
        with pytest.raises(DecodeError, match="unknown enum name"):
            from_json('{"type": "FAX"}', phone_schema)

    def test_int64_as_number(self, wide_schema: MessageSchema) -> None:
        """Test 64-bit fields accept plain numbers."""
        assert from_json('{"big": 5}', wide_schema) == {1: 5}

    def test_null_is_unset(self, person_schema: MessageSchema) -> None:
        """Test JSON null leaves the field out."""
        assert from_json('{"id": 1, "name": null}', person_schema) == {1: 1}

    def test_unknown_key(self, person_schema: MessageSchema) -> None:
        """Test unknown keys fail unless ignored."""
        with pytest.raises(UnknownField):
            from_json('{"id": 1, "age": 3}', person_schema)

        assert from_json('{"id": 1, "age": 3}', person_schema, ignore_unknown_fields=True) == {1: 1}

    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            "[1, 2]",
            '{"name": 5}',
            '{"id": "abc"}',
            '{"id": true}',
        ],
    )
    def test_invalid_input(self, person_schema: MessageSchema, text: str) -> None:
        """Test malformed JSON and wrongly shaped values."""
        with pytest.raises(DecodeError):
            from_json(text, person_schema)

    def test_invalid_base64(self, wide_schema: MessageSchema) -> None:
        """Test bytes fields require valid base64."""
        with pytest.raises(DecodeError, match="base64"):
            from_json('{"raw": "!!"}', wide_schema)
