"""Conversion between number-keyed records and name-keyed dictionaries."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..exceptions import EncodeError, UnknownField
from .schema import FieldSchema, FieldType, MessageSchema


def to_named(record: Mapping[int, Any], schema: MessageSchema) -> dict[str, Any]:
    """Re-key a record by field name, recursing into nested messages.

    Args:
        record: Mapping from field number to value
        schema: Schema of the record

    Returns:
        Dictionary keyed by field name, in field-number order

    Raises:
        UnknownField: If the record holds a number the schema lacks
    """
    for number in record:
        if number not in schema:
            raise UnknownField(number, schema.name)

    named: dict[str, Any] = {}
    for field in schema:
        if field.number in record:
            named[field.name] = _convert(field, record[field.number], to_named)
    return named


def from_named(
    data: Mapping[str, Any], schema: MessageSchema, *, ignore_unknown_fields: bool = False
) -> dict[int, Any]:
    """Re-key a name-keyed dictionary by field number.

    Args:
        data: Dictionary keyed by field name
        schema: Schema of the record
        ignore_unknown_fields: Drop names the schema lacks instead of raising

    Returns:
        Record keyed by field number

    Raises:
        UnknownField: If a name is not declared and ignore_unknown_fields is False
    """

    def convert_nested(value: Mapping[str, Any], nested: MessageSchema) -> dict[int, Any]:
        return from_named(value, nested, ignore_unknown_fields=ignore_unknown_fields)

    record: dict[int, Any] = {}
    for name, value in data.items():
        field = schema.field_by_name(name)
        if field is None:
            if ignore_unknown_fields:
                continue
            raise UnknownField(name, schema.name)
        record[field.number] = _convert(field, value, convert_nested)
    return record


def _convert(field: FieldSchema, value: Any, convert_nested: Any) -> Any:
    if field.type is not FieldType.MESSAGE or value is None:
        return value
    assert field.message is not None

    if field.repeated:
        if not isinstance(value, (list, tuple)):
            raise EncodeError(f"Field {field.name}: repeated field expects a list")
        return [_nested(field, element, convert_nested) for element in value]
    return _nested(field, value, convert_nested)


def _nested(field: FieldSchema, value: Any, convert_nested: Any) -> Any:
    if not isinstance(value, Mapping):
        raise EncodeError(f"Field {field.name}: expected a mapping, got {type(value).__name__}")
    return convert_nested(value, field.message)
