"""JSON rendering of records.

Records are rendered with field names as keys, following the Protocol Buffers
JSON mapping for value shapes:

- enum values by symbolic name (undeclared values stay numeric)
- bytes as standard base64
- 64-bit integers as decimal strings
- non-finite floats as "NaN", "Infinity", "-Infinity"

This is a convenience layer over the same record model, not a wire format.
"""

from __future__ import annotations

import base64
import binascii
import json
import math
from collections.abc import Mapping
from typing import Any, Optional

from .codec.encoder import check_repeated
from .codec.schema import FieldSchema, FieldType, MessageSchema
from .exceptions import DecodeError, EncodeError, UnknownField

_NON_FINITE = {"NaN": math.nan, "Infinity": math.inf, "-Infinity": -math.inf}


def to_json(
    record: Mapping[int, Any], schema: MessageSchema, *, indent: Optional[int] = None
) -> str:
    """Render a record as JSON text keyed by field name.

    Args:
        record: Mapping from field number to value
        schema: Schema of the record
        indent: Passed to json.dumps

    Returns:
        JSON text

    Raises:
        UnknownField: If the record sets a number the schema lacks
        EncodeError: If a value cannot be rendered

    Example:
        >>> to_json({1: 123, 2: "Alice"}, person)
        '{"id": 123, "name": "Alice"}'
    """
    return json.dumps(_record_to_json(record, schema), indent=indent)


def from_json(
    text: str | bytes, schema: MessageSchema, *, ignore_unknown_fields: bool = False
) -> dict[int, Any]:
    """Parse JSON text produced by to_json() back into a record.

    Enum fields accept member names or integers; 64-bit integer fields accept
    numbers or decimal strings. JSON null leaves a field unset.

    Args:
        text: JSON text
        schema: Schema of the record
        ignore_unknown_fields: Drop keys the schema lacks instead of raising

    Returns:
        Record mapping field number to value

    Raises:
        UnknownField: If a key is not declared and ignore_unknown_fields is False
        DecodeError: If the text is not valid JSON or a value has the wrong shape
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON: {e}") from e
    return _record_from_json(data, schema, ignore_unknown_fields)


def _record_to_json(record: Mapping[int, Any], schema: MessageSchema) -> dict[str, Any]:
    for number in record:
        if number not in schema:
            raise UnknownField(number, schema.name)

    rendered: dict[str, Any] = {}
    for field in schema:
        if field.number not in record:
            continue
        value = record[field.number]
        if value is None:
            raise EncodeError(f"Field {field.name}: None is not a value")
        if field.repeated:
            check_repeated(field, value)
            rendered[field.name] = [_value_to_json(field, element) for element in value]
        else:
            rendered[field.name] = _value_to_json(field, value)
    return rendered


def _value_to_json(field: FieldSchema, value: Any) -> Any:
    if field.type is FieldType.MESSAGE:
        assert field.message is not None
        return _record_to_json(value, field.message)

    if field.type is FieldType.ENUM:
        number = int(getattr(value, "value", value))
        name = field.enum_name(number)
        return name if name is not None else number

    if field.type is FieldType.BYTES:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise EncodeError(f"Field {field.name}: expected bytes, got {type(value).__name__}")
        return base64.b64encode(bytes(value)).decode("ascii")

    if field.type in (FieldType.FLOAT, FieldType.DOUBLE):
        value = float(value)
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return value

    if field.type.is_64bit:
        return str(int(value))

    return value


def _record_from_json(data: Any, schema: MessageSchema, ignore_unknown: bool) -> dict[int, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"{schema.name}: expected a JSON object, got {type(data).__name__}")

    record: dict[int, Any] = {}
    for name, value in data.items():
        field = schema.field_by_name(name)
        if field is None:
            if ignore_unknown:
                continue
            raise UnknownField(name, schema.name)
        if value is None:
            continue

        if field.repeated:
            if not isinstance(value, list):
                raise DecodeError(f"Field {name}: expected a JSON array")
            record[field.number] = [
                _value_from_json(field, element, ignore_unknown) for element in value
            ]
        else:
            record[field.number] = _value_from_json(field, value, ignore_unknown)
    return record


def _value_from_json(field: FieldSchema, value: Any, ignore_unknown: bool) -> Any:
    field_type = field.type

    if field_type is FieldType.MESSAGE:
        assert field.message is not None
        return _record_from_json(value, field.message, ignore_unknown)

    if field_type is FieldType.STRING:
        if not isinstance(value, str):
            raise DecodeError(f"Field {field.name}: expected a string")
        return value

    if field_type is FieldType.BYTES:
        if not isinstance(value, str):
            raise DecodeError(f"Field {field.name}: expected base64 text")
        try:
            return base64.b64decode(value, validate=True)
        except binascii.Error as e:
            raise DecodeError(f"Field {field.name}: invalid base64: {e}") from e

    if field_type is FieldType.BOOL:
        if not isinstance(value, bool):
            raise DecodeError(f"Field {field.name}: expected true or false")
        return value

    if field_type in (FieldType.FLOAT, FieldType.DOUBLE):
        if isinstance(value, str) and value in _NON_FINITE:
            return _NON_FINITE[value]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DecodeError(f"Field {field.name}: expected a number")
        return float(value)

    if field_type is FieldType.ENUM and isinstance(value, str):
        number = field.enum_value(value)
        if number is None:
            raise DecodeError(f"Field {field.name}: unknown enum name {value!r}")
        return number

    return _parse_integer(field, value)


def _parse_integer(field: FieldSchema, value: Any) -> int:
    if isinstance(value, bool):
        raise DecodeError(f"Field {field.name}: expected an integer, got a boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError as e:
            raise DecodeError(f"Field {field.name}: invalid integer {value!r}") from e
    raise DecodeError(f"Field {field.name}: expected an integer, got {type(value).__name__}")
