"""Binary encoder for records and pydantic messages.

This module provides encode(), which turns a record (a mapping from field
number to value) into tag-prefixed binary form, and encode_message(), which
does the same for a pydantic BaseMessage instance.
"""

from __future__ import annotations

import enum
import math
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel

from ..exceptions import EncodeError, MalformedVarint, UnknownField
from ..options import DEFAULT_OPTIONS, CodecOptions
from .record import from_named
from .schema import FieldSchema, FieldType, MessageSchema, WireType
from .varint import MAX_VARINT, BufferWriter, zigzag_encode

Record = Mapping[int, Any]


def encode(
    record: Record, schema: MessageSchema, options: Optional[CodecOptions] = None
) -> bytes:
    """Encode a record to binary.

    Fields are written in ascending field-number order so that equal records
    always produce equal bytes. Repeated fields emit one tag-prefixed entry
    per element, in list order.

    Args:
        record: Mapping from field number to value
        schema: Schema declaring every field the record sets
        options: Codec options (defaults to DEFAULT_OPTIONS)

    Returns:
        Encoded bytes

    Raises:
        UnknownField: If the record sets a field number the schema lacks
        EncodeError: If a value has the wrong kind or is out of range
        MalformedVarint: If a varint value does not fit in 64 bits

    Examples:
        ```python
        from tagwire import FieldSchema, FieldType, MessageSchema, encode

        person = MessageSchema(
            "Person",
            [FieldSchema(1, "id", FieldType.INT32), FieldSchema(2, "name", FieldType.STRING)],
        )
        encode({1: 123, 2: "Alice"}, person).hex()
        # '087b1205416c696365'
        ```
    """
    writer = BufferWriter()
    _encode_record(writer, record, schema, options or DEFAULT_OPTIONS, depth=1)
    return writer.to_bytes()


def encode_message(message: BaseModel, options: Optional[CodecOptions] = None) -> bytes:
    """Encode a pydantic message declared with WireField().

    Fields left as None are treated as unset.

    Args:
        message: Message instance
        options: Codec options

    Returns:
        Encoded bytes

    Raises:
        SchemaError: If the message class cannot be turned into a schema
        EncodeError: If a field value cannot be encoded
    """
    schema = MessageSchema.from_model(type(message))
    record = from_named(message.model_dump(exclude_none=True), schema)
    return encode(record, schema, options)


def _encode_record(
    writer: BufferWriter,
    record: Record,
    schema: MessageSchema,
    options: CodecOptions,
    depth: int,
) -> None:
    if not isinstance(record, Mapping):
        raise EncodeError(f"{schema.name}: expected a mapping, got {type(record).__name__}")
    if depth > options.max_depth:
        raise EncodeError(f"{schema.name}: nesting deeper than max_depth={options.max_depth}")

    for number in record:
        if number not in schema:
            raise UnknownField(number, schema.name)

    for field in schema:
        if field.number not in record:
            continue
        value = record[field.number]

        if value is None:
            raise EncodeError(
                f"Field {field.name}: None is not a value; leave unset fields out of the record"
            )

        if field.repeated:
            check_repeated(field, value)
            for element in value:
                _encode_field(writer, field, element, options, depth)
            continue

        if options.omit_defaults and is_default_value(field, value):
            continue

        _encode_field(writer, field, value, options, depth)


def _encode_field(
    writer: BufferWriter, field: FieldSchema, value: Any, options: CodecOptions, depth: int
) -> None:
    """Write one tag-prefixed entry.

    Raises:
        EncodeError: If value is invalid for the field type
    """
    field_type = field.type
    writer.write_tag(field.number, field.wire_type)

    if field_type is FieldType.MESSAGE:
        assert field.message is not None
        nested = BufferWriter()
        _encode_record(nested, value, field.message, options, depth + 1)
        writer.write_length_delimited(nested.to_bytes())
        return

    if field_type is FieldType.STRING:
        if not isinstance(value, str):
            raise EncodeError(f"Field {field.name}: expected str, got {type(value).__name__}")
        writer.write_length_delimited(value.encode("utf-8"))
        return

    if field_type is FieldType.BYTES:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise EncodeError(f"Field {field.name}: expected bytes, got {type(value).__name__}")
        writer.write_length_delimited(bytes(value))
        return

    if field_type is FieldType.BOOL:
        if not isinstance(value, bool):
            raise EncodeError(f"Field {field.name}: expected bool, got {type(value).__name__}")
        writer.write_varint(1 if value else 0)
        return

    if field_type in (FieldType.FLOAT, FieldType.DOUBLE):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise EncodeError(f"Field {field.name}: expected float, got {type(value).__name__}")
        if field_type is FieldType.FLOAT:
            try:
                writer.write_float(float(value))
            except OverflowError as err:
                raise EncodeError(f"Field {field.name}: {value} does not fit a 32-bit float") from err
        else:
            writer.write_double(float(value))
        return

    integer = _check_integer(field, value)

    if field.wire_type is WireType.VARINT:
        if field_type in (FieldType.SINT32, FieldType.SINT64):
            writer.write_varint(zigzag_encode(integer))
        else:
            # Negative int32/int64/enum values go out as 64-bit two's complement
            writer.write_varint(integer & MAX_VARINT)
    elif field.wire_type is WireType.I32:
        writer.write_fixed32(integer)
    else:
        writer.write_fixed64(integer)


def _check_integer(field: FieldSchema, value: Any) -> int:
    if field.type is FieldType.ENUM and isinstance(value, enum.Enum):
        value = value.value
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodeError(f"Field {field.name}: expected int, got {type(value).__name__}")

    if field.wire_type is WireType.VARINT and not -(2**63) <= value <= MAX_VARINT:
        raise MalformedVarint(f"Field {field.name}: value {value} does not fit a 64-bit varint")

    bounds = field.type.bounds
    assert bounds is not None
    low, high = bounds
    if value < low or value > high:
        raise EncodeError(
            f"Field {field.name}: value {value} out of bounds for {field.type.value} [{low}, {high}]"
        )
    return int(value)


def check_repeated(field: FieldSchema, value: Any) -> None:
    """Raise EncodeError unless value is a list or tuple of entries for field."""
    if not isinstance(value, (list, tuple)):
        raise EncodeError(
            f"Field {field.name}: repeated field expects a list, got {type(value).__name__}"
        )


def is_default_value(field: FieldSchema, value: Any) -> bool:
    """Return True if value is the zero value omit_defaults skips for field."""
    if field.type is FieldType.MESSAGE:
        return False
    if isinstance(value, enum.Enum):
        value = value.value
    if isinstance(value, float):
        # -0.0 is distinguishable on the wire
        return value == 0.0 and not math.copysign(1.0, value) < 0
    return value in (0, False, "", b"")
