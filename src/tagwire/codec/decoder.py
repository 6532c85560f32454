"""Binary decoder for records and pydantic messages.

This module provides decode(), which scans tag-prefixed binary data against a
schema and rebuilds the record, and decode_message(), which validates the
result into a pydantic BaseMessage instance.
"""

from __future__ import annotations

from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError
from structlog import get_logger

from ..exceptions import DecodeError, WireTypeMismatch
from ..options import DEFAULT_OPTIONS, CodecOptions
from .record import to_named
from .schema import FieldSchema, FieldType, MessageSchema, WireType
from .varint import BufferReader, to_signed, zigzag_decode

logger = get_logger()

_INT32_MAX = 2**31 - 1
_UINT32_MAX = 2**32 - 1
_SIGN_EXTENDED_INT32_MIN = 2**64 - 2**31

T = TypeVar("T", bound=BaseModel)


def decode(
    data: bytes, schema: MessageSchema, options: Optional[CodecOptions] = None
) -> dict[int, Any]:
    """Decode binary data to a record.

    Unknown field numbers are skipped using their wire type's length rule, so
    data written with a newer schema decodes under an older one. A singular
    field seen more than once keeps its last value; repeated fields collect
    every entry in encounter order.

    Args:
        data: Encoded bytes
        schema: Schema to decode against
        options: Codec options (defaults to DEFAULT_OPTIONS)

    Returns:
        Record mapping field number to value

    Raises:
        TruncatedBuffer: If data ends inside a tag or payload
        WireTypeMismatch: If a known field arrives with the wrong wire type
        MalformedVarint: If a varint exceeds 64 bits
        DecodeError: For any other malformed input

    Examples:
        ```python
        from tagwire import decode

        decode(bytes.fromhex("087b1205416c696365"), person)
        # {1: 123, 2: 'Alice'}
        ```
    """
    return _decode_record(bytes(data), schema, options or DEFAULT_OPTIONS, depth=1)


def decode_message(
    message_class: type[T], data: bytes, options: Optional[CodecOptions] = None
) -> T:
    """Decode binary data to a pydantic message declared with WireField().

    Args:
        message_class: Message class to decode to
        data: Encoded bytes

    Returns:
        Validated message instance

    Raises:
        DecodeError: If data is malformed or the decoded values fail validation
    """
    schema = MessageSchema.from_model(message_class)
    record = decode(data, schema, options)
    try:
        return message_class.model_validate(to_named(record, schema))
    except ValidationError as e:
        raise DecodeError(f"Failed to construct {message_class.__name__}: {e}") from e


def skip_field(reader: BufferReader, wire_type: int) -> None:
    """Consume one payload of the given wire type without interpreting it.

    Raises:
        DecodeError: If the wire type is not supported
    """
    if wire_type == WireType.VARINT:
        reader.read_varint()
    elif wire_type == WireType.I64:
        reader.read_bytes(8)
    elif wire_type == WireType.I32:
        reader.read_bytes(4)
    elif wire_type == WireType.LENGTH_DELIMITED:
        reader.read_length_delimited()
    else:
        raise DecodeError(f"Unsupported wire type {wire_type} at offset {reader.position()}")


def _decode_record(
    data: bytes, schema: MessageSchema, options: CodecOptions, depth: int
) -> dict[int, Any]:
    if depth > options.max_depth:
        raise DecodeError(f"{schema.name}: nesting deeper than max_depth={options.max_depth}")

    reader = BufferReader(data)
    record: dict[int, Any] = {}

    while not reader.at_end():
        number, wire_type = reader.read_tag()
        if number == 0:
            raise DecodeError(f"{schema.name}: field number 0 at offset {reader.position()}")

        field = schema.field_by_number(number)
        if field is None:
            logger.debug(
                "skipping unknown field", message=schema.name, number=number, wire_type=wire_type
            )
            skip_field(reader, wire_type)
            continue

        if wire_type != field.wire_type:
            raise WireTypeMismatch(field.name, number, field.wire_type, wire_type)

        value = _decode_value(reader, field, options, depth)
        if field.repeated:
            record.setdefault(number, []).append(value)
        else:
            record[number] = value

    return record


def _decode_value(reader: BufferReader, field: FieldSchema, options: CodecOptions, depth: int) -> Any:
    """Decode the payload of one entry whose tag has already been read."""
    field_type = field.type

    if field_type is FieldType.MESSAGE:
        assert field.message is not None
        payload = reader.read_length_delimited()
        return _decode_record(payload, field.message, options, depth + 1)

    if field_type is FieldType.STRING:
        raw_bytes = reader.read_length_delimited()
        try:
            return raw_bytes.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Field {field.name}: invalid UTF-8 encoding: {e}") from e

    if field_type is FieldType.BYTES:
        return reader.read_length_delimited()

    if field_type is FieldType.FLOAT:
        return reader.read_float()
    if field_type is FieldType.DOUBLE:
        return reader.read_double()

    if field_type is FieldType.FIXED32:
        return reader.read_fixed32()
    if field_type is FieldType.SFIXED32:
        return to_signed(reader.read_fixed32(), 32)
    if field_type is FieldType.FIXED64:
        return reader.read_fixed64()
    if field_type is FieldType.SFIXED64:
        return to_signed(reader.read_fixed64(), 64)

    raw = reader.read_varint()

    if field_type is FieldType.BOOL:
        return raw != 0
    if field_type in (FieldType.INT32, FieldType.ENUM):
        # Negative values arrive sign-extended to 64 bits
        if _INT32_MAX < raw < _SIGN_EXTENDED_INT32_MIN:
            raise DecodeError(f"Field {field.name}: varint {raw} does not fit {field_type.value}")
        return to_signed(raw, 64)
    if field_type is FieldType.INT64:
        return to_signed(raw, 64)
    if field_type in (FieldType.UINT32, FieldType.SINT32):
        if raw > _UINT32_MAX:
            raise DecodeError(f"Field {field.name}: varint {raw} does not fit {field_type.value}")
        if field_type is FieldType.SINT32:
            return zigzag_decode(raw)
        return raw
    if field_type is FieldType.UINT64:
        return raw
    if field_type is FieldType.SINT64:
        return zigzag_decode(raw)

    raise DecodeError(f"Field {field.name}: unsupported type {field_type}")
