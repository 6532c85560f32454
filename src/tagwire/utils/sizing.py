"""Message size calculation utilities.

This module provides functions to calculate the encoded size of a record
without actually encoding it.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any, Optional

from ..codec.encoder import check_repeated, is_default_value
from ..codec.schema import FieldSchema, FieldType, MessageSchema, WireType
from ..codec.varint import MAX_VARINT, varint_size, zigzag_encode
from ..exceptions import EncodeError, UnknownField
from ..options import DEFAULT_OPTIONS, CodecOptions


def encoded_size(
    record: Mapping[int, Any], schema: MessageSchema, options: Optional[CodecOptions] = None
) -> int:
    """Calculate the encoded size of a record in bytes.

    The result equals len(encode(record, schema, options)) for any record
    encode() accepts; values are not range-checked here.

    Args:
        record: Mapping from field number to value
        schema: Schema of the record
        options: Codec options (omit_defaults changes the size)

    Returns:
        Size in bytes

    Raises:
        UnknownField: If the record sets a number the schema lacks
        EncodeError: If a value is None or a repeated value is not a list

    Example:
        >>> encoded_size({1: 123, 2: "Alice"}, person)
        9
    """
    return sum(field_sizes(record, schema, options).values())


def field_sizes(
    record: Mapping[int, Any], schema: MessageSchema, options: Optional[CodecOptions] = None
) -> dict[str, int]:
    """Get the encoded size in bytes of each set field, tags included.

    Args:
        record: Mapping from field number to value
        schema: Schema of the record
        options: Codec options

    Returns:
        Dictionary mapping field names to their size in bytes

    Example:
        >>> field_sizes({1: 123, 2: "Alice"}, person)
        {'id': 2, 'name': 7}
    """
    options = options or DEFAULT_OPTIONS
    for number in record:
        if number not in schema:
            raise UnknownField(number, schema.name)

    sizes: dict[str, int] = {}
    for field in schema:
        if field.number not in record:
            continue
        value = record[field.number]
        if value is None:
            raise EncodeError(f"Field {field.name}: None is not a value")
        if field.repeated:
            check_repeated(field, value)
            sizes[field.name] = sum(_entry_size(field, element, options) for element in value)
        elif options.omit_defaults and is_default_value(field, value):
            sizes[field.name] = 0
        else:
            sizes[field.name] = _entry_size(field, value, options)
    return sizes


def _entry_size(field: FieldSchema, value: Any, options: CodecOptions) -> int:
    tag_size = varint_size((field.number << 3) | field.wire_type)
    return tag_size + _payload_size(field, value, options)


def _payload_size(field: FieldSchema, value: Any, options: CodecOptions) -> int:
    if field.wire_type is WireType.I32:
        return 4
    if field.wire_type is WireType.I64:
        return 8

    if field.wire_type is WireType.LENGTH_DELIMITED:
        if field.type is FieldType.MESSAGE:
            assert field.message is not None
            length = encoded_size(value, field.message, options)
        elif field.type is FieldType.STRING:
            length = len(value.encode("utf-8"))
        else:
            length = len(bytes(value))
        return varint_size(length) + length

    if isinstance(value, enum.Enum):
        value = value.value
    if field.type in (FieldType.SINT32, FieldType.SINT64):
        return varint_size(zigzag_encode(value))
    return varint_size(int(value) & MAX_VARINT)

