"""Schema-less decoding for inspection and debugging."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..exceptions import DecodeError
from .schema import WireType
from .varint import BufferReader


@dataclass(frozen=True)
class RawField:
    """One tag-prefixed entry read without a schema.

    Attributes:
        number: Field number from the tag
        wire_type: Wire type from the tag
        value: int for VARINT/I32/I64 payloads, bytes for LENGTH_DELIMITED
    """

    number: int
    wire_type: WireType
    value: Union[int, bytes]


def decode_raw(data: bytes) -> list[RawField]:
    """List every entry in data without interpreting field types.

    Args:
        data: Encoded bytes

    Returns:
        Entries in encounter order

    Raises:
        TruncatedBuffer: If data ends mid-field
        MalformedVarint: If a varint exceeds 64 bits
        DecodeError: On field number 0 or an unsupported wire type
    """
    reader = BufferReader(data)
    entries: list[RawField] = []

    while not reader.at_end():
        number, wire_type = reader.read_tag()
        if number == 0:
            raise DecodeError(f"Field number 0 at offset {reader.position()}")

        value: Union[int, bytes]
        if wire_type == WireType.VARINT:
            value = reader.read_varint()
        elif wire_type == WireType.I64:
            value = reader.read_fixed64()
        elif wire_type == WireType.I32:
            value = reader.read_fixed32()
        elif wire_type == WireType.LENGTH_DELIMITED:
            value = reader.read_length_delimited()
        else:
            raise DecodeError(f"Unsupported wire type {wire_type} at offset {reader.position()}")

        entries.append(RawField(number, WireType(wire_type), value))

    return entries
