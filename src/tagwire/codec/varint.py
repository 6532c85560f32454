"""Varint and fixed-width primitives.

This module provides the byte-level writer and reader used by the codec.
Varints are base-128 groups, least-significant first, with the high bit of
every group except the last set as a continuation flag. Fixed-width values
are little-endian.
"""

from __future__ import annotations

import struct

from ..exceptions import MalformedVarint, TruncatedBuffer

MAX_VARINT = (1 << 64) - 1
MAX_VARINT_BYTES = 10


def varint_size(value: int) -> int:
    """Return the number of bytes the varint encoding of value occupies.

    Args:
        value: Unsigned integer (0 .. 2**64 - 1)

    Returns:
        Encoded length in bytes (1-10)

    Raises:
        MalformedVarint: If value does not fit in 64 bits
    """
    if value < 0 or value > MAX_VARINT:
        raise MalformedVarint(f"Varint value out of range: {value}")
    size = 1
    while value > 0x7F:
        value >>= 7
        size += 1
    return size


def zigzag_encode(value: int) -> int:
    """Map a signed 64-bit integer onto an unsigned one (0, -1, 1, -2 -> 0, 1, 2, 3)."""
    return ((value << 1) ^ (value >> 63)) & MAX_VARINT


def zigzag_decode(value: int) -> int:
    """Inverse of zigzag_encode."""
    return (value >> 1) ^ -(value & 1)


def to_signed(value: int, bits: int) -> int:
    """Interpret the low `bits` bits of value as two's complement."""
    value &= (1 << bits) - 1
    if value & (1 << (bits - 1)):
        return value - (1 << bits)
    return value


class BufferWriter:
    """Accumulates encoded primitives into a byte buffer.

    Example:
        >>> writer = BufferWriter()
        >>> writer.write_varint(300)
        >>> writer.write_length_delimited(b"hi")
        >>> writer.to_bytes()
        b'\\xac\\x02\\x02hi'
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    def write_varint(self, value: int) -> None:
        """Write an unsigned integer as a varint.

        Args:
            value: Integer in 0 .. 2**64 - 1

        Raises:
            MalformedVarint: If value is negative or wider than 64 bits
        """
        if value < 0 or value > MAX_VARINT:
            raise MalformedVarint(f"Varint value out of range: {value}")

        while value > 0x7F:
            self._buffer.append(0x80 | (value & 0x7F))
            value >>= 7
        self._buffer.append(value)

    def write_tag(self, field_number: int, wire_type: int) -> None:
        """Write a field tag: (field_number << 3) | wire_type."""
        self.write_varint((field_number << 3) | wire_type)

    def write_fixed32(self, value: int) -> None:
        self._buffer.extend(struct.pack("<I", value & 0xFFFFFFFF))

    def write_fixed64(self, value: int) -> None:
        self._buffer.extend(struct.pack("<Q", value & MAX_VARINT))

    def write_float(self, value: float) -> None:
        self._buffer.extend(struct.pack("<f", value))

    def write_double(self, value: float) -> None:
        self._buffer.extend(struct.pack("<d", value))

    def write_length_delimited(self, data: bytes) -> None:
        """Write a varint length prefix followed by data."""
        self.write_varint(len(data))
        self._buffer.extend(data)

    def __len__(self) -> int:
        return len(self._buffer)

    def to_bytes(self) -> bytes:
        """Return an immutable copy of the buffer."""
        return bytes(self._buffer)


class BufferReader:
    """Reads encoded primitives sequentially from a byte buffer.

    All read methods raise TruncatedBuffer when fewer bytes remain than the
    primitive needs.

    Example:
        >>> reader = BufferReader(b"\\x08\\x7b")
        >>> reader.read_tag()
        (1, 0)
        >>> reader.read_varint()
        123
    """

    def __init__(self, data: bytes) -> None:
        self._data = memoryview(bytes(data))
        self._position = 0

    def read_varint(self) -> int:
        """Read a varint of at most 64 bits.

        Returns:
            Unsigned integer value

        Raises:
            MalformedVarint: If the chain exceeds 64 bits
            TruncatedBuffer: If the buffer ends inside the varint
        """
        result = 0
        shift = 0
        position = self._position
        end = len(self._data)

        for group in range(MAX_VARINT_BYTES):
            if position >= end:
                raise TruncatedBuffer(
                    f"Buffer ended inside a varint at offset {self._position}"
                )
            byte = self._data[position]
            position += 1

            # The tenth group may only carry the 64th bit
            if group == MAX_VARINT_BYTES - 1 and (byte & 0x7F) > 1:
                raise MalformedVarint(
                    f"Varint at offset {self._position} overflows 64 bits"
                )

            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                self._position = position
                return result
            shift += 7

        raise MalformedVarint(
            f"Varint at offset {self._position} is longer than {MAX_VARINT_BYTES} bytes"
        )

    def read_tag(self) -> tuple[int, int]:
        """Read a tag and split it into (field_number, wire_type)."""
        tag = self.read_varint()
        return tag >> 3, tag & 0x7

    def read_bytes(self, num_bytes: int) -> bytes:
        """Read exactly num_bytes raw bytes."""
        if num_bytes > self.bytes_remaining():
            raise TruncatedBuffer(
                f"Not enough bytes: need {num_bytes}, have {self.bytes_remaining()}"
            )
        start = self._position
        self._position += num_bytes
        return bytes(self._data[start : self._position])

    def read_fixed32(self) -> int:
        return int(struct.unpack("<I", self.read_bytes(4))[0])

    def read_fixed64(self) -> int:
        return int(struct.unpack("<Q", self.read_bytes(8))[0])

    def read_float(self) -> float:
        return float(struct.unpack("<f", self.read_bytes(4))[0])

    def read_double(self) -> float:
        return float(struct.unpack("<d", self.read_bytes(8))[0])

    def read_length_delimited(self) -> bytes:
        """Read a varint length prefix and that many bytes."""
        length = self.read_varint()
        return self.read_bytes(length)

    def at_end(self) -> bool:
        return self._position >= len(self._data)

    def bytes_remaining(self) -> int:
        """Return the number of unread bytes."""
        return len(self._data) - self._position

    def position(self) -> int:
        """Return the current read offset in bytes."""
        return self._position
