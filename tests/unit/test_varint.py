"""Unit tests for varint and fixed-width primitives."""

from __future__ import annotations

import pytest

from tagwire.codec.varint import (
    BufferReader,
    BufferWriter,
    to_signed,
    varint_size,
    zigzag_decode,
    zigzag_encode,
)
from tagwire.exceptions import DecodeError, EncodeError, MalformedVarint, TruncatedBuffer


class TestBufferWriter:
    """Test BufferWriter functionality."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0, b"\x00"),
            (1, b"\x01"),
            (127, b"\x7f"),
            (128, b"\x80\x01"),
            (150, b"\x96\x01"),
            (300, b"\xac\x02"),
            (2**64 - 1, b"\xff" * 9 + b"\x01"),
        ],
    )
    def test_write_varint(self, value: int, expected: bytes) -> None:
        """Test varint byte layout."""
        writer = BufferWriter()
        writer.write_varint(value)
        assert writer.to_bytes() == expected

    def test_write_varint_too_large(self) -> None:
        """Test 2**64 does not fit."""
        writer = BufferWriter()
        with pytest.raises(MalformedVarint):
            writer.write_varint(2**64)

    def test_write_varint_negative(self) -> None:
        """Test negative values are rejected."""
        writer = BufferWriter()
        with pytest.raises(MalformedVarint):
            writer.write_varint(-1)

    def test_malformed_varint_is_encode_and_decode_error(self) -> None:
        """Test MalformedVarint sits under both error families."""
        assert issubclass(MalformedVarint, EncodeError)
        assert issubclass(MalformedVarint, DecodeError)

    def test_write_tag(self) -> None:
        """Test tag composition."""
        writer = BufferWriter()
        writer.write_tag(1, 0)
        writer.write_tag(2, 2)
        writer.write_tag(16, 0)
        assert writer.to_bytes() == b"\x08\x12\x80\x01"

    def test_write_fixed(self) -> None:
        """Test little-endian fixed-width output."""
        writer = BufferWriter()
        writer.write_fixed32(1000)
        writer.write_fixed64(1)
        assert writer.to_bytes() == b"\xe8\x03\x00\x00" + b"\x01" + b"\x00" * 7
        assert len(writer) == 12

    def test_write_length_delimited(self) -> None:
        """Test length prefix."""
        writer = BufferWriter()
        writer.write_length_delimited(b"Alice")
        assert writer.to_bytes() == b"\x05Alice"


class TestBufferReader:
    """Test BufferReader functionality."""

    @pytest.mark.parametrize("value", [0, 127, 128, 2**35, 2**64 - 1])
    def test_varint_boundaries(self, value: int) -> None:
        """Test boundary values round-trip exactly."""
        writer = BufferWriter()
        writer.write_varint(value)
        reader = BufferReader(writer.to_bytes())

        assert reader.read_varint() == value
        assert reader.at_end()

    def test_eleven_group_chain(self) -> None:
        """Test a chain longer than ten groups is rejected."""
        reader = BufferReader(b"\x80" * 10 + b"\x01")
        with pytest.raises(MalformedVarint):
            reader.read_varint()

    def test_tenth_group_overflow(self) -> None:
        """Test a tenth group carrying more than the 64th bit is rejected."""
        reader = BufferReader(b"\xff" * 9 + b"\x02")
        with pytest.raises(MalformedVarint):
            reader.read_varint()

    def test_truncated_varint(self) -> None:
        """Test the buffer ending inside a varint."""
        reader = BufferReader(b"\x96")
        with pytest.raises(TruncatedBuffer):
            reader.read_varint()

    def test_empty_buffer(self) -> None:
        """Test reading from an empty buffer."""
        reader = BufferReader(b"")
        assert reader.at_end()
        with pytest.raises(TruncatedBuffer):
            reader.read_varint()

    def test_read_tag(self) -> None:
        """Test tag split."""
        reader = BufferReader(b"\x12")
        assert reader.read_tag() == (2, 2)

    def test_read_bytes_truncated(self) -> None:
        """Test length prefix longer than the data."""
        reader = BufferReader(b"\x05Ali")
        with pytest.raises(TruncatedBuffer, match="need 5"):
            reader.read_length_delimited()

    def test_read_fixed(self) -> None:
        """Test fixed-width reads."""
        reader = BufferReader(b"\xff\xff\xff\xff" + b"\x00\x00\x00\x00\x00\x00\xf0\x3f")
        assert reader.read_fixed32() == 0xFFFFFFFF
        assert reader.read_double() == 1.0
        assert reader.bytes_remaining() == 0

    def test_position(self) -> None:
        """Test position tracking."""
        reader = BufferReader(b"\xac\x02\x01")
        reader.read_varint()
        assert reader.position() == 2
        assert reader.bytes_remaining() == 1


class TestIntegerMappings:
    """Test zigzag and two's complement helpers."""

    @pytest.mark.parametrize(
        ("signed", "unsigned"),
        [(0, 0), (-1, 1), (1, 2), (-2, 3), (2**31 - 1, 2**32 - 2), (-(2**63), 2**64 - 1)],
    )
    def test_zigzag(self, signed: int, unsigned: int) -> None:
        """Test zigzag mapping in both directions."""
        assert zigzag_encode(signed) == unsigned
        assert zigzag_decode(unsigned) == signed

    def test_to_signed(self) -> None:
        """Test two's complement interpretation."""
        assert to_signed(0xFFFFFFFF, 32) == -1
        assert to_signed(2**64 - 1, 64) == -1
        assert to_signed(0x7FFFFFFF, 32) == 2**31 - 1

    def test_varint_size(self) -> None:
        """Test encoded length calculation."""
        assert varint_size(0) == 1
        assert varint_size(127) == 1
        assert varint_size(128) == 2
        assert varint_size(2**64 - 1) == 10
        with pytest.raises(MalformedVarint):
            varint_size(2**64)
