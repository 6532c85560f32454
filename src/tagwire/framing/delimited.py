"""Length-delimited framing for streams of encoded messages.

Encoded buffers carry no end marker, so a stream of them needs a boundary.
Each frame here is a varint byte count followed by the payload, the same
layout Protocol Buffers uses for delimited message streams.
"""

from __future__ import annotations

from typing import Iterator

from structlog import get_logger

from ..codec.varint import BufferReader, BufferWriter
from ..exceptions import DecodeError, FramingError, MalformedVarint, TruncatedBuffer

logger = get_logger()


def frame_message(payload: bytes) -> bytes:
    """Prefix payload with its varint length.

    Example:
        >>> frame_message(b"Hello")
        b'\\x05Hello'
    """
    writer = BufferWriter()
    writer.write_length_delimited(bytes(payload))
    return writer.to_bytes()


def unframe_message(framed: bytes) -> bytes:
    """Strip the length prefix from a single frame.

    Args:
        framed: Exactly one frame

    Returns:
        Payload

    Raises:
        FramingError: If the prefix is malformed, the payload is short, or
            bytes follow the frame
    """
    if not framed:
        raise FramingError("Cannot unframe empty data")

    reader = BufferReader(framed)
    try:
        payload = reader.read_length_delimited()
    except DecodeError as e:
        raise FramingError(f"Malformed frame: {e}") from e

    if not reader.at_end():
        raise FramingError(
            f"Length mismatch: prefix says {len(payload)} bytes, "
            f"but {reader.bytes_remaining()} bytes follow the payload"
        )
    return payload


def split_frames(data: bytes) -> tuple[list[bytes], bytes]:
    """Split a stream chunk into complete payloads and an incomplete tail.

    The tail is the start of a frame whose bytes have not all arrived yet;
    prepend it to the next chunk read from the stream.

    Args:
        data: Bytes read from a stream

    Returns:
        Tuple of (payloads, remainder)

    Raises:
        FramingError: If a length prefix is not a valid varint
    """
    reader = BufferReader(data)
    payloads: list[bytes] = []
    consumed = 0

    while not reader.at_end():
        try:
            payloads.append(reader.read_length_delimited())
        except TruncatedBuffer:
            break
        except MalformedVarint as e:
            raise FramingError(f"Malformed frame at offset {consumed}: {e}") from e
        consumed = reader.position()

    remainder = bytes(data[consumed:])
    logger.debug("frames split", frames=len(payloads), remainder=len(remainder))
    return payloads, remainder


def iter_frames(data: bytes) -> Iterator[bytes]:
    """Yield each payload from a buffer holding only complete frames.

    Raises:
        FramingError: If the buffer ends inside a frame
    """
    payloads, remainder = split_frames(data)
    yield from payloads
    if remainder:
        raise FramingError(f"Stream ends inside a frame ({len(remainder)} trailing bytes)")

