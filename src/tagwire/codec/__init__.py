"""Tagged-field binary codec for tagwire.

This module provides encoding and decoding of records against runtime
schemas using varint tags and length-delimited payloads.
"""

from __future__ import annotations

from .decoder import decode, decode_message
from .encoder import encode, encode_message
from .raw import RawField, decode_raw
from .record import from_named, to_named
from .schema import FieldSchema, FieldType, MessageSchema, WireType

__all__ = [
    "encode",
    "encode_message",
    "decode",
    "decode_message",
    "decode_raw",
    "RawField",
    "to_named",
    "from_named",
    "MessageSchema",
    "FieldSchema",
    "FieldType",
    "WireType",
]
