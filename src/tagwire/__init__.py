"""tagwire: tagged-field binary codec

A Python library for encoding records into the compact tag/length/value wire
format used by Protocol Buffers, driven by runtime schemas instead of
generated code.

Key Features:
- Varint, zigzag, fixed-width and length-delimited payloads
- Nested messages and repeated fields
- Forward-compatible decoding (unknown fields are skipped)
- Schemas declared directly or as pydantic models
- JSON rendering and .proto schema output

Quick Start:
    >>> from tagwire import FieldSchema, FieldType, MessageSchema, decode, encode
    >>>
    >>> person = MessageSchema(
    ...     "Person",
    ...     [FieldSchema(1, "id", FieldType.INT32), FieldSchema(2, "name", FieldType.STRING)],
    ... )
    >>> data = encode({1: 123, 2: "Alice"}, person)
    >>> data.hex()
    '087b1205416c696365'
    >>> decode(data, person)
    {1: 123, 2: 'Alice'}
"""

from __future__ import annotations

from .codec import (
    FieldSchema,
    FieldType,
    MessageSchema,
    RawField,
    WireType,
    decode,
    decode_message,
    decode_raw,
    encode,
    encode_message,
    from_named,
    to_named,
)
from .exceptions import (
    DecodeError,
    DuplicateFieldNumber,
    EncodeError,
    FramingError,
    MalformedVarint,
    SchemaError,
    TagwireError,
    TruncatedBuffer,
    UnknownField,
    WireTypeMismatch,
)
from .framing import frame_message, iter_frames, split_frames, unframe_message
from .jsonfmt import from_json, to_json
from .models import BaseMessage, WireField
from .options import DEFAULT_OPTIONS, CodecOptions
from .protobuf import to_proto_schema
from .utils import encoded_size, field_sizes

__version__ = "0.1.0"

__all__ = [
    # Core API
    "encode",
    "decode",
    "encode_message",
    "decode_message",
    "decode_raw",
    "RawField",
    "to_named",
    "from_named",
    # Schema
    "MessageSchema",
    "FieldSchema",
    "FieldType",
    "WireType",
    "BaseMessage",
    "WireField",
    # Configuration
    "CodecOptions",
    "DEFAULT_OPTIONS",
    # Exceptions
    "TagwireError",
    "SchemaError",
    "DuplicateFieldNumber",
    "EncodeError",
    "UnknownField",
    "DecodeError",
    "TruncatedBuffer",
    "WireTypeMismatch",
    "MalformedVarint",
    "FramingError",
    # Framing
    "frame_message",
    "unframe_message",
    "split_frames",
    "iter_frames",
    # Text formats
    "to_json",
    "from_json",
    "to_proto_schema",
    # Sizing
    "encoded_size",
    "field_sizes",
    # Version
    "__version__",
]
