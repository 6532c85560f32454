"""Exception hierarchy for tagwire.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from TagwireError for easy catching of any tagwire-specific error.
"""

from __future__ import annotations


class TagwireError(Exception):
    """Base exception for all tagwire errors."""

    pass


class SchemaError(TagwireError):
    """Raised when a message schema is invalid.

    Examples:
        - Field number outside 1 .. 2**29 - 1
        - Two fields sharing a name
        - Message field without a nested schema
        - Unsupported annotation on a model field
    """

    pass


class DuplicateFieldNumber(SchemaError):
    """Raised at schema construction when two fields share a field number."""

    def __init__(self, number: int, first: str, second: str) -> None:
        super().__init__(f"Field number {number} is used by both {first!r} and {second!r}")
        self.number = number


class EncodeError(TagwireError):
    """Raised when encoding a record fails.

    Examples:
        - Value out of range for its declared type
        - Python value of the wrong kind (str for an int32 field)
        - Nesting deeper than the configured limit
    """

    pass


class UnknownField(EncodeError):
    """Raised when a record sets a field its schema does not declare."""

    def __init__(self, key: int | str, schema_name: str) -> None:
        super().__init__(f"Field {key!r} is not declared by schema {schema_name}")
        self.key = key


class DecodeError(TagwireError):
    """Raised when decoding binary data fails.

    Examples:
        - Truncated data (buffer ends mid-field)
        - Wire type disagrees with the schema
        - Invalid UTF-8 in a string field
        - Unsupported wire type (groups)
    """

    pass


class TruncatedBuffer(DecodeError):
    """Raised when the buffer ends before a tag or payload is complete."""

    pass


class WireTypeMismatch(DecodeError):
    """Raised when a known field arrives with a wire type its schema does not declare."""

    def __init__(self, field_name: str, number: int, expected: int, actual: int) -> None:
        super().__init__(
            f"Field {field_name} (#{number}): expected wire type {expected}, got {actual}"
        )
        self.number = number
        self.expected = expected
        self.actual = actual


class MalformedVarint(EncodeError, DecodeError):
    """Raised when a varint does not fit in 64 bits.

    On encode this means the value is below -2**63 or at least 2**64 (the
    writer itself takes only 0 .. 2**64 - 1); on decode the
    continuation chain runs past ten groups or the tenth group overflows.
    """

    pass


class FramingError(TagwireError):
    """Raised when framing operations fail.

    Examples:
        - Length prefix larger than the remaining data
        - Trailing bytes after a single frame
    """

    pass
