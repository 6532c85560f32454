"""Base message class for schemas declared as pydantic models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from ..codec.decoder import decode_message
from ..codec.encoder import encode_message
from ..codec.schema import MessageSchema


class BaseMessage(BaseModel):
    """Base class for tagwire messages.

    Every field is declared with WireField() to give it a field number and,
    where the annotation alone is ambiguous, a wire-level type:

    Example:
        >>> from typing import Optional
        >>> class Person(BaseMessage):
        ...     id: int = WireField(1)
        ...     name: str = WireField(2)
        ...     email: Optional[str] = WireField(3, default=None)
        ...     lucky_numbers: list[int] = WireField(4, type="sint64", default_factory=list)
        >>> Person.wire_schema().field_by_name("lucky_numbers").type
        <FieldType.SINT64: 'sint64'>
    """

    model_config = ConfigDict(
        # Validate on assignment
        validate_assignment=True,
        # Forbid extra fields not defined in schema
        extra="forbid",
    )

    @classmethod
    def wire_schema(cls) -> MessageSchema:
        """Return the MessageSchema introspected from this class."""
        return MessageSchema.from_model(cls)

    def to_bytes(self, **kwargs: Any) -> bytes:
        """Encode this message; keyword arguments go to encode_message()."""
        return encode_message(self, **kwargs)

    @classmethod
    def from_bytes(cls, data: bytes, **kwargs: Any) -> BaseMessage:
        """Decode an instance of this class from data."""
        return decode_message(cls, data, **kwargs)
