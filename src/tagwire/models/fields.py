"""Field declaration helper for BaseMessage models."""

from __future__ import annotations

from typing import Any, Optional, cast

from pydantic import Field
from pydantic.fields import FieldInfo

from ..codec.schema import FieldType
from ..exceptions import SchemaError


def WireField(number: int, *, type: Optional[str | FieldType] = None, **kwargs: Any) -> FieldInfo:
    """Create a numbered message field.

    This is a thin wrapper around Pydantic's Field() that records the field
    number and optional wire-level type in json_schema_extra, where
    MessageSchema.from_model() looks for them.

    Args:
        number: Field number (1 .. 2**29 - 1), stable for the life of the message
        type: Semantic type overriding the annotation default
            (int -> int32, float -> double); e.g. "uint64", "sint32", "fixed32"
        **kwargs: Additional Field() arguments (default, default_factory, ge, le, ...)

    Returns:
        Pydantic FieldInfo suitable for use as a field default.

    Raises:
        SchemaError: If type is not a known FieldType

    Example:
        >>> class Reading(BaseMessage):
        ...     sensor_id: int = WireField(1, type="uint32")
        ...     celsius: float = WireField(2, type="float")
        ...     samples: list[int] = WireField(3, type="sint32", default_factory=list)
    """
    options: dict[str, Any] = {"number": number}
    if type is not None:
        try:
            options["type"] = FieldType(type).value
        except ValueError as err:
            raise SchemaError(f"WireField {number}: unknown type {type!r}") from err
    return cast(FieldInfo, Field(json_schema_extra={"tagwire": options}, **kwargs))
