"""Runtime message schemas.

A MessageSchema is an immutable set of numbered, typed fields. It can be built
directly from FieldSchema objects or introspected from a pydantic BaseMessage
whose fields are declared with WireField().
"""

from __future__ import annotations

import enum
import types
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo
from structlog import get_logger

from ..exceptions import DuplicateFieldNumber, SchemaError

logger = get_logger()

MAX_FIELD_NUMBER = (1 << 29) - 1


class WireType(enum.IntEnum):
    """On-the-wire payload shapes."""

    VARINT = 0
    I64 = 1
    LENGTH_DELIMITED = 2
    I32 = 5


class FieldType(str, enum.Enum):
    """Semantic field types."""

    INT32 = "int32"
    INT64 = "int64"
    UINT32 = "uint32"
    UINT64 = "uint64"
    SINT32 = "sint32"
    SINT64 = "sint64"
    BOOL = "bool"
    ENUM = "enum"
    FIXED32 = "fixed32"
    FIXED64 = "fixed64"
    SFIXED32 = "sfixed32"
    SFIXED64 = "sfixed64"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    BYTES = "bytes"
    MESSAGE = "message"

    @property
    def wire_type(self) -> WireType:
        return _WIRE_TYPES[self]

    @property
    def bounds(self) -> Optional[tuple[int, int]]:
        """Inclusive integer range for integer types, None otherwise."""
        return _INT_BOUNDS.get(self)

    @property
    def is_64bit(self) -> bool:
        return self in _WIDE_TYPES


_WIRE_TYPES = {
    FieldType.INT32: WireType.VARINT,
    FieldType.INT64: WireType.VARINT,
    FieldType.UINT32: WireType.VARINT,
    FieldType.UINT64: WireType.VARINT,
    FieldType.SINT32: WireType.VARINT,
    FieldType.SINT64: WireType.VARINT,
    FieldType.BOOL: WireType.VARINT,
    FieldType.ENUM: WireType.VARINT,
    FieldType.FIXED64: WireType.I64,
    FieldType.SFIXED64: WireType.I64,
    FieldType.DOUBLE: WireType.I64,
    FieldType.FIXED32: WireType.I32,
    FieldType.SFIXED32: WireType.I32,
    FieldType.FLOAT: WireType.I32,
    FieldType.STRING: WireType.LENGTH_DELIMITED,
    FieldType.BYTES: WireType.LENGTH_DELIMITED,
    FieldType.MESSAGE: WireType.LENGTH_DELIMITED,
}

_INT32 = (-(1 << 31), (1 << 31) - 1)
_INT64 = (-(1 << 63), (1 << 63) - 1)
_UINT32 = (0, (1 << 32) - 1)
_UINT64 = (0, (1 << 64) - 1)

_INT_BOUNDS = {
    FieldType.INT32: _INT32,
    FieldType.SINT32: _INT32,
    FieldType.SFIXED32: _INT32,
    FieldType.ENUM: _INT32,
    FieldType.INT64: _INT64,
    FieldType.SINT64: _INT64,
    FieldType.SFIXED64: _INT64,
    FieldType.UINT32: _UINT32,
    FieldType.FIXED32: _UINT32,
    FieldType.UINT64: _UINT64,
    FieldType.FIXED64: _UINT64,
}

_WIDE_TYPES = frozenset(
    {
        FieldType.INT64,
        FieldType.UINT64,
        FieldType.SINT64,
        FieldType.FIXED64,
        FieldType.SFIXED64,
    }
)


@dataclass(frozen=True)
class FieldSchema:
    """Schema information for a single field.

    Attributes:
        number: Field number, unique within its message (1 .. 2**29 - 1)
        name: Field name
        type: Semantic type
        repeated: Whether the field holds an ordered sequence of values
        message: Nested schema, required when type is MESSAGE
        enum: Enum class naming the values of an ENUM field (optional)
    """

    number: int
    name: str
    type: FieldType
    repeated: bool = False
    message: Optional[MessageSchema] = None
    enum: Optional[type[enum.Enum]] = None

    def __post_init__(self) -> None:
        if not isinstance(self.number, int) or not 1 <= self.number <= MAX_FIELD_NUMBER:
            raise SchemaError(
                f"Field {self.name}: number must be 1-{MAX_FIELD_NUMBER}, got {self.number!r}"
            )
        if not self.name:
            raise SchemaError(f"Field #{self.number} has no name")

        # Accept plain strings ("int32") for convenience
        if not isinstance(self.type, FieldType):
            try:
                object.__setattr__(self, "type", FieldType(self.type))
            except ValueError as err:
                raise SchemaError(f"Field {self.name}: unknown type {self.type!r}") from err

        if self.type is FieldType.MESSAGE and self.message is None:
            raise SchemaError(f"Field {self.name}: message fields require a nested schema")
        if self.type is not FieldType.MESSAGE and self.message is not None:
            raise SchemaError(f"Field {self.name}: nested schema given for {self.type.value}")
        if self.enum is not None and self.type is not FieldType.ENUM:
            raise SchemaError(f"Field {self.name}: enum class given for {self.type.value}")

    @property
    def wire_type(self) -> WireType:
        return self.type.wire_type

    def enum_name(self, value: int) -> Optional[str]:
        """Return the symbolic name of an enum value, or None if undeclared."""
        if self.enum is None:
            return None
        for member in self.enum:
            if member.value == value:
                return member.name
        return None

    def enum_value(self, name: str) -> Optional[int]:
        """Return the integer behind an enum member name, or None if undeclared."""
        if self.enum is None or name not in self.enum.__members__:
            return None
        return int(self.enum[name].value)


class MessageSchema:
    """Schema for an entire message: an ordered set of fields keyed by number.

    Example:
        >>> schema = MessageSchema(
        ...     "Person",
        ...     [FieldSchema(1, "id", FieldType.INT32), FieldSchema(2, "name", FieldType.STRING)],
        ... )
        >>> [field.name for field in schema]
        ['id', 'name']
    """

    def __init__(self, name: str, fields: list[FieldSchema] | tuple[FieldSchema, ...]) -> None:
        """Initialize a schema.

        Args:
            name: Message name
            fields: Field declarations in any order

        Raises:
            DuplicateFieldNumber: If two fields share a number
            SchemaError: If two fields share a name
        """
        self.name = name
        by_number: dict[int, FieldSchema] = {}
        by_name: dict[str, FieldSchema] = {}

        for field in fields:
            if field.number in by_number:
                raise DuplicateFieldNumber(field.number, by_number[field.number].name, field.name)
            if field.name in by_name:
                raise SchemaError(f"Message {name}: field name {field.name!r} used twice")
            by_number[field.number] = field
            by_name[field.name] = field

        self._by_number = dict(sorted(by_number.items()))
        self._by_name = by_name

    @property
    def fields(self) -> tuple[FieldSchema, ...]:
        """Fields in ascending field-number order."""
        return tuple(self._by_number.values())

    def __iter__(self) -> Iterator[FieldSchema]:
        return iter(self._by_number.values())

    def __len__(self) -> int:
        return len(self._by_number)

    def __contains__(self, number: object) -> bool:
        return number in self._by_number

    def __repr__(self) -> str:
        return f"MessageSchema({self.name!r}, {len(self)} fields)"

    def field_by_number(self, number: int) -> Optional[FieldSchema]:
        return self._by_number.get(number)

    def field_by_name(self, name: str) -> Optional[FieldSchema]:
        return self._by_name.get(name)

    @classmethod
    def from_model(cls, model_class: type[BaseModel]) -> MessageSchema:
        """Create a schema from a pydantic model declared with WireField().

        Args:
            model_class: Pydantic model class

        Returns:
            MessageSchema instance

        Raises:
            SchemaError: If a field lacks a number or has an unsupported annotation
        """
        return _ModelIntrospector().build(model_class)


class _ModelIntrospector:
    """Builds schemas from pydantic models, reusing nested schemas."""

    def __init__(self) -> None:
        self._built: dict[type[BaseModel], MessageSchema] = {}
        self._in_progress: set[type[BaseModel]] = set()

    def build(self, model_class: type[BaseModel]) -> MessageSchema:
        if model_class in self._built:
            return self._built[model_class]
        if model_class in self._in_progress:
            raise SchemaError(f"Recursive message {model_class.__name__} is not supported")

        self._in_progress.add(model_class)
        try:
            fields = [
                self._extract_field_schema(name, info)
                for name, info in model_class.model_fields.items()
            ]
        finally:
            self._in_progress.discard(model_class)

        schema = MessageSchema(model_class.__name__, fields)
        self._built[model_class] = schema
        logger.debug("schema built from model", model=model_class.__name__, fields=len(fields))
        return schema

    def _extract_field_schema(self, name: str, field_info: FieldInfo) -> FieldSchema:
        extra = field_info.json_schema_extra
        options = extra.get("tagwire") if isinstance(extra, dict) else None
        if not isinstance(options, dict) or "number" not in options:
            raise SchemaError(f"Field {name}: declare it with WireField(number=...)")

        annotation = field_info.annotation
        if annotation is None:
            raise SchemaError(f"Field {name} has no type annotation")

        annotation = _unwrap_optional(name, annotation)

        repeated = False
        if get_origin(annotation) is list:
            args = get_args(annotation)
            if not args:
                raise SchemaError(f"Field {name}: list fields need an element type")
            repeated = True
            annotation = _unwrap_optional(name, args[0])

        declared = options.get("type")
        message = None
        enum_class = None

        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            field_type = FieldType.MESSAGE
            message = self.build(annotation)
        elif isinstance(annotation, type) and issubclass(annotation, enum.Enum):
            field_type = FieldType.ENUM
            enum_class = annotation
        elif declared is not None:
            try:
                field_type = FieldType(declared)
            except ValueError as err:
                raise SchemaError(f"Field {name}: unknown type {declared!r}") from err
        elif annotation in _DEFAULT_TYPES:
            field_type = _DEFAULT_TYPES[annotation]
        else:
            raise SchemaError(f"Field {name}: unsupported type {annotation}")

        return FieldSchema(
            number=options["number"],
            name=name,
            type=field_type,
            repeated=repeated,
            message=message,
            enum=enum_class,
        )


_DEFAULT_TYPES: dict[Any, FieldType] = {
    bool: FieldType.BOOL,
    int: FieldType.INT32,
    float: FieldType.DOUBLE,
    str: FieldType.STRING,
    bytes: FieldType.BYTES,
}


def _unwrap_optional(name: str, annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        non_none_args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(non_none_args) != 1:
            raise SchemaError(f"Field {name}: complex Union types not supported")
        return non_none_args[0]
    return annotation
