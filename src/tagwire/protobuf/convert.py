"""Protobuf schema rendering.

This module renders a MessageSchema as a .proto text description so that the
same messages can be declared for protoc-based tools. tagwire's wire format
follows the Protocol Buffers encoding, so buffers are interchangeable for the
types both sides declare.
"""

from __future__ import annotations

import enum
from typing import Literal

from ..codec.schema import FieldSchema, FieldType, MessageSchema
from ..exceptions import SchemaError

Syntax = Literal["proto2", "proto3"]


def to_proto_schema(
    schema: MessageSchema,
    *,
    package: str = "",
    syntax: Syntax = "proto3",
) -> str:
    """Render a .proto schema for a message and everything it references.

    Nested message schemas and enum classes are emitted as top-level
    declarations before the messages that use them.

    Args:
        schema: Message schema to render
        package: Optional Protobuf package name
        syntax: Protobuf syntax version ("proto2" or "proto3")

    Returns:
        .proto schema as a string

    Raises:
        SchemaError: If syntax is unknown or two different schemas share a name

    Example:
        >>> print(to_proto_schema(person, package="tutorial"))
        syntax = "proto3";
        package tutorial;
        <BLANKLINE>
        message Person {
          int32 id = 1;
          string name = 2;
        }
    """
    if syntax not in ("proto2", "proto3"):
        raise SchemaError(f"Unknown syntax {syntax!r}")

    messages: dict[str, MessageSchema] = {}
    enums: dict[str, type[enum.Enum]] = {}
    _collect(schema, messages, enums)

    lines = [f'syntax = "{syntax}";']
    if package:
        lines.append(f"package {package};")
    lines.append("")

    for enum_type in enums.values():
        lines.extend(_enum_to_proto(enum_type))
        lines.append("")

    for message in messages.values():
        lines.extend(_message_to_proto(message, syntax))
        lines.append("")

    return "\n".join(lines).rstrip("\n") + "\n"


def _collect(
    schema: MessageSchema,
    messages: dict[str, MessageSchema],
    enums: dict[str, type[enum.Enum]],
) -> None:
    """Gather referenced schemas depth-first so dependencies come first."""
    if schema.name in messages:
        if messages[schema.name] is not schema:
            raise SchemaError(f"Two different schemas are named {schema.name}")
        return

    for field in schema:
        if field.message is not None:
            _collect(field.message, messages, enums)
        if field.enum is not None:
            enums.setdefault(field.enum.__name__, field.enum)

    messages[schema.name] = schema


def _message_to_proto(schema: MessageSchema, syntax: Syntax) -> list[str]:
    lines = [f"message {schema.name} {{"]
    for field in schema:
        if field.repeated:
            label = "repeated "
        elif syntax == "proto2":
            label = "optional "
        else:
            label = ""
        lines.append(f"  {label}{_proto_type(field)} {field.name} = {field.number};")
    lines.append("}")
    return lines


def _proto_type(field: FieldSchema) -> str:
    if field.type is FieldType.MESSAGE:
        assert field.message is not None
        return field.message.name
    if field.type is FieldType.ENUM:
        # Enum fields without a declared class travel as plain int32
        return field.enum.__name__ if field.enum is not None else "int32"
    return field.type.value


def _enum_to_proto(enum_type: type[enum.Enum]) -> list[str]:
    """Render an enum declaration using the Python member names."""
    lines = [f"enum {enum_type.__name__} {{"]
    for member in enum_type:
        lines.append(f"  {member.name} = {int(member.value)};")
    lines.append("}")
    return lines

