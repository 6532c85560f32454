"""Schema analysis CLI command."""

from __future__ import annotations

import importlib.util
import inspect
import sys
from pathlib import Path

from ..codec.schema import MessageSchema
from ..models.base import BaseMessage


def load_schemas(file_path: Path) -> list[MessageSchema]:
    """Collect the schemas defined in a Python file.

    Both module-level MessageSchema instances and BaseMessage subclasses
    defined in the file (not imported into it) are returned: instances in
    definition order, then classes by name.

    Args:
        file_path: Path to Python file containing schema definitions
    """
    spec = importlib.util.spec_from_file_location("user_module", file_path)
    if spec is None or spec.loader is None:
        raise ValueError(f"Could not load module from {file_path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules["user_module"] = module
    spec.loader.exec_module(module)

    schemas: list[MessageSchema] = []
    for value in vars(module).values():
        if isinstance(value, MessageSchema):
            schemas.append(value)

    for _name, obj in inspect.getmembers(module, inspect.isclass):
        if obj is not BaseMessage and issubclass(obj, BaseMessage):
            if obj.__module__ == "user_module":
                schemas.append(obj.wire_schema())

    return schemas


def analyze_file(file_path: Path) -> None:
    """Print the field table of every schema in a Python file."""
    schemas = load_schemas(file_path)

    if not schemas:
        print(f"No schemas found in {file_path}")
        return

    print("|" * 7, "tagwire: tagged-field binary codec", "|" * 7)
    print(f"{len(schemas)} message{'s' if len(schemas) != 1 else ''} loaded.")
    print()

    for schema in schemas:
        analyze_schema(schema)


def analyze_schema(schema: MessageSchema) -> None:
    """Print a single schema's fields, one row per field number."""
    print(f"{'=' * 19} {schema.name} {'=' * 19}")
    print(f"{'#':>6}  {'name':<20}{'type':<12}{'wire':<18}label")

    for field in schema:
        if field.message is not None:
            type_name = field.message.name
        elif field.enum is not None:
            type_name = field.enum.__name__
        else:
            type_name = field.type.value
        label = "repeated" if field.repeated else ""
        print(
            f"{field.number:>6}  {field.name:<20}{type_name:<12}"
            f"{field.wire_type.name:<18}{label}".rstrip()
        )
    print()
