#!/usr/bin/env python3
"""Basic usage example for tagwire.

This example demonstrates:
1. Defining a schema at runtime
2. Encoding a record to binary
3. Decoding it back, and under an older schema
4. Calculating sizes and inspecting a buffer without its schema
"""

from __future__ import annotations

from tagwire import (
    FieldSchema,
    FieldType,
    MessageSchema,
    decode,
    decode_raw,
    encode,
    encoded_size,
    field_sizes,
)

PERSON = MessageSchema(
    "Person",
    [
        FieldSchema(1, "id", FieldType.INT32),
        FieldSchema(2, "name", FieldType.STRING),
    ],
)

PERSON_V2 = MessageSchema(
    "Person",
    [
        FieldSchema(1, "id", FieldType.INT32),
        FieldSchema(2, "name", FieldType.STRING),
        FieldSchema(3, "email", FieldType.STRING),
        FieldSchema(4, "scores", FieldType.SINT32, repeated=True),
    ],
)


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("tagwire Basic Usage Example")
    print("=" * 60)
    print()

    record = {1: 123, 2: "Alice"}

    print("1. Field sizes...")
    for name, size in field_sizes(record, PERSON).items():
        print(f"   {name}: {size} bytes")
    print(f"   Total: {encoded_size(record, PERSON)} bytes")
    print()

    print("2. Encoding...")
    data = encode(record, PERSON)
    print(f"   Hex: {data.hex(' ')}")
    print()

    print("3. Decoding...")
    print(f"   {decode(data, PERSON)}")
    print()

    print("4. Forward compatibility...")
    newer = encode({1: 7, 2: "Bob", 3: "bob@example.com", 4: [-3, 10]}, PERSON_V2)
    print(f"   Newer buffer under old schema: {decode(newer, PERSON)}")
    print()

    print("5. Raw view...")
    for entry in decode_raw(newer):
        print(f"   #{entry.number} {entry.wire_type.name}: {entry.value!r}")


if __name__ == "__main__":
    main()
