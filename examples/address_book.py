#!/usr/bin/env python3
"""Address book example for tagwire.

This example demonstrates:
1. Declaring nested messages with enums and repeated fields as pydantic models
2. Encoding and decoding them
3. Rendering the same data as JSON and as a .proto schema
4. Sending several messages over one byte stream with framing
"""

from __future__ import annotations

import enum
from typing import Optional

from tagwire import (
    BaseMessage,
    WireField,
    decode_message,
    encode_message,
    frame_message,
    iter_frames,
    to_json,
    to_proto_schema,
)
from tagwire.codec import from_named


class PhoneType(enum.Enum):
    """Kind of phone number."""

    MOBILE = 0
    HOME = 1
    WORK = 2


class PhoneNumber(BaseMessage):
    """A phone number and its kind."""

    number: str = WireField(1)
    type: PhoneType = WireField(2, default=PhoneType.HOME)


class Person(BaseMessage):
    """An address book entry."""

    name: str = WireField(1)
    id: int = WireField(2)
    email: Optional[str] = WireField(3, default=None)
    phones: list[PhoneNumber] = WireField(4, default_factory=list)


class AddressBook(BaseMessage):
    """A list of people."""

    people: list[Person] = WireField(1, default_factory=list)


def main() -> None:
    """Run the address book example."""
    print("=" * 60)
    print("tagwire Address Book Example")
    print("=" * 60)
    print()

    # Create a message instance
    print("1. Creating an address book...")
    book = AddressBook(
        people=[
            Person(
                name="John Doe",
                id=1234,
                email="jdoe@example.com",
                phones=[PhoneNumber(number="555-4321", type=PhoneType.HOME)],
            ),
            Person(name="Alice", id=123),
        ]
    )
    print(f"   {len(book.people)} people")
    print()

    # Encode the message
    print("2. Encoding...")
    data = encode_message(book)
    print(f"   Encoded size: {len(data)} bytes")
    print(f"   Hex: {data.hex(' ')}")
    print()

    # Decode the message
    print("3. Decoding...")
    decoded = decode_message(AddressBook, data)
    print(f"   Round-trip {'OK' if decoded == book else 'FAILED'}")
    print()

    # JSON view of the same data
    print("4. JSON view...")
    schema = AddressBook.wire_schema()
    record = from_named(book.model_dump(exclude_none=True), schema)
    print(to_json(record, schema, indent=2))
    print()

    # Schema for protoc users
    print("5. .proto schema...")
    print(to_proto_schema(schema, package="tutorial"))

    # Several messages on one stream
    print("6. Framing a stream of Person messages...")
    stream = b"".join(frame_message(encode_message(person)) for person in book.people)
    for payload in iter_frames(stream):
        person = decode_message(Person, payload)
        print(f"   {person.id}: {person.name}")


if __name__ == "__main__":
    main()
