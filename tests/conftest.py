"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import enum

import pytest

from tagwire import FieldSchema, FieldType, MessageSchema


class PhoneType(enum.Enum):
    """Phone type enum used by the address book schemas."""

    MOBILE = 0
    HOME = 1
    WORK = 2


@pytest.fixture
def person_schema() -> MessageSchema:
    """Schema {1: int32 id, 2: string name}."""
    return MessageSchema(
        "Person",
        [
            FieldSchema(1, "id", FieldType.INT32),
            FieldSchema(2, "name", FieldType.STRING),
        ],
    )


@pytest.fixture
def phone_schema() -> MessageSchema:
    """Schema for a phone number with an enum type."""
    return MessageSchema(
        "PhoneNumber",
        [
            FieldSchema(1, "number", FieldType.STRING),
            FieldSchema(2, "type", FieldType.ENUM, enum=PhoneType),
        ],
    )


@pytest.fixture
def contact_schema(phone_schema: MessageSchema) -> MessageSchema:
    """Schema with nested and repeated fields."""
    return MessageSchema(
        "Contact",
        [
            FieldSchema(1, "id", FieldType.INT32),
            FieldSchema(2, "name", FieldType.STRING),
            FieldSchema(3, "email", FieldType.STRING),
            FieldSchema(4, "phones", FieldType.MESSAGE, repeated=True, message=phone_schema),
            FieldSchema(5, "tags", FieldType.STRING, repeated=True),
            FieldSchema(6, "avatar", FieldType.BYTES),
        ],
    )


@pytest.fixture
def sample_contact() -> dict[int, object]:
    """A fully populated Contact record."""
    return {
        1: 1234,
        2: "John Doe",
        3: "jdoe@example.com",
        4: [{1: "555-4321", 2: 1}, {1: "555-0000", 2: 0}],
        5: ["friend", "work"],
        6: b"\x89PNG",
    }


@pytest.fixture
def phone_type() -> type[PhoneType]:
    """The PhoneType enum class."""
    return PhoneType
