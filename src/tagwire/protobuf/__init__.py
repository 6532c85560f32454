"""Protobuf interoperability for tagwire.

This module renders .proto schema text from tagwire message schemas.
"""

from __future__ import annotations

from .convert import to_proto_schema

__all__ = [
    "to_proto_schema",
]
