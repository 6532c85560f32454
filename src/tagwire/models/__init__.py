"""Pydantic message modeling for tagwire.

This module provides the BaseMessage class and the WireField() helper for
declaring message schemas as pydantic models.
"""

from __future__ import annotations

from .base import BaseMessage
from .fields import WireField

__all__ = [
    "BaseMessage",
    "WireField",
]
