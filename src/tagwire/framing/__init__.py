"""Message framing utilities for tagwire.

This module provides varint length-delimited framing for sending several
encoded messages over one byte stream.
"""

from __future__ import annotations

from .delimited import frame_message, iter_frames, split_frames, unframe_message

__all__ = [
    "frame_message",
    "unframe_message",
    "split_frames",
    "iter_frames",
]
