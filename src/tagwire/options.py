"""Codec configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CodecOptions:
    """Options shared by encode() and decode().

    Attributes:
        omit_defaults: Skip singular scalar fields holding their zero value
            (0, 0.0, False, "", b"") when encoding, proto3 style. Default False:
            every field the record sets is emitted, zero included.
        max_depth: Maximum message nesting depth accepted when encoding or
            decoding (default 64). The top-level message is depth 1.

    Examples:
        ```python
        from tagwire import CodecOptions, encode

        compact = CodecOptions(omit_defaults=True)
        data = encode({1: 0, 2: "Alice"}, schema, options=compact)
        ```
    """

    omit_defaults: bool = False
    max_depth: int = 64

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth}")


DEFAULT_OPTIONS = CodecOptions()
