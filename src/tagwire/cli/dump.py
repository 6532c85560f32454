"""Raw buffer dump CLI command."""

from __future__ import annotations

from ..codec.raw import decode_raw
from ..codec.schema import WireType
from ..exceptions import DecodeError

_WIRE_NAMES = {
    WireType.VARINT: "varint",
    WireType.I64: "i64",
    WireType.LENGTH_DELIMITED: "length-delimited",
    WireType.I32: "i32",
}

MAX_NESTING = 32


def format_raw(data: bytes, indent: int = 0) -> list[str]:
    """Render every entry in data as text lines, one per field.

    Length-delimited payloads that themselves parse as a message are shown
    as an indented block; otherwise they are shown as a quoted string when
    they are printable UTF-8, or as hex.

    Raises:
        DecodeError: If data is not a well-formed buffer
    """
    pad = "  " * indent
    lines: list[str] = []

    for entry in decode_raw(data):
        label = f"{pad}{entry.number} ({_WIRE_NAMES[entry.wire_type]}"
        if not isinstance(entry.value, bytes):
            lines.append(f"{label}): {entry.value}")
            continue

        payload = entry.value
        label = f"{label}, {len(payload)} bytes)"
        nested = _try_nested(payload, indent + 1)
        if nested is not None:
            lines.append(f"{label} {{")
            lines.extend(nested)
            lines.append(f"{pad}}}")
        else:
            lines.append(f"{label}: {_render_bytes(payload)}")

    return lines


def _try_nested(payload: bytes, indent: int) -> list[str] | None:
    if not payload or indent > MAX_NESTING or _printable(payload):
        return None
    try:
        return format_raw(payload, indent)
    except DecodeError:
        return None


def _printable(payload: bytes) -> bool:
    try:
        text = payload.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return text.isprintable()


def _render_bytes(payload: bytes) -> str:
    if _printable(payload) or not payload:
        return '"' + payload.decode("utf-8").replace('"', '\\"') + '"'
    return payload.hex(" ")
