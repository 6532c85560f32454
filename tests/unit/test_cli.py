"""Tests for CLI tool."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

SCHEMA_FILE = '''
import enum
from tagwire import BaseMessage, FieldSchema, FieldType, MessageSchema, WireField


class Color(enum.Enum):
    RED = 0
    BLUE = 1


class Shape(BaseMessage):
    sides: int = WireField(1, type="uint32")
    color: Color = WireField(2)
    labels: list[str] = WireField(3, default_factory=list)


point = MessageSchema(
    "Point",
    [FieldSchema(1, "x", FieldType.SINT32), FieldSchema(2, "y", FieldType.SINT32)],
)
'''


def _run(*args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "-m", "tagwire.cli.main", *args],
        capture_output=True,
        text=True,
    )


def test_cli_help() -> None:
    """Test CLI --help flag."""
    result = _run("--help")
    assert result.returncode == 0
    assert "tagwire: tagged-field binary codec" in result.stdout
    assert "--decode-raw" in result.stdout
    assert "--analyze" in result.stdout


def test_cli_version() -> None:
    """Test CLI --version flag."""
    result = _run("--version")
    assert result.returncode == 0
    assert "tagwire 0.1.0" in result.stdout


def test_cli_decode_raw_binary(tmp_path: Path) -> None:
    """Test --decode-raw on a binary file."""
    data_file = tmp_path / "person.bin"
    data_file.write_bytes(bytes.fromhex("087b1205416c696365"))

    result = _run("--decode-raw", str(data_file))
    assert result.returncode == 0
    assert result.stdout.splitlines() == [
        "1 (varint): 123",
        '2 (length-delimited, 5 bytes): "Alice"',
    ]


def test_cli_decode_raw_hex(tmp_path: Path) -> None:
    """Test --decode-raw --hex on a text dump."""
    data_file = tmp_path / "person.txt"
    data_file.write_text("08 7B 12 05 41 6C 69 63 65\n")

    result = _run("--decode-raw", str(data_file), "--hex")
    assert result.returncode == 0
    assert "1 (varint): 123" in result.stdout


def test_cli_decode_raw_truncated(tmp_path: Path) -> None:
    """Test --decode-raw on a truncated buffer."""
    data_file = tmp_path / "bad.bin"
    data_file.write_bytes(b"\x12\x05Al")

    result = _run("--decode-raw", str(data_file))
    assert result.returncode == 1
    assert "Error decoding" in result.stderr


def test_cli_analyze(tmp_path: Path) -> None:
    """Test --analyze on a file defining a model and a schema."""
    schema_file = tmp_path / "shapes.py"
    schema_file.write_text(SCHEMA_FILE)

    result = _run("--analyze", str(schema_file))
    assert result.returncode == 0, result.stderr
    assert "2 messages loaded." in result.stdout
    assert "Point" in result.stdout
    assert "Shape" in result.stdout
    assert "repeated" in result.stdout
    assert "LENGTH_DELIMITED" in result.stdout


def test_cli_analyze_example_file() -> None:
    """Test --analyze with a real example file."""
    example_file = Path("examples/address_book.py")
    if not example_file.exists():
        pytest.skip("Example file not found")

    result = _run("--analyze", str(example_file))
    assert result.returncode == 0
    assert "AddressBook" in result.stdout


@pytest.mark.parametrize("flag", ["--analyze", "--decode-raw"])
def test_cli_missing_file(flag: str) -> None:
    """Test commands with a missing file."""
    result = _run(flag, "nonexistent.py")
    assert result.returncode == 1
    assert "Error" in result.stderr or "not found" in result.stderr.lower()
