"""Hex dump rendering for arbitrary byte buffers.

Line layout (16 bytes per line)::

    00000000: 47 45 54 20 2F 69 6E 64  65 78 2E 68 74 6D 6C 20  GET /index.html
    |offset|  |---- group 1 (23) ---|  |---- group 2 (23) ---|  |ascii (16)---|

Short final lines keep the same column widths: the hex groups and the
ASCII column are padded with trailing spaces.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

BYTES_PER_LINE = 16
GROUP_SIZE = 8
GROUP_WIDTH = GROUP_SIZE * 3 - 1  # "XX " * 8 without the trailing space
HEX_COLUMN_WIDTH = GROUP_WIDTH * 2 + 2
EMPTY_TEXT = "No data"

_WHITESPACE = re.compile(r"\s")


@dataclass
class HexDumpLine:
    """One rendered line of a hex dump."""

    offset: str
    hex_bytes: str
    ascii: str

    def render(self) -> str:
        return f"{self.offset}: {self.hex_bytes}  {self.ascii}"


@dataclass
class HexDump:
    """A complete hex dump plus its byte count."""

    lines: list[HexDumpLine] = field(default_factory=list)
    total_bytes: int = 0

    @property
    def is_empty(self) -> bool:
        return self.total_bytes == 0

    def summary(self) -> str:
        return f"Total: {self.total_bytes} bytes"

    def render(self) -> str:
        if self.is_empty:
            return EMPTY_TEXT
        return "\n".join(line.render() for line in self.lines)

    def to_dict(self) -> dict:
        return {
            "lines": [line.render() for line in self.lines],
            "total_bytes": self.total_bytes,
            "summary": self.summary(),
        }


def _ascii_char(byte: int) -> str:
    return chr(byte) if 0x20 <= byte <= 0x7E else "."


def format_line(offset: int, chunk: bytes) -> HexDumpLine:
    """Render up to 16 bytes starting at ``offset``."""
    first = " ".join(f"{b:02X}" for b in chunk[:GROUP_SIZE])
    second = " ".join(f"{b:02X}" for b in chunk[GROUP_SIZE:BYTES_PER_LINE])
    hex_bytes = f"{first.ljust(GROUP_WIDTH)}  {second.ljust(GROUP_WIDTH)}"
    ascii_text = "".join(_ascii_char(b) for b in chunk)
    return HexDumpLine(
        offset=f"{offset:08X}",
        hex_bytes=hex_bytes,
        ascii=ascii_text.ljust(BYTES_PER_LINE),
    )


def format_hex_dump(data: bytes) -> HexDump:
    """Render a buffer as ``ceil(len(data) / 16)`` dump lines.

    Args:
        data: Any byte buffer.

    Returns:
        A :class:`HexDump`; it has no lines for an empty buffer.
    """
    data = bytes(data)
    lines = [
        format_line(offset, data[offset : offset + BYTES_PER_LINE])
        for offset in range(0, len(data), BYTES_PER_LINE)
    ]
    return HexDump(lines=lines, total_bytes=len(data))


def hex_to_bytes(hex_str: str) -> bytes:
    """Parse a hex string that may contain whitespace.

    An unpaired trailing digit is dropped.

    Raises:
        ValueError: If the string contains non-hex characters.
    """
    clean = _WHITESPACE.sub("", hex_str)
    return bytes.fromhex(clean[: len(clean) - len(clean) % 2])


def byte_count(hex_str: str) -> int:
    """Number of whole bytes in a hex string (``floor(digits / 2)``)."""
    return len(_WHITESPACE.sub("", hex_str)) // 2


def format_copy_hex(data: bytes) -> str:
    """Clipboard form: uppercase hex pairs separated by single spaces."""
    return bytes(data).hex(" ").upper()
