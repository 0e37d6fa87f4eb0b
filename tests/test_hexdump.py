"""Tests for hex dump rendering."""

import math

from framecraft_mcp.protocol.hexdump import (
    BYTES_PER_LINE,
    HEX_COLUMN_WIDTH,
    byte_count,
    format_copy_hex,
    format_hex_dump,
    format_line,
    hex_to_bytes,
)


def test_empty_buffer():
    dump = format_hex_dump(b"")
    assert dump.lines == []
    assert dump.is_empty
    assert dump.render() == "No data"
    assert dump.summary() == "Total: 0 bytes"


def test_line_count():
    """An n-byte buffer renders as ceil(n / 16) lines."""
    for n in (1, 15, 16, 17, 32, 33, 100, 1024):
        dump = format_hex_dump(bytes(n))
        assert len(dump.lines) == math.ceil(n / BYTES_PER_LINE)
        assert dump.total_bytes == n


def test_column_widths_fixed():
    """Every line has a 48-char hex column and a 16-char ASCII column."""
    for n in (1, 7, 8, 9, 16, 23):
        for line in format_hex_dump(bytes(range(n))).lines:
            assert len(line.hex_bytes) == HEX_COLUMN_WIDTH == 48
            assert len(line.ascii) == 16


def test_full_line():
    line = format_hex_dump(b"ABCDEFGHIJKLMNOP").lines[0]
    assert line.offset == "00000000"
    assert line.hex_bytes == "41 42 43 44 45 46 47 48  49 4A 4B 4C 4D 4E 4F 50"
    assert line.ascii == "ABCDEFGHIJKLMNOP"
    assert line.render() == (
        "00000000: 41 42 43 44 45 46 47 48  49 4A 4B 4C 4D 4E 4F 50  ABCDEFGHIJKLMNOP"
    )


def test_seventeen_bytes():
    """17 bytes: the second line holds one byte and padded columns."""
    dump = format_hex_dump(b"A" * 17)
    assert len(dump.lines) == 2
    second = dump.lines[1]
    assert second.offset == "00000010"
    assert second.hex_bytes == "41" + " " * 46
    assert second.ascii == "A" + " " * 15


def test_non_printable_bytes():
    line = format_hex_dump(b"\x00\x1f\x7f\x20\x7e").lines[0]
    assert line.ascii == "... ~" + " " * 11


def test_lowercase_never_emitted():
    line = format_hex_dump(b"\xab\xcd").lines[0]
    assert line.hex_bytes.startswith("AB CD")


def test_lines_independent():
    """A line depends only on its own bytes and offset."""
    data = bytes(range(40))
    dump = format_hex_dump(data)
    assert dump.lines[1] == format_line(16, data[16:32])
    assert dump.lines[2] == format_line(32, data[32:])


def test_summary_and_dict():
    dump = format_hex_dump(b"hello")
    assert dump.summary() == "Total: 5 bytes"
    d = dump.to_dict()
    assert d["total_bytes"] == 5
    assert d["lines"] == [dump.lines[0].render()]


def test_byte_count_floors():
    assert byte_count("ABC") == 1
    assert byte_count("AA BB\nCC") == 3
    assert byte_count("") == 0


def test_hex_to_bytes():
    assert hex_to_bytes("0a 0B") == b"\x0a\x0b"
    assert hex_to_bytes("ABC") == b"\xab"


def test_hex_to_bytes_invalid():
    try:
        hex_to_bytes("zz")
        assert False, "Should have raised ValueError"
    except ValueError:
        pass


def test_copy_form():
    assert format_copy_hex(b"\x0a\xff\x00") == "0A FF 00"
    assert format_copy_hex(b"") == ""
