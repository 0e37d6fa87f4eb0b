"""Tests for frame assembly."""

from framecraft_mcp.models.field import new_field, with_enabled
from framecraft_mcp.models.sequence import set_enabled
from framecraft_mcp.protocol.codec import ValueType, effective_length
from framecraft_mcp.protocol.framing import (
    assemble,
    assemble_hex,
    frame_layout,
    frame_length,
)


def _frame_fields():
    return (
        new_field("Id", length=2, value="1"),
        new_field("Magic", length=4, value="305419896"),
        new_field("Method", is_variable=True, value_type=ValueType.TEXT, value="GET"),
    )


def test_assemble_two_dec_fields():
    """1-byte 3 followed by 4-byte 1."""
    fields = (
        new_field("Type", length=1, value="3"),
        new_field("Seq", length=4, value="1"),
    )
    assert assemble_hex(fields) == "0300000001"


def test_assemble_mixed_kinds():
    assert assemble_hex(_frame_fields()) == "000112345678474554"


def test_assemble_deterministic():
    fields = _frame_fields()
    assert assemble(fields) == assemble(fields)
    assert assemble_hex(fields) == assemble_hex(fields)


def test_disabled_field_contributes_nothing():
    """Disabling a field removes exactly its bytes."""
    fields = _frame_fields()
    full = assemble(fields)
    reduced = assemble(set_enabled(fields, 1, False))
    assert len(full) - len(reduced) == effective_length(fields[1])
    assert reduced.hex().upper() == "0001474554"


def test_frame_length_is_sum_of_enabled():
    fields = _frame_fields()
    assert frame_length(fields) == 2 + 4 + 3
    assert frame_length(fields) == len(assemble(fields))
    assert frame_length(set_enabled(fields, 2, False)) == 6


def test_layout_offsets():
    fields = _frame_fields()
    spans = frame_layout(fields)
    assert [(s.name, s.offset, s.length) for s in spans] == [
        ("Id", 0, 2),
        ("Magic", 2, 4),
        ("Method", 6, 3),
    ]
    assert spans[0].field_id == fields[0].id


def test_layout_skips_disabled():
    fields = set_enabled(_frame_fields(), 0, False)
    spans = frame_layout(fields)
    assert [(s.name, s.offset) for s in spans] == [("Magic", 0), ("Method", 4)]


def test_no_length_autofill():
    """A field named Length holds only what it was given."""
    fields = (
        new_field("Length", length=2, value="0"),
        new_field("Body", is_variable=True, value_type=ValueType.TEXT, value="abc"),
    )
    assert assemble_hex(fields) == "0000616263"


def test_empty_sequences():
    assert assemble(()) == b""
    assert assemble((with_enabled(new_field("a", value="1"), False),)) == b""
    empty_variable = new_field("p", is_variable=True, value_type=ValueType.HEX)
    assert assemble((empty_variable,)) == b""


def test_order_preserved():
    a = new_field("a", value="1")
    b = new_field("b", value="2")
    assert assemble((a, b)) == b"\x01\x02"
    assert assemble((b, a)) == b"\x02\x01"
