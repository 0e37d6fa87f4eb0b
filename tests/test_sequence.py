"""Tests for field sequence editing operations."""

from framecraft_mcp.models.field import new_field, with_value
from framecraft_mcp.models.sequence import (
    add_field,
    delete_field,
    find_index,
    insert_after,
    move_down,
    move_field,
    move_up,
    replace_field,
    set_enabled,
    update_field,
)


def _fields():
    return tuple(new_field(name, value=str(i)) for i, name in enumerate("abcd"))


def _names(fields):
    return [f.name for f in fields]


def test_add_field_default():
    fields = _fields()
    updated = add_field(fields)
    assert len(updated) == 5
    assert updated[-1].name == "Field 5"
    assert updated[:4] == fields


def test_add_given_field():
    extra = new_field("x")
    assert add_field((), extra) == (extra,)


def test_insert_after():
    fields = _fields()
    extra = new_field("x")
    assert _names(insert_after(fields, 0, extra)) == ["a", "x", "b", "c", "d"]
    assert _names(insert_after(fields, 3, extra)) == ["a", "b", "c", "d", "x"]
    assert _names(insert_after(fields, -1, extra)) == ["x", "a", "b", "c", "d"]


def test_insert_after_bad_index():
    try:
        insert_after(_fields(), 4)
        assert False, "Should have raised IndexError"
    except IndexError:
        pass


def test_delete_keeps_order():
    fields = _fields()
    updated = delete_field(fields, 1)
    assert _names(updated) == ["a", "c", "d"]
    assert _names(fields) == ["a", "b", "c", "d"]


def test_delete_bad_index_leaves_input():
    fields = _fields()
    try:
        delete_field(fields, 9)
        assert False, "Should have raised IndexError"
    except IndexError:
        pass
    assert len(fields) == 4


def test_move_up_and_down():
    fields = _fields()
    assert _names(move_up(fields, 1)) == ["b", "a", "c", "d"]
    assert _names(move_down(fields, 1)) == ["a", "c", "b", "d"]


def test_move_at_edges_is_noop():
    fields = _fields()
    assert move_up(fields, 0) == fields
    assert move_down(fields, 3) == fields


def test_move_field_keeps_others_in_order():
    fields = _fields()
    assert _names(move_field(fields, 0, 3)) == ["b", "c", "d", "a"]
    assert _names(move_field(fields, 3, 1)) == ["a", "d", "b", "c"]


def test_reorder_keeps_identity_and_value():
    """Moving fields changes only their position."""
    fields = _fields()
    moved = move_field(fields, 0, 2)
    assert set(moved) == set(fields)
    for f in moved:
        original = fields[find_index(fields, f.id)]
        assert f.value == original.value


def test_replace_and_update():
    fields = _fields()
    replaced = replace_field(fields, 2, with_value(fields[2], "42"))
    assert replaced[2].value == "42"
    assert replaced[2].id == fields[2].id

    updated = update_field(fields, fields[1].id, lambda f: with_value(f, "7"))
    assert updated[1].value == "7"
    assert updated[0] == fields[0]


def test_update_unknown_id():
    try:
        update_field(_fields(), "missing", lambda f: f)
        assert False, "Should have raised KeyError"
    except KeyError:
        pass


def test_set_enabled():
    fields = _fields()
    updated = set_enabled(fields, 3, False)
    assert updated[3].enabled is False
    assert fields[3].enabled is True
